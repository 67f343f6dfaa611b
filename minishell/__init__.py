"""Shell building blocks: expansion, builtins, redirections, heredocs and pipelines."""

__version__ = "0.1.0"