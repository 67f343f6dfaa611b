"""Helpers for working with lists of strings such as argument vectors and environments."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO


def copy_prefix(arr: Sequence[str], n: int) -> list[str]:
    """Return a new list holding the first ``n`` items of ``arr``.

    If ``arr`` is shorter than ``n`` the whole of it is copied.
    """
    if not arr:
        raise ValueError("cannot copy an empty array")
    if n < 0:
        raise ValueError("prefix length must not be negative")
    return list(arr[:n])


def append_item(item: str | None, arr: Sequence[str] | None) -> list[str]:
    """Return a new list made of ``arr`` followed by ``item``."""
    if item is None:
        raise ValueError("no string present, nothing to add")
    if arr is None:
        raise ValueError("no array present, nothing to edit")
    return [*arr, item]


def print_prefixed(
    prefix: str | None, arr: Sequence[str] | None, stream: TextIO | None = None
) -> int:
    """Write each item of ``arr`` on its own line after ``prefix``.

    Returns the number of characters written.
    """
    if not arr:
        raise ValueError("array doesn't exist")
    if prefix is None:
        raise ValueError("nothing to print before array")
    out = stream if stream is not None else sys.stdout
    count = 0
    for item in arr:
        line = f"{prefix}{item}\n"
        out.write(line)
        count += len(line)
    return count


def position(item: str | None, arr: Sequence[str] | None) -> int:
    """Return the 1-based position of ``item`` in ``arr``, or 0 if absent."""
    if item is None or arr is None:
        raise ValueError("both an item and an array are required")
    for number, candidate in enumerate(arr, start=1):
        if candidate == item:
            return number
    return 0


def size_difference(arr1: Sequence[str] | None, arr2: Sequence[str] | None) -> int:
    """Return the absolute difference between the lengths of two arrays."""
    if arr1 is None or arr2 is None:
        raise ValueError("two arrays are required")
    return abs(len(arr1) - len(arr2))


def _compare_strings(left: str, right: str) -> int:
    for a, b in zip(left, right):
        if a != b:
            return ord(a) - ord(b)
    if len(left) > len(right):
        return ord(left[len(right)])
    if len(right) > len(left):
        return -ord(right[len(left)])
    return 0


def compare_items(arr1: Sequence[str] | None, arr2: Sequence[str] | None) -> int:
    """Compare two arrays item by item over their common length.

    Returns 0 when the shared items are equal, otherwise a negative or
    positive number ordering the first pair of items that differ.
    """
    if arr1 is None or arr2 is None:
        raise ValueError("two arrays are required")
    for left, right in zip(arr1, arr2):
        difference = _compare_strings(left, right)
        if difference:
            return difference
    return 0


def remove_first_containing(arr: Sequence[str], text: str | None) -> list[str]:
    """Return a copy of ``arr`` without its first item that contains ``text``.

    If no item contains ``text`` (or ``text`` is None) the copy is unchanged.
    """
    result = list(arr)
    if text is None:
        return result
    for index, item in enumerate(result):
        if text in item:
            del result[index]
            break
    return result


def fetch_containing(arr: Sequence[str] | None, text: str | None) -> str | None:
    """Return the tail of the first item containing ``text``, starting at the match."""
    if arr is None or text is None:
        return None
    for item in arr:
        index = item.find(text)
        if index != -1:
            return item[index:]
    return None


def locate_prefix(text: str | None, arr: Sequence[str] | None) -> str | None:
    """Return the first item of ``arr`` that starts with ``text``."""
    if arr is None or text is None:
        return None
    return next((item for item in arr if item.startswith(text)), None)