"""Merge-based intersection of sorted vertex lists."""

from __future__ import annotations

from collections.abc import Iterator, Sequence

__all__ = ["intersect_merge", "count_merge"]


def _common(left: Sequence[int], right: Sequence[int]) -> Iterator[int]:
    """Yield the elements shared by two ascending sequences, in order."""
    if not left or not right:
        return
    if len(left) > len(right):
        left, right = right, left
    li = ri = 0
    lc, rc = len(left), len(right)
    while li < lc and ri < rc:
        a, b = left[li], right[ri]
        if a < b:
            li += 1
        elif a > b:
            ri += 1
        else:
            yield a
            li += 1
            ri += 1


def intersect_merge(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Return the ascending list of elements present in both sorted inputs."""
    return list(_common(left, right))


def count_merge(left: Sequence[int], right: Sequence[int]) -> int:
    """Return how many elements the two sorted inputs have in common."""
    return sum(1 for _ in _common(left, right))