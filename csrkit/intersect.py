"""Hybrid set intersection: merge for balanced inputs, galloping for skewed ones."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from csrkit.merge import count_merge, intersect_merge

__all__ = [
    "SetIntersection",
    "intersect_galloping",
    "count_galloping",
    "galloping_search",
    "binary_search",
]

# Size ratio beyond which candidate generation switches to galloping.
CANDIDATE_SKEW_RATIO = 50
# Size ratio beyond which counting switches to galloping.
COUNT_SKEW_RATIO = 32
# Below this many elements the binary search falls back to a linear scan.
_LINEAR_FALLBACK = 16


def binary_search(array: Sequence[int], begin: int, end: int, target: int) -> int:
    """Return the first index in ``[begin, end)`` whose value is ``>= target``,
    or ``end`` if there is none."""
    lo, hi = begin, end
    while hi - lo >= _LINEAR_FALLBACK:
        mid = (lo + hi) // 2
        value = array[mid]
        if value == target:
            return mid
        if value < target:
            lo = mid + 1
        else:
            hi = mid
    return next((i for i in range(lo, hi) if array[i] >= target), hi)


def galloping_search(array: Sequence[int], begin: int, end: int, target: int) -> int:
    """Exponential search for the first index in ``[begin, end)`` whose value
    is ``>= target``; returns ``end`` if every value is smaller."""
    if begin >= end:
        raise ValueError(f"empty search range [{begin}, {end})")
    if array[end - 1] < target:
        return end
    for offset in range(3):
        if array[begin + offset] >= target:
            return begin + offset
    jump = 4
    while True:
        peek = begin + jump
        if peek >= end:
            return binary_search(array, begin + (jump >> 1) + 1, end, target)
        if array[peek] < target:
            jump <<= 1
        elif array[peek] == target:
            return peek
        else:
            return binary_search(array, begin + (jump >> 1) + 1, peek + 1, target)


def _galloping_common(left: Sequence[int], right: Sequence[int]) -> Iterator[int]:
    """Yield the elements shared by two ascending sequences, galloping
    through the longer one."""
    if not left or not right:
        return
    if len(left) > len(right):
        left, right = right, left
    lc, rc = len(left), len(right)
    li = ri = 0
    while True:
        while left[li] < right[ri]:
            li += 1
            if li >= lc:
                return
        ri = galloping_search(right, ri, rc, left[li])
        if ri >= rc:
            return
        if left[li] == right[ri]:
            yield left[li]
            li += 1
            ri += 1
            if li >= lc or ri >= rc:
                return


def intersect_galloping(left: Sequence[int], right: Sequence[int]) -> list[int]:
    """Return the ascending intersection of two sorted sequences."""
    return list(_galloping_common(left, right))


def count_galloping(left: Sequence[int], right: Sequence[int]) -> int:
    """Return the size of the intersection of two sorted sequences."""
    return sum(1 for _ in _galloping_common(left, right))


def _skewed(left_count: int, right_count: int, ratio: int) -> bool:
    return left_count // ratio > right_count or right_count // ratio > left_count


@dataclass
class SetIntersection:
    """Chooses an intersection strategy from the relative sizes of the inputs.

    With ``hybrid`` off, the merge strategy is always used. The counters
    record which strategy :meth:`compute_candidates` picked.
    """

    hybrid: bool = True
    galloping_count: int = 0
    merge_count: int = 0

    def compute_candidates(self, left: Sequence[int], right: Sequence[int]) -> list[int]:
        """Return the common elements of two sorted sequences."""
        if not self.hybrid:
            return intersect_merge(left, right)
        if _skewed(len(left), len(right), CANDIDATE_SKEW_RATIO):
            self.galloping_count += 1
            return intersect_galloping(left, right)
        self.merge_count += 1
        return intersect_merge(left, right)

    def get_num(self, left: Sequence[int], right: Sequence[int]) -> int:
        """Return the number of common elements of two sorted sequences."""
        if self.hybrid and _skewed(len(left), len(right), COUNT_SKEW_RATIO):
            return count_galloping(left, right)
        return count_merge(left, right)