"""Sorted vertex sets with the difference operations used in pattern mining."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

__all__ = ["VertexSet"]


@dataclass(frozen=True)
class VertexSet:
    """An ascending sequence of vertex ids, optionally owned by vertex ``vid``.

    ``vid`` is the vertex whose neighbourhood the set holds; it is excluded
    from the result of a difference taken against this set.
    """

    elements: tuple[int, ...] = field(default_factory=tuple)
    vid: int | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))

    @classmethod
    def of(cls, elements: Iterable[int], vid: int | None = None) -> "VertexSet":
        """Build a set from any iterable of ascending vertex ids."""
        return cls(tuple(elements), vid)

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[int]:
        return iter(self.elements)

    def __getitem__(self, index: int) -> int:
        return self.elements[index]

    def __contains__(self, item: object) -> bool:
        return item in self.elements

    def _difference(self, other: "VertexSet", upper: int | None) -> Iterator[int]:
        right = other.elements
        j, n = 0, len(right)
        for x in self.elements:
            if upper is not None and x >= upper:
                break
            while j < n and right[j] < x:
                j += 1
            if j < n and right[j] == x:
                j += 1
                continue
            if x != other.vid:
                yield x

    def difference(self, other: "VertexSet", upper: int | None = None) -> "VertexSet":
        """Return elements of this set absent from ``other`` and not equal to
        ``other.vid``; with ``upper``, only elements below it are kept."""
        return VertexSet(tuple(self._difference(other, upper)), self.vid)

    def difference_count(self, other: "VertexSet", upper: int | None = None) -> int:
        """Return the size of :meth:`difference` without building it."""
        return sum(1 for _ in self._difference(other, upper))