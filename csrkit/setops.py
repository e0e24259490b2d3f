"""Label-filtered set operations over neighbour lists of a labelled graph."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from csrkit.graph import Graph
from csrkit.vertexset import VertexSet

__all__ = [
    "intersect_num",
    "intersect_set",
    "difference_num",
    "difference_set",
    "difference_num_edgeinduced",
    "difference_set_edgeinduced",
]

Source = int | Iterable[int]


def _labels(graph: Graph) -> list[int]:
    if graph.vlabels is None:
        raise ValueError("the graph has no vertex labels")
    return graph.vlabels


def _elements(graph: Graph, source: Source) -> list[int]:
    """Neighbours of ``source`` if it is a vertex, else the given sorted ids."""
    if isinstance(source, int):
        return list(graph.neighbors(source))
    return list(source)


def _common(left: Sequence[int], right: Sequence[int]) -> Iterator[int]:
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a <= b:
            i += 1
        if b <= a:
            j += 1
        if a == b:
            yield a


def _difference(left: Sequence[int], right: Sequence[int]) -> Iterator[int]:
    i = j = 0
    while i < len(left) and j < len(right):
        a, b = left[i], right[j]
        if a <= b:
            i += 1
        if b <= a:
            j += 1
        if a < b:
            yield a
    yield from left[i:]


def _intersect(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _labels(graph)
    right = list(graph.neighbors(u))
    return (a for a in _common(_elements(graph, source), right) if labels[a] == label)


def _diff(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _labels(graph)
    right = list(graph.neighbors(u))
    return (
        a
        for a in _difference(_elements(graph, source), right)
        if a != u and labels[a] == label
    )


def _diff_edgeinduced(graph: Graph, source: Source, u: int, label: int) -> Iterator[int]:
    labels = _labels(graph)
    return (w for w in _elements(graph, source) if w != u and labels[w] == label)


def intersect_num(graph: Graph, source: Source, u: int, label: int) -> int:
    """Count common neighbours of ``source`` and ``u`` that carry ``label``.

    ``source`` is a vertex or an ascending sequence of vertex ids.
    """
    return sum(1 for _ in _intersect(graph, source, u, label))


def intersect_set(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """Return common neighbours of ``source`` and ``u`` that carry ``label``."""
    return VertexSet.of(_intersect(graph, source, u, label))


def difference_num(graph: Graph, source: Source, u: int, label: int) -> int:
    """Count elements of ``source`` outside ``N(u)``, other than ``u``, with ``label``."""
    return sum(1 for _ in _diff(graph, source, u, label))


def difference_set(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """Return elements of ``source`` outside ``N(u)``, other than ``u``, with ``label``."""
    return VertexSet.of(_diff(graph, source, u, label))


def difference_num_edgeinduced(graph: Graph, source: Source, u: int, label: int) -> int:
    """Count elements of ``source`` other than ``u`` that carry ``label``."""
    return sum(1 for _ in _diff_edgeinduced(graph, source, u, label))


def difference_set_edgeinduced(graph: Graph, source: Source, u: int, label: int) -> VertexSet:
    """Return elements of ``source`` other than ``u`` that carry ``label``."""
    return VertexSet.of(_diff_edgeinduced(graph, source, u, label))