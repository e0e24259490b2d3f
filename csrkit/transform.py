"""Whole-graph rewrites: cleaning neighbour lists and symmetrizing edges."""

from __future__ import annotations

from itertools import accumulate
from typing import NamedTuple

from csrkit.graph import Graph

__all__ = ["CleanReport", "sort_and_clean_neighbors", "symmetrize"]


class CleanReport(NamedTuple):
    """What :func:`sort_and_clean_neighbors` removed from a graph."""

    selfloops: int
    redundants: int


def _install(graph: Graph, rows: list[list[int]]) -> None:
    """Replace the graph's CSR arrays by the given neighbour lists."""
    graph.vertices = list(accumulate((len(row) for row in rows), initial=0))
    graph.edges = [u for row in rows for u in row]
    if not graph.directed:
        graph.reverse_vertices = graph.vertices
        graph.reverse_edges = graph.edges
    elif graph.has_reverse:
        graph.build_reverse_graph()


def sort_and_clean_neighbors(graph: Graph, outfile_prefix: str = "") -> CleanReport:
    """Sort every neighbour list and drop self loops and repeated edges.

    The graph is changed in place. With ``outfile_prefix``, the cleaned row
    offsets and edges are also written to ``<prefix>.vertex.bin`` and
    ``<prefix>.edge.bin``.
    """
    rows: list[list[int]] = []
    num_selfloops = 0
    num_redundants = 0
    for v in range(graph.n_vertices):
        kept: list[int] = []
        previous: int | None = None
        for u in sorted(graph.neighbors(v)):
            if u == v:
                num_selfloops += 1
            elif u == previous:
                num_redundants += 1
            else:
                if not 0 <= u < graph.n_vertices:
                    raise ValueError(f"neighbour {u} of vertex {v} out of range")
                kept.append(u)
            previous = u
        rows.append(kept)
    _install(graph, rows)
    if outfile_prefix:
        graph.write_to_file(outfile_prefix, vertices=True, edges=True)
    return CleanReport(num_selfloops, num_redundants)


def symmetrize(graph: Graph) -> int:
    """Add the reverse of every edge that lacks one and sort all neighbour lists.

    The neighbour lists must already be sorted and free of self loops and
    repeated edges. Returns the number of edges added.
    """
    n = graph.n_vertices
    rows = [list(graph.neighbors(v)) for v in range(n)]
    extra: list[list[int]] = [[] for _ in range(n)]
    for v, row in enumerate(rows):
        for i, u in enumerate(row):
            if not 0 <= u < n:
                raise ValueError(f"neighbour {u} of vertex {v} out of range")
            if u == v:
                raise ValueError(f"vertex {v} has a self loop")
            if i > 0 and u == row[i - 1]:
                raise ValueError(f"vertex {v} has a repeated edge to {u}")
            if not graph.binary_search(v, graph.vertices[u], graph.vertices[u + 1]):
                extra[u].append(v)
    num_new_edges = sum(len(added) for added in extra)
    _install(graph, [sorted(row + added) for row, added in zip(rows, extra)])
    return num_new_edges