"""Core decomposition of a graph by bucketed degree peeling."""

from __future__ import annotations

from typing import NamedTuple

from csrkit.graph import Graph

__all__ = ["CoreTable", "core_numbers", "build_core_table"]


class CoreTable(NamedTuple):
    """Core number of every vertex and how many vertices have a core above 1."""

    cores: list[int]
    core_length: int


def core_numbers(graph: Graph) -> list[int]:
    """Return the core number of every vertex, following outgoing edges."""
    nv = graph.n_vertices
    core = [graph.degree(v) for v in range(nv)]
    md = max(core, default=0)

    bins = [0] * (md + 1)
    for d in core:
        bins[d] += 1
    offset = [0] * (md + 1)
    start = 0
    for d, count in enumerate(bins):
        offset[d] = start
        start += count

    order = [0] * nv
    position = [0] * nv
    for v, d in enumerate(core):
        position[v] = offset[d]
        order[position[v]] = v
        offset[d] += 1
    offset = [0] + offset[:-1]

    # ``order`` is reshuffled while it is walked, so it is read by position.
    for i in range(nv):
        v = order[i]
        for u in graph.neighbors(v):
            if core[u] > core[v]:
                du = core[u]
                pu = position[u]
                pw = offset[du]
                w = order[pw]
                if u != w:
                    position[u], position[w] = pw, pu
                    order[pu], order[pw] = w, u
                offset[du] += 1
                core[u] -= 1
    return core


def build_core_table(graph: Graph) -> CoreTable:
    """Compute the core numbers and count the vertices whose core exceeds 1."""
    cores = core_numbers(graph)
    return CoreTable(cores, sum(1 for c in cores if c > 1))