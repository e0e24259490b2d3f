"""Splitting a graph's edge list into work queues."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from csrkit.graph import Graph

__all__ = [
    "Partition",
    "Scheduler",
    "workload_estimate",
    "hop2_workload",
    "smallest_score_id",
    "construct_index",
    "MIN_SPLIT_TASKS",
]

# Edge lists this small are not worth splitting.
MIN_SPLIT_TASKS = 8192


@dataclass
class Partition:
    """One work queue: parallel lists of edge sources and destinations."""

    src: list[int] = field(default_factory=list)
    dst: list[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.src)

    def extend(self, src: Iterable[int], dst: Iterable[int]) -> None:
        self.src.extend(src)
        self.dst.extend(dst)


def hop2_workload(graph: Graph, src: int, dst: int) -> int:
    """Sum of the degrees of the neighbours of both endpoints."""
    return sum(graph.degree(v) for v in graph.neighbors(src)) + sum(
        graph.degree(v) for v in graph.neighbors(dst)
    )


def workload_estimate(graph: Graph, src: int, dst: int) -> int:
    """Estimated cost of an edge task: the smaller endpoint degree."""
    return min(graph.degree(src), graph.degree(dst))


def smallest_score_id(scores: Sequence[int]) -> int:
    """Return the index of the first smallest score."""
    if not scores:
        raise ValueError("no scores given")
    return min(range(len(scores)), key=scores.__getitem__)


def construct_index(nv: int, vertices: Iterable[int]) -> list[int]:
    """Return how many times each vertex id below ``nv`` occurs in ``vertices``."""
    sizes = [0] * nv
    for v in vertices:
        sizes[v] += 1
    return sizes


def _check(n: int, stride: int) -> None:
    if n <= 0:
        raise ValueError("the number of partitions must be positive")
    if stride <= 0:
        raise ValueError("the chunk size must be positive")


def _edgelist(graph: Graph) -> tuple[list[int], list[int], int]:
    nnz = graph.init_edgelist()
    return graph.src_list, graph.dst_list, nnz


class Scheduler:
    """Distributes the edge tasks of a graph over ``n`` queues."""

    def round_robin(self, n: int, graph: Graph, stride: int) -> list[Partition]:
        """Deal chunks of ``stride`` edges to the queues in turn."""
        _check(n, stride)
        src, dst, nnz = _edgelist(graph)
        if nnz <= MIN_SPLIT_TASKS:
            raise ValueError(f"edge list of {nnz} tasks is too small to split")
        parts = [Partition() for _ in range(n)]
        for chunk, begin in enumerate(range(0, nnz, stride)):
            end = min(begin + stride, nnz)
            parts[chunk % n].extend(src[begin:end], dst[begin:end])
        return parts

    def vertex_chunking(self, n: int, graph: Graph, stride: int) -> list[Partition]:
        """Send each edge to queue ``(src // stride) % n``, keeping edge order."""
        _check(n, stride)
        src, dst, _ = _edgelist(graph)
        parts = [Partition() for _ in range(n)]
        for v, u in zip(src, dst):
            part = parts[(v // stride) % n]
            part.src.append(v)
            part.dst.append(u)
        return parts

    def least_first(self, n: int, graph: Graph, stride: int) -> list[Partition]:
        """Give one chunk to every queue, then each next chunk to the queue
        with the smallest estimated workload so far."""
        _check(n, stride)
        src, dst, nnz = _edgelist(graph)
        if nnz <= MIN_SPLIT_TASKS:
            raise ValueError(f"edge list of {nnz} tasks is too small to split")
        if n * stride >= nnz:
            raise ValueError("the initial chunks would cover the whole edge list")

        def cost(begin: int, end: int) -> int:
            return sum(workload_estimate(graph, src[e], dst[e]) for e in range(begin, end))

        parts = [Partition() for _ in range(n)]
        scores = [0] * n
        pos = 0
        for qid in range(n):
            parts[qid].extend(src[pos:pos + stride], dst[pos:pos + stride])
            scores[qid] += cost(pos, pos + stride)
            pos += stride
        qid = smallest_score_id(scores)
        while pos + stride < nnz:
            parts[qid].extend(src[pos:pos + stride], dst[pos:pos + stride])
            scores[qid] += cost(pos, pos + stride)
            pos += stride
            qid = smallest_score_id(scores)
        if pos < nnz:
            parts[qid].extend(src[pos:], dst[pos:])
        return parts