"""Vertex label statistics: frequencies, reverse index and neighbourhood counts."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from itertools import accumulate

from csrkit.graph import Graph

__all__ = ["LabelIndex", "build_nlf"]


def _vertex_labels(graph: Graph) -> list[int]:
    if graph.vlabels is None:
        raise ValueError("the graph has no vertex labels")
    return graph.vlabels


@dataclass(frozen=True)
class LabelIndex:
    """How often each vertex label occurs in a graph.

    ``frequencies[l]`` is the number of vertices carrying label ``l``, for
    every label from 0 to ``num_vertex_classes`` inclusive.
    """

    labels: tuple[int, ...]
    num_vertex_classes: int
    frequencies: tuple[int, ...]
    max_label: int
    max_label_frequency: int

    @classmethod
    def from_graph(cls, graph: Graph) -> "LabelIndex":
        """Count the vertex labels of ``graph``."""
        labels = tuple(_vertex_labels(graph))
        nvc = graph.num_vertex_classes
        frequencies = [0] * (nvc + 1)
        for v, label in enumerate(labels):
            if not 0 <= label <= nvc:
                raise ValueError(f"vertex {v} has label {label} outside 0..{nvc}")
            frequencies[label] += 1
        return cls(
            labels=labels,
            num_vertex_classes=nvc,
            frequencies=tuple(frequencies),
            max_label=max(labels, default=0),
            max_label_frequency=max(frequencies),
        )

    def frequent_label_count(self, threshold: int) -> int:
        """Return how many labels occur on more than ``threshold`` vertices."""
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        return sum(1 for count in self.frequencies if count > threshold)

    def is_frequent_vertex(self, v: int, threshold: int) -> bool:
        """Return whether the label of ``v`` occurs on at least ``threshold`` vertices."""
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        if not 0 <= v < len(self.labels):
            raise IndexError(f"vertex {v} out of range")
        return self.frequencies[self.labels[v]] >= threshold

    def reverse_index(self) -> tuple[list[int], list[int]]:
        """Group vertices by label.

        Returns ``(index, offsets)``: the vertices carrying label ``l`` are
        ``index[offsets[l]:offsets[l + 1]]``, in ascending order.
        """
        nl = self.num_vertex_classes
        if self.max_label == self.num_vertex_classes:
            nl += 1
        offsets = list(accumulate(self.frequencies[:nl], initial=0))
        start = offsets[:-1]
        index = [0] * len(self.labels)
        for v, label in enumerate(self.labels):
            index[start[label]] = v
            start[label] += 1
        return index, offsets


def build_nlf(graph: Graph) -> list[dict[int, int]]:
    """Return, for every vertex, how many of its neighbours carry each label."""
    labels = _vertex_labels(graph)
    return [
        dict(Counter(labels[u] for u in graph.neighbors(v)))
        for v in range(graph.n_vertices)
    ]