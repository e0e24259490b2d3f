"""CSR graphs for learning workloads, with self loops and vertex masking."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from itertools import accumulate

__all__ = ["LearningGraph", "prefix_sum"]


def prefix_sum(values: Iterable[int]) -> list[int]:
    """Return the exclusive prefix sums of ``values`` plus the total at the end."""
    return list(accumulate(values, initial=0))


@dataclass
class LearningGraph:
    """A graph held as CSR row offsets and column indices."""

    rowptr: list[int] = field(default_factory=lambda: [0])
    colidx: list[int] = field(default_factory=list)
    max_degree: int = 0

    @classmethod
    def from_csr(cls, rowptr: Sequence[int], colidx: Sequence[int]) -> "LearningGraph":
        """Build a graph from CSR arrays, checking that they are consistent."""
        rowptr, colidx = list(rowptr), list(colidx)
        if not rowptr or rowptr[0] != 0:
            raise ValueError("row offsets must start at 0")
        if any(b < a for a, b in zip(rowptr, rowptr[1:])):
            raise ValueError("row offsets must not decrease")
        if rowptr[-1] != len(colidx):
            raise ValueError("last row offset must equal the number of edges")
        n = len(rowptr) - 1
        if any(not 0 <= d < n for d in colidx):
            raise ValueError("edge destination out of range")
        return cls(rowptr, colidx)

    @property
    def num_vertices(self) -> int:
        return len(self.rowptr) - 1

    @property
    def num_edges(self) -> int:
        return len(self.colidx)

    def degree(self, v: int) -> int:
        """Return the number of edges leaving ``v``."""
        return self.rowptr[v + 1] - self.rowptr[v]

    def neighbors(self, v: int) -> list[int]:
        """Return the destinations of the edges leaving ``v``."""
        return self.colidx[self.rowptr[v]:self.rowptr[v + 1]]

    def degree_counting(self) -> int:
        """Compute, store and return the maximum degree."""
        self.max_degree = max((self.degree(v) for v in range(self.num_vertices)), default=0)
        return self.max_degree

    def add_selfloop(self) -> None:
        """Give every vertex an edge to itself, placed before its first
        neighbour with a larger id."""
        rows = []
        for v in range(self.num_vertices):
            row = self.neighbors(v)
            pos = next((k for k, d in enumerate(row) if d > v), len(row))
            rows.append(row[:pos] + [v] + row[pos:])
        self.colidx = [d for row in rows for d in row]
        self.rowptr = [offset + i for i, offset in enumerate(self.rowptr)]

    def generate_masked_graph(self, masks: Sequence[int]) -> "LearningGraph":
        """Return a graph over the same vertices keeping only edges whose
        two ends both have mask 1."""
        n = self.num_vertices
        if len(masks) != n:
            raise ValueError(f"expected {n} masks, got {len(masks)}")
        rows = [
            [d for d in self.neighbors(src) if masks[d] == 1] if masks[src] == 1 else []
            for src in range(n)
        ]
        offsets = prefix_sum(len(row) for row in rows)
        return LearningGraph(offsets, [d for row in rows for d in row])

    def to_text(self) -> str:
        """Render each vertex with its degree and neighbour list."""
        out = ["Printing the graph: \n"]
        for v in range(self.num_vertices):
            items = "".join(f"{d} " for d in self.neighbors(v))
            out.append(f"vertex {v}: degree = {self.degree(v)} edgelist = [ {items}]\n")
        return "".join(out)