"""Small query patterns for subgraph mining."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntEnum
from itertools import accumulate, chain

__all__ = ["SetOperator", "Pattern", "WILDCARD_LABEL"]

# A label that matches any vertex label in :meth:`Pattern.to_string`.
WILDCARD_LABEL = -1


class SetOperator(IntEnum):
    """Set operation applied when extending a partial match."""

    INTERSECTION = 0
    DIFFERENCE = 1


def _parse_ints(line: str) -> list[int]:
    return [int(token) for token in line.split()]


@dataclass
class Pattern:
    """An undirected pattern graph held as adjacency lists keyed by vertex."""

    num_vertex_classes: int = 0
    num_edge_classes: int = 0
    adj_list: dict[int, list[int]] = field(default_factory=dict)
    vlabels: list[int] = field(default_factory=list)
    edge_labels: dict[tuple[int, int], int] = field(default_factory=dict)
    name: str = ""
    rowptr: list[int] = field(default_factory=list)
    colidx: list[int] = field(default_factory=list)
    set_operators: list[list[SetOperator]] = field(default_factory=list)
    set_operands: list[list[int]] = field(default_factory=list)

    @property
    def n_vertices(self) -> int:
        return len(self.adj_list)

    @property
    def n_edges(self) -> int:
        """Number of directed edges, i.e. twice the undirected edge count."""
        return sum(len(nbrs) for nbrs in self.adj_list.values())

    @property
    def max_degree(self) -> int:
        return max((len(nbrs) for nbrs in self.adj_list.values()), default=0)

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "Pattern":
        """Read a pattern from an adjacency file.

        The header holds ``|V| |E| max_degree vertex_classes edge_classes``;
        each following line holds ``vertex label neighbour...``.
        """
        with open(path, encoding="utf-8") as handle:
            lines = handle.read().splitlines()
        header: list[str] = []
        body: list[str] = []
        for index, line in enumerate(lines):
            tokens = line.split()
            need = 5 - len(header)
            header.extend(tokens[:need])
            if len(header) == 5:
                leftover = tokens[need:]
                body = ([" ".join(leftover)] if leftover else []) + lines[index + 1:]
                break
        else:
            raise ValueError(f"{path}: incomplete pattern header")
        n_vertices, n_edges, max_degree, nvc, nec = (int(t) for t in header)

        pattern = cls(num_vertex_classes=nvc, num_edge_classes=nec)
        if nvc > 0:
            pattern.vlabels = [0] * n_vertices
        for line in body:
            values = _parse_ints(line)
            if not values:
                continue
            if len(values) < 2:
                raise ValueError(f"{path}: vertex line without a label: {line!r}")
            v, label, *neighbors = values
            if nvc > 0:
                if not 0 <= v < n_vertices:
                    raise ValueError(f"{path}: vertex {v} out of range")
                pattern.vlabels[v] = label
            if neighbors:
                pattern.adj_list.setdefault(v, []).extend(neighbors)

        if pattern.n_vertices != n_vertices:
            raise ValueError(
                f"{path}: header declares {n_vertices} vertices, found {pattern.n_vertices}"
            )
        if pattern.n_edges != n_edges:
            raise ValueError(f"{path}: header declares {n_edges} edges, found {pattern.n_edges}")
        if pattern.max_degree != max_degree:
            raise ValueError(
                f"{path}: header declares max degree {max_degree}, found {pattern.max_degree}"
            )
        pattern.generate_csr()
        return pattern

    def add_edge(self, u: int, v: int, elabel: int | None = None) -> None:
        """Add the undirected edge ``u``-``v``."""
        self.adj_list.setdefault(u, []).append(v)
        self.adj_list.setdefault(v, []).append(u)
        if elabel is not None:
            self.edge_labels[(min(u, v), max(u, v))] = elabel

    def compute_name(self) -> str:
        """Name the pattern by its shape and store the name on it."""
        n = self.n_vertices
        m = self.n_edges // 2
        name = f"{self.num_vertex_classes}labeled-" if self.num_vertex_classes > 0 else ""
        if n == 3:
            name += "wedge" if m == 2 else "triangle"
        elif n == 4:
            if m == 3:
                name = name + "3-star" if self.max_degree == 3 else "4-path"
            elif m == 4:
                name += "tailed_triangle" if self.max_degree == 3 else "square"
            elif m == 5:
                name += "diamond"
            elif m == 6:
                name += "4-clique"
            else:
                raise ValueError(f"a 4-vertex pattern cannot have {m} edges")
        else:
            name += "unknown"
        self.name = name
        return name

    def vertex_list(self) -> list[int]:
        """Return the pattern's vertices in ascending order."""
        return sorted(self.adj_list)

    def _edges(self):
        for u in sorted(self.adj_list):
            for v in self.adj_list[u]:
                if u <= v:
                    yield u, v

    def to_string(self, labels: list[int] | None = None) -> str:
        """Render the pattern as text.

        With ``labels`` and a labelled pattern, each edge is written with the
        given labels of its ends, ``*`` standing for :data:`WILDCARD_LABEL`.
        """
        if labels is not None and self.num_vertex_classes > 0:
            if len(labels) < self.n_vertices:
                raise ValueError("fewer labels than pattern vertices")

            def show(x: int) -> str:
                return "*" if labels[x] == WILDCARD_LABEL else str(labels[x])

            return "".join(f"[{u},{show(u)}-{v},{show(v)}]" for u, v in self._edges())
        if self.num_vertex_classes > 0:
            return "".join(chr(self.vlabels[v]) for v in range(self.n_vertices))
        return "".join(f"[{u}-{v}]" for u, v in self._edges())

    def generate_csr(self) -> tuple[list[int], list[int]]:
        """Build and store the CSR arrays of the pattern."""
        vertices = range(self.n_vertices)
        self.rowptr = list(accumulate((self.degree(v) for v in vertices), initial=0))
        self.colidx = list(chain.from_iterable(self.adj_list.get(v, []) for v in vertices))
        return self.rowptr, self.colidx

    def analyze(self) -> tuple[list[list[SetOperator]], list[list[int]]]:
        """Choose the set operators and operands for each extension level."""
        n = self.n_vertices
        m = self.n_edges // 2
        if n <= 2:
            raise ValueError("pattern analysis needs at least three vertices")
        inter, diff = SetOperator.INTERSECTION, SetOperator.DIFFERENCE
        operators = [[inter] * (level + 1) for level in range(n - 2)]
        operands = [list(range(level + 2)) for level in range(n - 2)]
        if n == 3:
            if m == 2:
                operators[0][0] = diff
        elif n == 4:
            if m == 3:
                operators[0][0] = diff
                operators[1] = [diff, diff]
                if self.max_degree != 3:  # 4-path
                    operands[1] = [2, 0, 1]
            elif m == 4:
                if self.max_degree == 3:  # tailed triangle
                    operators[1] = [diff, diff]
                else:  # square
                    operators[0][0] = diff
                    operators[1][1] = diff
                    operands[1] = [1, 2, 0]
            elif m == 5:  # diamond
                operators[1][1] = diff
        self.set_operators = operators
        self.set_operands = operands
        return operators, operands

    def is_connected(self, u: int, v: int) -> bool:
        """Return whether ``u`` and ``v`` are adjacent (neighbour lists sorted)."""
        if self.degree(u) < self.degree(v):
            u, v = v, u
        lo, hi = 0, self.degree(v) - 1
        while lo <= hi:
            mid = lo + ((hi - lo) >> 1)
            w = self.neighbor(v, mid)
            if w == u:
                return True
            if w > u:
                hi = mid - 1
            else:
                lo = mid + 1
        return False

    def degree(self, v: int) -> int:
        """Return the number of neighbours of ``v``."""
        return len(self.adj_list.get(v, ()))

    def neighbor(self, v: int, i: int) -> int:
        """Return the ``i``-th neighbour of ``v``."""
        return self.adj_list[v][i]