"""Compressed sparse row graphs stored as binary files on disk."""

from __future__ import annotations

import random
import sys
from array import array
from dataclasses import dataclass, field
from itertools import accumulate
from pathlib import Path

from csrkit.merge import count_merge
from csrkit.vertexset import VertexSet

__all__ = ["GraphMeta", "Graph", "read_meta_info"]

VID_SIZE = 4
EID_SIZE = 8
VLABEL_SIZE = 1
_VID_CODE = "I"
_EID_CODE = "Q"
_VLABEL_CODE = "B"
_LABEL_CODES = {1: "B", 2: "H", 4: "I", 8: "Q"}
_MAX_VLABEL_CLASSES = 255


def _read_array(path: Path, typecode: str, count: int) -> list[int]:
    data = path.read_bytes()
    values = array(typecode)
    needed = count * values.itemsize
    if len(data) < needed:
        raise ValueError(f"{path}: expected {needed} bytes, found {len(data)}")
    values.frombytes(data[:needed])
    if sys.byteorder == "big":
        values.byteswap()
    return values.tolist()


def _write_array(path: Path, typecode: str, items: list[int]) -> None:
    values = array(typecode, items)
    if sys.byteorder == "big":
        values.byteswap()
    path.write_bytes(values.tobytes())


@dataclass(frozen=True)
class GraphMeta:
    """Contents of a graph's ``.meta.txt`` file."""

    n_vertices: int
    n_edges: int
    vid_size: int
    eid_size: int
    vlabel_size: int
    elabel_size: int
    max_degree: int
    feat_len: int
    num_vertex_classes: int
    num_edge_classes: int
    n_vert0: int = 0
    n_vert1: int = 0


def read_meta_info(prefix: str | Path, bipartite: bool = False) -> GraphMeta:
    """Read and validate ``<prefix>.meta.txt``."""
    path = Path(f"{prefix}.meta.txt")
    tokens = [int(t) for t in path.read_text(encoding="utf-8").split()]
    n_vert0 = n_vert1 = 0
    if bipartite:
        if len(tokens) < 2:
            raise ValueError(f"{path}: missing vertex counts")
        n_vert0, n_vert1 = tokens[0], tokens[1]
        nv, rest = n_vert0 + n_vert1, tokens[2:]
    else:
        if not tokens:
            raise ValueError(f"{path}: empty meta file")
        nv, rest = tokens[0], tokens[1:]
    if len(rest) < 9:
        raise ValueError(f"{path}: incomplete meta information")
    meta = GraphMeta(nv, *rest[:9], n_vert0=n_vert0, n_vert1=n_vert1)
    if meta.vid_size != VID_SIZE:
        raise ValueError(f"{path}: vertex id size {meta.vid_size}, expected {VID_SIZE}")
    if meta.eid_size != EID_SIZE:
        raise ValueError(f"{path}: edge id size {meta.eid_size}, expected {EID_SIZE}")
    if meta.vlabel_size != VLABEL_SIZE:
        raise ValueError(f"{path}: vertex label size {meta.vlabel_size}, expected {VLABEL_SIZE}")
    if nv <= 0 or meta.n_edges <= 0:
        raise ValueError(f"{path}: graph must have vertices and edges")
    if nv >= 2**32 - 1:
        raise ValueError(f"{path}: too many vertices for 32-bit ids")
    return meta


@dataclass
class Graph:
    """A graph in CSR form: ``vertices`` holds row offsets, ``edges`` targets."""

    vertices: list[int]
    edges: list[int]
    directed: bool = False
    vlabels: list[int] | None = None
    elabels: list[int] | None = None
    max_degree: int = 0
    num_vertex_classes: int = 0
    num_edge_classes: int = 0
    feat_len: int = 0
    name: str = ""
    inputfile_path: str = ""
    reverse_vertices: list[int] | None = None
    reverse_edges: list[int] | None = None
    src_list: list[int] = field(default_factory=list)
    dst_list: list[int] = field(default_factory=list)
    sizes: list[int] = field(default_factory=list)
    nnz: int = 0

    def __post_init__(self) -> None:
        if not self.directed and self.reverse_vertices is None:
            self.reverse_vertices = self.vertices
            self.reverse_edges = self.edges

    @property
    def n_vertices(self) -> int:
        return len(self.vertices) - 1

    @property
    def n_edges(self) -> int:
        return len(self.edges)

    @property
    def has_reverse(self) -> bool:
        return self.reverse_vertices is not None

    @classmethod
    def load(
        cls,
        prefix: str | Path,
        use_dag: bool = False,
        directed: bool = False,
        use_vlabel: bool = False,
        use_elabel: bool = False,
        need_reverse: bool = False,
        bipartite: bool = False,
    ) -> "Graph":
        """Load a graph from ``<prefix>.meta.txt``, ``.vertex.bin`` and ``.edge.bin``."""
        prefix = str(prefix)
        inputfile_path = prefix.rpartition("/")[0]
        name = inputfile_path.rpartition("/")[2] if "/" in inputfile_path else ""
        meta = read_meta_info(prefix, bipartite)
        nv = meta.n_vertices
        vertices = _read_array(Path(prefix + ".vertex.bin"), _EID_CODE, nv + 1)
        edges = _read_array(Path(prefix + ".edge.bin"), _VID_CODE, meta.n_edges)
        graph = cls(
            vertices,
            edges,
            directed=directed,
            max_degree=meta.max_degree,
            num_vertex_classes=meta.num_vertex_classes,
            num_edge_classes=meta.num_edge_classes,
            feat_len=meta.feat_len,
            name=name,
            inputfile_path=inputfile_path,
        )
        if directed and need_reverse:
            graph.build_reverse_graph()
        if graph.max_degree == 0:
            graph.compute_max_degree()
        if not 0 < graph.max_degree < nv:
            raise ValueError(f"implausible maximum degree {graph.max_degree}")

        if use_vlabel:
            graph._load_vlabels(Path(prefix + ".vlabel.bin"))
        if use_elabel:
            graph._load_elabels(Path(prefix + ".elabel.bin"), meta.elabel_size)
        if use_dag:
            if directed:
                raise ValueError("orientation needs an undirected graph")
            graph.orientation()
        return graph

    def _load_vlabels(self, path: Path) -> None:
        nvc = self.num_vertex_classes
        if not 0 < nvc < _MAX_VLABEL_CLASSES:
            raise ValueError(f"unsupported number of vertex classes {nvc}")
        if path.exists():
            self.vlabels = _read_array(path, _VLABEL_CODE, self.n_vertices)
            distinct = len(set(self.vlabels))
            if distinct != nvc:
                raise ValueError(f"{path}: {distinct} distinct labels, expected {nvc}")
        else:
            self.vlabels = [random.randrange(nvc) + 1 for _ in range(self.n_vertices)]

    def _load_elabels(self, path: Path, elabel_size: int) -> None:
        if path.exists():
            if self.num_edge_classes <= 0:
                raise ValueError(f"{path}: edge labels present but no edge classes declared")
            typecode = _LABEL_CODES.get(elabel_size)
            if typecode is None:
                raise ValueError(f"unsupported edge label size {elabel_size}")
            self.elabels = _read_array(path, typecode, self.n_edges)
            distinct = len(set(self.elabels))
            if distinct > self.num_edge_classes:
                raise ValueError(f"{path}: {distinct} distinct labels exceed declared classes")
        elif self.num_edge_classes < 1:
            self.num_edge_classes = 1
            self.elabels = [1] * self.n_edges
        else:
            nec = self.num_edge_classes
            self.elabels = [random.randrange(nec) + 1 for _ in range(self.n_edges)]

    @classmethod
    def from_adjacency(cls, adjacency, directed: bool = False) -> "Graph":
        """Build a graph from a sequence of neighbour lists, one per vertex."""
        rows = [list(row) for row in adjacency]
        n = len(rows)
        for v, row in enumerate(rows):
            for u in row:
                if not 0 <= u < n:
                    raise ValueError(f"neighbour {u} of vertex {v} out of range")
        vertices = list(accumulate((len(r) for r in rows), initial=0))
        edges = [u for row in rows for u in row]
        graph = cls(vertices, edges, directed=directed)
        graph.compute_max_degree()
        return graph

    def _row(self, v: int) -> list[int]:
        if not 0 <= v < self.n_vertices:
            raise IndexError(f"vertex {v} out of range")
        begin, end = self.vertices[v], self.vertices[v + 1]
        if begin > end or end > self.n_edges:
            raise ValueError(f"vertex {v} bounds error: [{begin}, {end})")
        return self.edges[begin:end]

    def neighbors(self, v: int) -> VertexSet:
        """Return the outgoing neighbours of ``v``."""
        return VertexSet.of(self._row(v), v)

    def out_neigh(self, v: int, offset: int = 0) -> VertexSet:
        """Return the outgoing neighbours of ``v`` from position ``offset`` on."""
        return VertexSet.of(self._row(v)[offset:], v)

    def in_neigh(self, v: int) -> VertexSet:
        """Return the incoming neighbours of ``v``."""
        if self.reverse_vertices is None or self.reverse_edges is None:
            raise ValueError("the graph has no reverse edge lists")
        if not 0 <= v < self.n_vertices:
            raise IndexError(f"vertex {v} out of range")
        begin, end = self.reverse_vertices[v], self.reverse_vertices[v + 1]
        if begin > end:
            raise ValueError(f"vertex {v} bounds error: [{begin}, {end})")
        return VertexSet.of(self.reverse_edges[begin:end], v)

    def degree(self, v: int) -> int:
        """Return the out-degree of ``v``."""
        return self.vertices[v + 1] - self.vertices[v]

    def build_reverse_graph(self) -> None:
        """Build the incoming edge lists."""
        reverse: list[list[int]] = [[] for _ in range(self.n_vertices)]
        for v in range(self.n_vertices):
            for u in self._row(v):
                reverse[u].append(v)
        self.reverse_vertices = list(accumulate((len(r) for r in reverse), initial=0))
        self.reverse_edges = [u for row in reverse for u in row]

    def compute_max_degree(self) -> int:
        """Compute, store and return the maximum out-degree."""
        self.max_degree = max((self.degree(v) for v in range(self.n_vertices)), default=0)
        return self.max_degree

    def sort_neighbors(self) -> None:
        """Sort every neighbour list in ascending order."""
        for v in range(self.n_vertices):
            begin, end = self.vertices[v], self.vertices[v + 1]
            self.edges[begin:end] = sorted(self.edges[begin:end])

    def orientation(self, outfile_prefix: str = "") -> None:
        """Turn the undirected graph into a DAG, keeping each edge towards the
        endpoint of higher degree (ties broken by the higher id).

        With ``outfile_prefix``, the result is also written to disk.
        """
        degrees = [self.degree(v) for v in range(self.n_vertices)]

        def keep(src: int, dst: int) -> bool:
            return degrees[dst] > degrees[src] or (degrees[dst] == degrees[src] and dst > src)

        rows = [[d for d in self._row(s) if keep(s, d)] for s in range(self.n_vertices)]
        new_vertices = list(accumulate((len(r) for r in rows), initial=0))
        num_edges = new_vertices[-1]
        if self.n_edges != 2 * num_edges:
            raise ValueError("orientation needs a symmetric graph without self loops")
        new_edges = [d for row in rows for d in row]
        if outfile_prefix:
            _write_array(Path(outfile_prefix + ".vertex.bin"), _EID_CODE, new_vertices)
            _write_array(Path(outfile_prefix + ".edge.bin"), _VID_CODE, new_edges)
        self.max_degree = max((len(r) for r in rows), default=0)
        self.vertices = new_vertices
        self.edges = new_edges
        self.directed = True
        self.reverse_vertices = None
        self.reverse_edges = None

    def write_to_file(
        self,
        prefix: str | Path,
        vertices: bool = True,
        edges: bool = True,
        vlabels: bool = False,
        elabels: bool = False,
    ) -> None:
        """Write the selected arrays as ``<prefix>.{vertex,edge,vlabel,elabel}.bin``."""
        prefix = str(prefix)
        if vertices:
            _write_array(Path(prefix + ".vertex.bin"), _EID_CODE, self.vertices)
        if edges:
            _write_array(Path(prefix + ".edge.bin"), _VID_CODE, self.edges)
        if vlabels and self.vlabels:
            _write_array(Path(prefix + ".vlabel.bin"), _VLABEL_CODE, self.vlabels)
        if elabels and self.elabels:
            _write_array(Path(prefix + ".elabel.bin"), "I", self.elabels)

    def degree_histogram(self, bin_width: int) -> list[int]:
        """Return vertex counts per degree bin of width ``bin_width``."""
        if not 0 < bin_width < self.max_degree:
            raise ValueError(f"bin width must be in (0, {self.max_degree})")
        num_bins = (self.max_degree - 1) // bin_width + 1
        counts = [0] * num_bins
        for v in range(self.n_vertices):
            counts[min(self.degree(v) // bin_width, num_bins - 1)] += 1
        return counts

    def init_edgelist(self, sym_break: bool = False, ascend: bool = False) -> int:
        """Build the source/destination edge lists, skipping self loops.

        With ``sym_break`` only one direction of each edge is kept: the one
        with the smaller source when ``ascend`` is set, the larger otherwise.
        Returns the number of edges in the list.
        """
        if self.nnz:
            return self.nnz
        self.sizes = [0] * self.n_vertices
        self.src_list, self.dst_list = [], []
        for v in range(self.n_vertices):
            for u in self._row(v):
                if u == v:
                    continue
                if sym_break:
                    if ascend and v > u:
                        continue
                    if not ascend and v < u:
                        break
                self.src_list.append(v)
                self.dst_list.append(u)
                self.sizes[v] += 1
        self.nnz = len(self.src_list)
        return self.nnz

    def binary_search(self, key: int, begin: int, end: int) -> bool:
        """Return whether ``key`` is among the sorted edges ``[begin, end)``."""
        lo, hi = begin, end - 1
        while hi >= lo:
            mid = lo + (hi - lo) // 2
            value = self.edges[mid]
            if value == key:
                return True
            if value < key:
                lo = mid + 1
            else:
                hi = mid - 1
        return False

    def is_connected(self, v: int, u: int) -> bool:
        """Return whether ``v`` and ``u`` are adjacent (sorted neighbour lists)."""
        if self.degree(v) < self.degree(u):
            return self.binary_search(u, self.vertices[v], self.vertices[v + 1])
        return self.binary_search(v, self.vertices[u], self.vertices[u + 1])

    def intersect_num(self, v: int, u: int) -> int:
        """Return the number of common neighbours of ``v`` and ``u``."""
        return count_merge(self._row(v), self._row(u))

    def meta_summary(self) -> str:
        """Describe the graph's size, labels and features."""
        lines = [f"|V|: {self.n_vertices}, |E|: {self.n_edges}, Max Degree: {self.max_degree}"]
        if self.num_vertex_classes > 0:
            lines.append(f"vertex-|\u03a3|: {self.num_vertex_classes}")
        else:
            lines.append("This graph does not have vertex labels")
        if self.num_edge_classes > 0:
            lines.append(f"edge-|\u03a3|: {self.num_edge_classes}")
        else:
            lines.append("This graph does not have edge labels")
        if self.feat_len > 0:
            lines.append(f"Vertex feature vector length: {self.feat_len}")
        else:
            lines.append("This graph has no input vertex features")
        return "\n".join(lines) + "\n"

    def to_text(self) -> str:
        """Render every vertex with its edge range and neighbour list."""
        out = ["Printing the graph: \n"]
        for v in range(self.n_vertices):
            begin, end = self.vertices[v], self.vertices[v + 1]
            items = []
            for e in range(begin, end):
                if self.elabels is not None:
                    items.append(f"<{self.edges[e]} {self.elabels[e]}> ")
                else:
                    items.append(f"{self.edges[e]} ")
            out.append(
                f"vertex {v}: degree = {end - begin} edge range: [{begin}, {end})"
                f" edgelist = [ {''.join(items)}]\n"
            )
        return "".join(out)