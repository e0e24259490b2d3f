import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from csrkit.graph import Graph
from csrkit.transform import sort_and_clean_neighbors, symmetrize


def _rows(graph):
    return [list(graph.neighbors(v)) for v in range(graph.n_vertices)]


@st.composite
def adjacency(draw):
    n = draw(st.integers(min_value=1, max_value=8))
    return [draw(st.lists(st.integers(0, n - 1), max_size=10)) for _ in range(n)]


@st.composite
def clean_adjacency(draw):
    n = draw(st.integers(min_value=1, max_value=8))
    rows = []
    for v in range(n):
        row = draw(st.sets(st.integers(0, n - 1), max_size=n))
        rows.append(sorted(row - {v}))
    return rows


def test_clean_removes_selfloops_and_duplicates():
    g = Graph.from_adjacency([[2, 0, 1, 1], [0], [0]])
    report = sort_and_clean_neighbors(g)
    assert report.selfloops == 1
    assert report.redundants == 1
    assert _rows(g) == [[1, 2], [0], [0]]
    assert g.vertices == [0, 2, 3, 4]


def test_clean_keeps_reverse_aliased_for_undirected():
    g = Graph.from_adjacency([[1, 1], [0, 1]])
    sort_and_clean_neighbors(g)
    assert list(g.in_neigh(0)) == list(g.neighbors(0))
    assert g.reverse_edges == g.edges


def test_clean_writes_files(tmp_path):
    g = Graph.from_adjacency([[1, 0], [0]])
    prefix = str(tmp_path / "clean")
    sort_and_clean_neighbors(g, prefix)
    vertex_bytes = (tmp_path / "clean.vertex.bin").read_bytes()
    edge_bytes = (tmp_path / "clean.edge.bin").read_bytes()
    assert list(struct.unpack(f"<{len(g.vertices)}Q", vertex_bytes)) == g.vertices
    assert list(struct.unpack(f"<{len(g.edges)}I", edge_bytes)) == g.edges


@given(adjacency())
def test_clean_invariants(rows):
    g = Graph.from_adjacency(rows)
    before = g.n_edges
    report = sort_and_clean_neighbors(g)
    assert g.n_edges == before - report.selfloops - report.redundants
    for v, original in enumerate(rows):
        cleaned = list(g.neighbors(v))
        assert all(a < b for a, b in zip(cleaned, cleaned[1:]))
        assert set(cleaned) == set(original) - {v}


def test_symmetrize_adds_reverse_edges():
    g = Graph.from_adjacency([[1], [2], []])
    added = symmetrize(g)
    assert added == 2
    assert _rows(g) == [[1], [0, 2], [1]]


def test_symmetrize_symmetric_graph_unchanged():
    rows = [[1, 2], [0, 2], [0, 1]]
    g = Graph.from_adjacency(rows)
    assert symmetrize(g) == 0
    assert _rows(g) == rows


def test_symmetrize_rejects_selfloop():
    g = Graph.from_adjacency([[0, 1], [0]])
    with pytest.raises(ValueError):
        symmetrize(g)


def test_symmetrize_rejects_repeated_edge():
    g = Graph.from_adjacency([[1, 1], [0]])
    with pytest.raises(ValueError):
        symmetrize(g)


@given(clean_adjacency())
def test_symmetrize_invariants(rows):
    g = Graph.from_adjacency(rows)
    before = g.n_edges
    added = symmetrize(g)
    assert g.n_edges == before + added
    for v in range(g.n_vertices):
        nbrs = list(g.neighbors(v))
        assert all(a < b for a, b in zip(nbrs, nbrs[1:]))
        assert set(rows[v]) <= set(nbrs)
        for u in nbrs:
            assert v in g.neighbors(u)