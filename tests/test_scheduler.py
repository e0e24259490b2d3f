from collections import Counter

import pytest

from csrkit.graph import Graph
from csrkit.scheduler import (
    Scheduler,
    construct_index,
    hop2_workload,
    smallest_score_id,
    workload_estimate,
)


def ring(n):
    return Graph.from_adjacency([sorted({(v - 1) % n, (v + 1) % n}) for v in range(n)])


@pytest.fixture(scope="module")
def big():
    g = ring(5000)
    g.init_edgelist()
    return g


def pairs(parts):
    return Counter((s, d) for p in parts for s, d in zip(p.src, p.dst))


def edge_pairs(g):
    return Counter(zip(g.src_list, g.dst_list))


def test_round_robin_covers_all_edges(big):
    parts = Scheduler().round_robin(3, big, 1000)
    assert sum(len(p) for p in parts) == big.nnz
    assert pairs(parts) == edge_pairs(big)


def test_round_robin_chunk_order(big):
    parts = Scheduler().round_robin(3, big, 1000)
    assert parts[0].src[:1000] == big.src_list[:1000]
    assert parts[1].src[:1000] == big.src_list[1000:2000]
    assert parts[0].src[1000:2000] == big.src_list[3000:4000]


def test_round_robin_small_graph_rejected():
    g = ring(10)
    with pytest.raises(ValueError):
        Scheduler().round_robin(2, g, 4)


def test_vertex_chunking_assigns_by_source():
    g = ring(50)
    parts = Scheduler().vertex_chunking(3, g, 4)
    for qid, p in enumerate(parts):
        assert all((v // 4) % 3 == qid for v in p.src)
    assert pairs(parts) == edge_pairs(g)


def test_vertex_chunking_preserves_order():
    g = ring(30)
    parts = Scheduler().vertex_chunking(2, g, 5)
    for p in parts:
        assert p.src == sorted(p.src)


def test_least_first_covers_all_edges(big):
    parts = Scheduler().least_first(4, big, 500)
    assert sum(len(p) for p in parts) == big.nnz
    assert pairs(parts) == edge_pairs(big)
    for i, p in enumerate(parts):
        assert p.src[:500] == big.src_list[i * 500:(i + 1) * 500]


def test_least_first_stride_too_large(big):
    with pytest.raises(ValueError):
        Scheduler().least_first(4, big, 5000)


def test_invalid_partition_count(big):
    with pytest.raises(ValueError):
        Scheduler().round_robin(0, big, 100)


def test_workload_estimate_star():
    g = Graph.from_adjacency([[1, 2, 3], [0], [0], [0]])
    assert workload_estimate(g, 0, 1) == 1
    assert workload_estimate(g, 0, 1) == workload_estimate(g, 1, 0)


def test_hop2_workload_path():
    g = Graph.from_adjacency([[1], [0, 2], [1]])
    assert hop2_workload(g, 0, 2) == 4


def test_smallest_score_id_first_minimum():
    assert smallest_score_id([3, 1, 1, 2]) == 1
    with pytest.raises(ValueError):
        smallest_score_id([])


def test_construct_index_counts():
    vertices = [0, 2, 2, 0, 2]
    sizes = construct_index(4, vertices)
    assert len(sizes) == 4
    assert sum(sizes) == len(vertices)
    assert sizes[1] == sizes[3] == 0