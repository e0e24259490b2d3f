from hypothesis import given, settings
from hypothesis import strategies as st

from csrkit.graph import Graph
from csrkit.kcore import build_core_table, core_numbers


def undirected(n, pairs):
    rows = [set() for _ in range(n)]
    for a, b in pairs:
        if a != b:
            rows[a].add(b)
            rows[b].add(a)
    return Graph.from_adjacency([sorted(r) for r in rows])


def test_complete_graph_cores_equal_degree():
    graph = undirected(4, [(a, b) for a in range(4) for b in range(a + 1, 4)])
    cores = core_numbers(graph)
    assert cores == [graph.degree(v) for v in range(4)]


def test_cycle_cores_equal_degree():
    graph = undirected(5, [(i, (i + 1) % 5) for i in range(5)])
    assert core_numbers(graph) == [graph.degree(v) for v in range(5)]


def test_triangle_with_tail():
    graph = undirected(4, [(0, 1), (1, 2), (0, 2), (2, 3)])
    assert core_numbers(graph) == [2, 2, 2, 1]
    table = build_core_table(graph)
    assert table.cores == [2, 2, 2, 1]
    assert table.core_length == 3


def test_star_is_one_core():
    graph = undirected(6, [(0, i) for i in range(1, 6)])
    assert core_numbers(graph) == [1] * 6
    assert build_core_table(graph).core_length == 0


def test_empty_graph():
    graph = Graph.from_adjacency([])
    assert core_numbers(graph) == []
    assert build_core_table(graph).core_length == 0


def test_core_length_of_complete_graph():
    graph = undirected(5, [(a, b) for a in range(5) for b in range(a + 1, 5)])
    assert build_core_table(graph).core_length == graph.n_vertices


edges_strategy = st.integers(min_value=1, max_value=12).flatmap(
    lambda n: st.tuples(
        st.just(n),
        st.lists(
            st.tuples(st.integers(0, n - 1), st.integers(0, n - 1)), max_size=40
        ),
    )
)


@settings(max_examples=60)
@given(edges_strategy)
def test_core_properties(data):
    n, pairs = data
    graph = undirected(n, pairs)
    cores = core_numbers(graph)
    assert len(cores) == n
    for v in range(n):
        assert 0 <= cores[v] <= graph.degree(v)
        # every vertex of the k-core has at least k neighbours inside it
        inside = sum(1 for u in graph.neighbors(v) if cores[u] >= cores[v])
        assert inside >= cores[v]
    table = build_core_table(graph)
    assert table.cores == cores
    assert table.core_length == len([c for c in cores if c > 1])