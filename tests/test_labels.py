import pytest

from csrkit.graph import Graph
from csrkit.labels import LabelIndex, build_nlf


def labelled(adjacency, labels, nvc):
    graph = Graph.from_adjacency(adjacency)
    graph.vlabels = list(labels)
    graph.num_vertex_classes = nvc
    return graph


@pytest.fixture
def square():
    # 4-cycle 0-1-2-3-0
    return labelled([[1, 3], [0, 2], [1, 3], [0, 2]], [1, 2, 1, 0], 2)


def test_frequencies_count_every_vertex(square):
    index = LabelIndex.from_graph(square)
    assert len(index.frequencies) == square.num_vertex_classes + 1
    assert sum(index.frequencies) == square.n_vertices
    assert index.frequencies == (1, 2, 1)


def test_max_label_and_frequency(square):
    index = LabelIndex.from_graph(square)
    assert index.max_label == max(square.vlabels)
    assert index.max_label_frequency == max(index.frequencies)


def test_frequent_label_count(square):
    index = LabelIndex.from_graph(square)
    assert index.frequent_label_count(1) == 1
    assert index.frequent_label_count(len(square.vlabels)) == 0


def test_is_frequent_vertex(square):
    index = LabelIndex.from_graph(square)
    assert index.is_frequent_vertex(0, 2) is True
    assert index.is_frequent_vertex(1, 2) is False
    assert index.is_frequent_vertex(1, 1) is True


def test_threshold_must_be_positive(square):
    index = LabelIndex.from_graph(square)
    with pytest.raises(ValueError):
        index.frequent_label_count(0)
    with pytest.raises(ValueError):
        index.is_frequent_vertex(0, 0)


def test_vertex_out_of_range(square):
    index = LabelIndex.from_graph(square)
    with pytest.raises(IndexError):
        index.is_frequent_vertex(square.n_vertices, 1)


def test_label_above_classes_rejected():
    graph = labelled([[1], [0]], [1, 5], 2)
    with pytest.raises(ValueError):
        LabelIndex.from_graph(graph)


def test_unlabelled_graph_rejected():
    graph = Graph.from_adjacency([[1], [0]])
    with pytest.raises(ValueError):
        LabelIndex.from_graph(graph)
    with pytest.raises(ValueError):
        build_nlf(graph)


@pytest.mark.parametrize(
    "labels,nvc",
    [([1, 2, 1, 0], 2), ([0, 0, 1, 1], 2), ([2, 1, 2, 1], 2), ([0, 1, 2, 3], 3)],
)
def test_reverse_index_groups_vertices(labels, nvc):
    graph = labelled([[1, 3], [0, 2], [1, 3], [0, 2]], labels, nvc)
    index = LabelIndex.from_graph(graph)
    order, offsets = index.reverse_index()
    assert sorted(order) == list(range(len(labels)))
    assert offsets[0] == 0
    assert offsets[-1] == len(labels)
    for label in range(len(offsets) - 1):
        group = order[offsets[label]:offsets[label + 1]]
        assert all(labels[v] == label for v in group)
        assert group == sorted(group)


def test_nlf_counts_sum_to_degree(square):
    nlf = build_nlf(square)
    assert len(nlf) == square.n_vertices
    for v, counts in enumerate(nlf):
        assert sum(counts.values()) == square.degree(v)
        assert set(counts) <= {square.vlabels[u] for u in square.neighbors(v)}


def test_nlf_path():
    graph = labelled([[1], [0, 2], [1]], [1, 2, 1], 2)
    nlf = build_nlf(graph)
    assert nlf[1] == {1: 2}
    assert nlf[0] == {2: 1}