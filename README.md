# csrkit

Graphs stored in compressed sparse row (CSR) form, with the building blocks
that graph mining and graph learning code rests on. Pure Python, no
dependencies beyond the standard library.

## What is in it

- `csrkit.merge` – `intersect_merge` and `count_merge` for two ascending
  sequences.
- `csrkit.intersect` – `SetIntersection`, which picks merge or galloping
  intersection from the relative input sizes, plus `intersect_galloping`,
  `count_galloping`, `galloping_search` and `binary_search`.
- `csrkit.vertexset` – `VertexSet`, an immutable ascending vertex sequence
  with `difference` and `difference_count` (optionally bounded by `upper`).
- `csrkit.graph` – `Graph`, loaded with `Graph.load(prefix, ...)` from
  `prefix.meta.txt`, `prefix.vertex.bin` and `prefix.edge.bin` (optionally
  `.vlabel.bin` / `.elabel.bin`), or built with `Graph.from_adjacency`.
  It offers neighbour queries (`neighbors`, `out_neigh`, `in_neigh`),
  `build_reverse_graph`, `orientation` into a DAG, `sort_neighbors`,
  `init_edgelist`, `degree_histogram`, `is_connected`, `intersect_num`,
  `write_to_file`, `meta_summary` and `to_text`. `read_meta_info` reads the
  meta file on its own into a `GraphMeta`.
- `csrkit.transform` – `sort_and_clean_neighbors` (drops self loops and
  repeated edges, returns a `CleanReport`) and `symmetrize`.
- `csrkit.setops` – label-filtered intersections and differences over
  neighbour lists of a labelled graph.
- `csrkit.labels` – `LabelIndex` (label frequencies, frequent-label queries,
  a reverse index from label to vertices) and `build_nlf` for neighbourhood
  label frequencies.
- `csrkit.kcore` – `core_numbers` and `build_core_table`.
- `csrkit.pattern` – `Pattern`, a small query graph that can be read from an
  adjacency file, named (`wedge`, `triangle`, `4-path`, `diamond`, ...) and
  analysed into per-level `SetOperator` choices.
- `csrkit.scheduler` – `Scheduler` splits a graph's edge list into
  `Partition` queues by round robin, by vertex chunk, or least-loaded first.
- `csrkit.lgraph` – `LearningGraph`, the CSR graph used for graph learning,
  with `add_selfloop`, `generate_masked_graph` and `degree_counting`.

## Installation

```
pip install .
```

## Quick start

```python
from csrkit.graph import Graph
from csrkit.merge import intersect_merge, count_merge
from csrkit.kcore import core_numbers
from csrkit.pattern import Pattern

g = Graph.from_adjacency([[1, 2], [0, 2], [0, 1], [4], [3]])
print(g.degree(0), list(g.neighbors(0)))      # 2 [1, 2]
print(g.is_connected(0, 2))                    # True
print(core_numbers(g))

print(intersect_merge([1, 3, 5, 7], [3, 4, 5]))   # [3, 5]
print(count_merge([1, 3, 5, 7], [3, 4, 5]))       # 2

p = Pattern()
p.add_edge(0, 1)
p.add_edge(1, 2)
p.add_edge(0, 2)
print(p.compute_name())   # triangle
print(p.to_string())      # [0-1][0-2][1-2]
```

## What it does not do

The package is a library only: it installs no command-line program, and it
has no connected-components solver or verifier. Graphs are kept in memory as
Python lists; there is no memory-mapped loading and no compressed
neighbour-list format.

## Running the tests

```
pip install ".[test]"
pytest
```