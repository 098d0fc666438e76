# madios

`madios` holds the data structures for grammar induction in the style of
ADIOS. A corpus of token sequences becomes a graph of lexicon nodes with
one search path per sentence. Paths can be rewired to equivalence classes
(tokens that fill the same slot) and significant patterns (token runs
that belong together). The result can be written out as a probabilistic
context-free grammar or sampled to generate new sequences.

## Installation

```
pip install .
```

Tests need the `test` extra:

```
pip install .[test]
pytest
```

## Reading a corpus

`madios.textutils.read_sequences_from_file` reads one sequence per
non-blank line. A line may be wrapped in the `*` and `#` markers
(`* the cat sat #`), which are removed, or be plain whitespace-separated
tokens. If any line lacks the markers, a single `UserWarning` is issued.

```python
from madios.textutils import read_sequences_from_file

sequences = read_sequences_from_file("corpus.txt")
```

`textutils` also has `tokenise`, `getlines`, `uppercase`, `lowercase`,
`trim_spaces`, `get_time` and `seed_from_time`.

## Building and rewiring a graph

```python
from madios.graph import RDSGraph
from madios.structures import SignificantPattern

graph = RDSGraph([["the", "cat", "sat"], ["the", "cat", "ran"]], seed=1)
# nodes: 0 "*", 1 "#", 2 "the", 3 "cat", 4 "sat", 5 "ran"

matrix = graph.compute_connection_matrix(graph.paths[0])
occurrences = graph.rewirable_connections(matrix, (1, 2))   # where "the cat" occurs
graph.rewire(occurrences, SignificantPattern([2, 3]))       # adds node 6

print(graph.format_path(graph.paths[0]))   # [* P6 sat #]
print(graph.to_pcfg())
```

The grammar printed is:

```
P6 -> the cat [1]
S -> P6 ran [0.5]
S -> P6 sat [0.5]
```

`RDSGraph(sequences, quiet=True, seed=None)` numbers node 0 as the start
marker and node 1 as the end marker, and every path starts with 0 and
ends with 1. An empty list of sequences raises `ValueError`. The `seed`
fixes the random choices made by `generate`.

`RDSGraph.rewire(connections, target)` takes one of three targets:

- An `int` is the index of an existing equivalence-class node. Each
  connection's position is set to that node.
- An `EquivalenceClass` is first added as a new node, then used as above.
- A `SignificantPattern` is added as a new node. Each occurrence is
  collapsed into it, skipping occurrences that overlap, and the parse
  trees are updated to match.

Other members:

- `filter_connections`, `get_all_node_connections` and
  `find_existing_equivalence_class` query where nodes occur.
- `estimate_probabilities` recounts node use from the parse trees.
- `format_node`, `format_path`, `format_pattern`,
  `format_equivalence_class` and `node_name` give readable forms.
- `str(graph)` lists every path and node.
- `clone` makes a deep copy.
- `pattern_count` and `rewiring_count` report progress.

## Grammar output and generation

`RDSGraph.to_pcfg()` returns one rule per line, `LHS -> RHS [probability]`:

- `E<n>` rules give the members of an equivalence class, weighted by use
  in the parse trees.
- `P<n>` rules give the body of a pattern.
- `S` rules give the distinct top-level paths, normalised over the
  corpus and sorted.

`RDSGraph.generate(node=0)` expands a node into tokens and picks a member
at random for each class. `generate_path(search_path)` does the same for
every node of a path. It logs and skips indices that are out of range.

## Data structures

`madios.structures` has the following:

- `SearchPath`, a list of node indices with `segment`, `substitute` and
  `rewire`.
- `EquivalenceClass`, an ordered set with `add`, `has` and `overlap`.
- `SignificantPattern`, a tuple with `find`.
- `ParseTree` and `ParseNode`.
- `RDSNode` and the `LexiconType` enum.
- `ADIOSParams`, a frozen record of `eta`, `alpha`, `context_size` and
  `overlap_threshold`. It raises `ValueError` when `eta` or `alpha` lies
  outside [0, 1], or when `context_size` is negative.

## Array helpers

`madios.matrix` works on two-dimensional numpy arrays, with column-major
linear indices. It has the following:

- Text I/O: `format_array`, `parse_array`, `save_array` and `load_array`.
- Indexing: `sub2ind`, `ind2sub` and `find`.
- Block access: `getsub` and `setsub`, with inclusive bounds.
- Building and scaling: `repmat`, `diag`, `make_homogeneous` and
  `normalise_cols`.

## What this package does not do

The package does not search for significant patterns or equivalence
classes by itself. There is no loop that finds the best pattern in each
path, tests it for significance and rewires the graph until nothing new
turns up. The caller chooses what to rewire, as in the example above.
`ADIOSParams` only checks its values; nothing in the package reads them.
There is no command-line program.