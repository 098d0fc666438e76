"""The RDS graph: corpus paths over lexicon nodes, rewired as patterns are found."""

from __future__ import annotations

import copy
import logging
import math
import random
from typing import Iterable, Optional, Sequence, Union

from .structures import (
    Connection,
    EquivalenceClass,
    LexiconType,
    ParseTree,
    Range,
    RDSNode,
    SearchPath,
    SignificantPattern,
)
from .textutils import END_MARKER, START_MARKER, seed_from_time

logger = logging.getLogger(__name__)

ConnectionMatrix = list[list[list[Connection]]]
RewireTarget = Union[int, EquivalenceClass, SignificantPattern]


class RDSGraph:
    """Graph of lexicon nodes with one search path per corpus sentence.

    Node 0 is the start marker and node 1 the end marker; every path begins
    with 0 and ends with 1.
    """

    def __init__(
        self,
        sequences: Optional[Sequence[Sequence[str]]] = None,
        *,
        quiet: bool = True,
        seed: Optional[int] = None,
    ) -> None:
        self.nodes: list[RDSNode] = []
        self.paths: list[SearchPath] = []
        self.trees: list[ParseTree] = []
        self.counts: list[list[int]] = []
        self.corpus_size = 0
        self.quiet = quiet
        self.significant_patterns: list[int] = []
        self.rewiring_ops = 0
        self._rng = random.Random(seed_from_time() if seed is None else seed)
        if sequences is not None:
            if not sequences:
                raise ValueError("input sequences are empty")
            self._build_initial_graph(sequences)

    def _build_initial_graph(self, sequences: Sequence[Sequence[str]]) -> None:
        self.nodes.append(RDSNode(START_MARKER, LexiconType.START))
        self.nodes.append(RDSNode(END_MARKER, LexiconType.END))
        lexicon: dict[str, int] = {}
        for sequence in sequences:
            path = SearchPath([0])
            for token in sequence:
                index = lexicon.get(token)
                if index is None:
                    index = len(self.nodes)
                    lexicon[token] = index
                    self.nodes.append(RDSNode(token, LexiconType.SYMBOL))
                path.append(index)
            path.append(1)
            self.paths.append(path)
        self.update_all_connections()
        self.trees = [ParseTree(path) for path in self.paths]

    # ------------------------------------------------------------------ output

    def to_pcfg(self) -> str:
        """Return the learned grammar as ``LHS -> RHS [probability]`` lines.

        Probabilities are normalised over the rules sharing a left-hand side.
        """
        if not self.nodes:
            raise RuntimeError("no nodes in the graph")
        if len(self.counts) != len(self.nodes):
            self.estimate_probabilities()
        lines: list[str] = []
        for index, node in enumerate(self.nodes):
            counts = self.counts[index]
            if node.type is LexiconType.EC:
                total = float(sum(counts[: len(node.lexicon)])) or 1.0
                for k, unit in enumerate(node.lexicon):
                    lines.append(
                        f"E{index} -> {self.node_name(unit)} [{counts[k] / total:g}]"
                    )
            elif node.type is LexiconType.SP:
                total = float(counts[0]) or 1.0
                rhs = "".join(f" {self.node_name(unit)}" for unit in node.lexicon)
                lines.append(f"P{index} ->{rhs} [{counts[0] / total:g}]")

        rule_counts: dict[tuple[str, ...], int] = {}
        for path in self.paths:
            rhs_names = tuple(self.node_name(unit) for unit in path[1:-1])
            rule_counts[rhs_names] = rule_counts.get(rhs_names, 0) + 1
        total_rules = len(self.paths)
        for rhs_names in sorted(rule_counts):
            prob = rule_counts[rhs_names] / total_rules if total_rules else 1.0
            rhs = "".join(f" {name}" for name in rhs_names)
            lines.append(f"S ->{rhs} [{prob:g}]")
        return "".join(line + "\n" for line in lines)

    def generate(self, node: int = 0) -> list[str]:
        """Return a random token sequence derived from *node*."""
        if not self.nodes:
            raise RuntimeError("no nodes in the graph")
        if not 0 <= node < len(self.nodes):
            raise IndexError(f"node index {node} out of bounds")
        graph_node = self.nodes[node]
        kind = graph_node.type
        if kind is LexiconType.START:
            return [START_MARKER]
        if kind is LexiconType.END:
            return [END_MARKER]
        if kind is LexiconType.SYMBOL:
            return [graph_node.lexicon]
        if kind is LexiconType.EC:
            ec = graph_node.lexicon
            return self.generate(ec[math.floor(len(ec) * self._rng.random())])
        sequence: list[str] = []
        for unit in graph_node.lexicon:
            sequence.extend(self.generate(unit))
        return sequence

    def generate_path(self, search_path: Sequence[int]) -> list[str]:
        """Return a random token sequence derived from every node of *search_path*."""
        if not self.nodes:
            raise RuntimeError("no nodes in the graph")
        if not search_path:
            raise ValueError("search path is empty")
        sequence: list[str] = []
        for index in search_path:
            if not 0 <= index < len(self.nodes):
                logger.error("node index out of bounds (%d/%d)", index, len(self.nodes))
                continue
            node = self.nodes[index]
            if node.type is LexiconType.EC:
                if len(node.lexicon) > 0:
                    unit = node.lexicon[math.floor(len(node.lexicon) * self._rng.random())]
                    sequence.extend(self.generate(unit))
            else:
                sequence.extend(self.generate(index))
        return sequence

    # ------------------------------------------------------------ connections

    def compute_connection_matrix(self, search_path: Sequence[int]) -> ConnectionMatrix:
        """Return the symmetric matrix of connections matching each sub-path.

        Cell (j, i) holds the connections at which positions i..j of
        *search_path* occur in the corpus.
        """
        if not search_path:
            raise ValueError("search path is empty")
        dim = len(search_path)
        matrix: ConnectionMatrix = [[[] for _ in range(dim)] for _ in range(dim)]
        for i in range(dim):
            matrix[i][i] = self.get_all_node_connections(search_path[i])
            for j in range(i + 1, dim):
                matrix[j][i] = self.filter_connections(
                    matrix[j - 1][i], j - i, SearchPath([search_path[j]])
                )
                matrix[i][j] = matrix[j][i]
        return matrix

    def rewirable_connections(
        self, connections: ConnectionMatrix, pattern: Range
    ) -> list[Connection]:
        """Return the connections at which the whole *pattern* range occurs."""
        start, finish = pattern
        return list(connections[finish][start])

    def filter_connections(
        self,
        connections: Iterable[Connection],
        start_offset: int,
        search_path: Sequence[int],
    ) -> list[Connection]:
        """Keep the connections followed, *start_offset* later, by *search_path*.

        An equivalence class on the search path matches any of its members.
        """
        filtered: list[Connection] = []
        for connection in connections:
            path_index, position = connection
            path = self.paths[path_index]
            begin = position + start_offset
            if begin + len(search_path) > len(path):
                continue
            if all(
                self._matches(expected, path[begin + j])
                for j, expected in enumerate(search_path)
            ):
                filtered.append(connection)
        return filtered

    def _matches(self, expected: int, actual: int) -> bool:
        node = self.nodes[expected]
        if node.type is LexiconType.EC:
            return node.lexicon.has(actual)
        return expected == actual

    def get_all_node_connections(self, node_index: int) -> list[Connection]:
        """Return where the node occurs, including its members if it is a class."""
        if not 0 <= node_index < len(self.nodes):
            raise IndexError(f"node index {node_index} out of bounds")
        node = self.nodes[node_index]
        connections = list(node.connections)
        if node.type is LexiconType.EC:
            for unit in node.lexicon:
                connections.extend(self.nodes[unit].connections)
        return connections

    def find_existing_equivalence_class(self, ec: EquivalenceClass) -> int:
        """Return the first class node that is a subset of *ec*, or len(nodes)."""
        for index, node in enumerate(self.nodes):
            if node.type is LexiconType.EC and len(ec.overlap(node.lexicon)) == len(node.lexicon):
                return index
        return len(self.nodes)

    # ---------------------------------------------------------------- rewiring

    def rewire(self, connections: Sequence[Connection], target: RewireTarget) -> None:
        """Rewire the graph at *connections* to *target*.

        *target* may be the index of an existing equivalence-class node, a new
        EquivalenceClass (added as a node first) or a new SignificantPattern,
        whose occurrences are collapsed into one node.
        """
        if isinstance(target, SignificantPattern):
            self._rewire_pattern(connections, target)
        elif isinstance(target, EquivalenceClass):
            self.nodes.append(RDSNode(EquivalenceClass(target), LexiconType.EC))
            self._rewire_class(connections, len(self.nodes) - 1)
        elif isinstance(target, int):
            self._rewire_class(connections, target)
        else:
            raise TypeError(f"cannot rewire to {target!r}")

    def _rewire_class(self, connections: Sequence[Connection], ec: int) -> None:
        if not 0 <= ec < len(self.nodes) or self.nodes[ec].type is not LexiconType.EC:
            raise ValueError(f"node {ec} is not an equivalence class")
        for path_index, position in connections:
            self.paths[path_index][position] = ec
        self.rewiring_ops += len(connections)
        self.update_all_connections()

    def _rewire_pattern(
        self, connections: Sequence[Connection], pattern: SignificantPattern
    ) -> None:
        self.nodes.append(RDSNode(SignificantPattern(pattern), LexiconType.SP))
        new_node = len(self.nodes) - 1
        self.significant_patterns.append(new_node)
        if not connections:
            logger.warning("rewiring a pattern with no connections")
            return
        size = len(pattern)

        group_order: dict[int, int] = {}
        for path_index, _ in connections:
            group_order.setdefault(path_index, len(group_order))
        ordered = sorted(connections, key=lambda c: (group_order[c[0]], c[1]))

        valid: list[Connection] = [ordered[0]]
        for path_index, position in ordered[1:]:
            last_path, last_position = valid[-1]
            if path_index == last_path and position <= last_position + size - 1:
                continue
            valid.append((path_index, position))
        if not self.quiet:
            print(f"{len(valid)} valid_connections")

        for path_index, position in reversed(valid):
            if path_index >= len(self.paths):
                logger.warning(
                    "path index out of bounds (%d/%d)", path_index, len(self.paths)
                )
                continue
            path = self.paths[path_index]
            finish = position + size - 1
            if finish >= len(path):
                logger.warning("path position out of bounds (%d/%d)", position, len(path))
                continue
            tree = self.trees[path_index]
            for offset, (found, expected) in enumerate(zip(path[position : finish + 1], pattern)):
                if found != expected:
                    tree.rewire(position + offset, position + offset, expected)
            tree.rewire(position, finish, new_node)
            path.rewire(position, finish, new_node)
            self.rewiring_ops += 1

        self.update_all_connections()

    def update_all_connections(self) -> None:
        """Recompute every node's connections and parents and the corpus size."""
        for node in self.nodes:
            node.connections = []
            node.parents = []
        self.corpus_size = 0
        for path_index, path in enumerate(self.paths):
            self.corpus_size += len(path)
            for position, unit in enumerate(path):
                self.nodes[unit].add_connection((path_index, position))
        for index, node in enumerate(self.nodes):
            if node.type is LexiconType.SP:
                for unit in node.lexicon:
                    self.nodes[unit].parents.append((index, node.lexicon.find(unit)))
            elif node.type is LexiconType.EC:
                for unit in node.lexicon:
                    self.nodes[unit].parents.append((index, 0))

    # ------------------------------------------------------------ probabilities

    def estimate_probabilities(self) -> None:
        """Recount how often each node (and class member) is used in the parse trees."""
        self.counts = [
            [0] * len(node.lexicon) if node.type is LexiconType.EC else [0]
            for node in self.nodes
        ]
        for tree in self.trees:
            tree_nodes = tree.nodes
            for parse_node in tree_nodes[1:]:
                index = parse_node.value
                if index is None or index >= len(self.nodes):
                    logger.warning(
                        "parse node value out of bounds (%s/%d)", index, len(self.nodes)
                    )
                    continue
                node = self.nodes[index]
                if node.type is LexiconType.EC:
                    if not parse_node.children:
                        continue
                    child_value = tree_nodes[parse_node.children[0]].value
                    for k, unit in enumerate(node.lexicon):
                        if unit == child_value:
                            self.counts[index][k] += 1
                else:
                    self.counts[index][0] += 1

    # --------------------------------------------------------------- printing

    def _label(self, index: int) -> str:
        if not 0 <= index < len(self.nodes):
            return f"[INVALID_INDEX:{index}]"
        node = self.nodes[index]
        if node.type is LexiconType.EC:
            return f"E{index}"
        if node.type is LexiconType.SP:
            return f"P{index}"
        return self._terminal(node)

    @staticmethod
    def _terminal(node: RDSNode) -> str:
        if node.type is LexiconType.START:
            return START_MARKER
        if node.type is LexiconType.END:
            return END_MARKER
        return str(node.lexicon)

    def format_pattern(self, sp: Iterable[int]) -> str:
        """Return the pattern's units written one after another."""
        return "".join(self._label(unit) for unit in sp)

    def format_equivalence_class(self, ec: Iterable[int]) -> str:
        """Return the class members separated by commas."""
        return ",".join(self._label(unit) for unit in ec)

    def format_node(self, node: int) -> str:
        """Return a node with the contents of a class or pattern spelled out."""
        if not 0 <= node < len(self.nodes):
            return f"[INVALID_NODE:{node}]"
        graph_node = self.nodes[node]
        if graph_node.type is LexiconType.EC:
            return f"E[{self.format_equivalence_class(graph_node.lexicon)}]"
        if graph_node.type is LexiconType.SP:
            return f"P[{self.format_pattern(graph_node.lexicon)}]"
        return self._terminal(graph_node)

    def format_path(self, path: Iterable[int]) -> str:
        """Return the path's nodes in brackets, separated by spaces."""
        return "[" + " ".join(self._label(unit) for unit in path) + "]"

    def node_name(self, node: int) -> str:
        """Return the short name of a node: E<n>, P<n>, a symbol, * or #."""
        if not 0 <= node < len(self.nodes):
            return f"[INVALID_NODE:{node}]"
        return self._label(node)

    def __str__(self) -> str:
        lines = ["Search Paths"]
        lines.extend(self.format_path(path) for path in self.paths)
        lines.append("")
        lines.append(f"RDS Graph Nodes {len(self.nodes)}")
        for index, node in enumerate(self.nodes):
            parents = "   ".join(str(parent[0]) for parent in node.parents)
            lines.append(
                f"Lexicon {index}: {self.format_node(index)}   ------->  "
                f"{len(node.parents)}  [{parents}]"
            )
        return "\n".join(lines) + "\n"

    # ----------------------------------------------------------------- misc

    def clone(self) -> "RDSGraph":
        """Return a deep, independent copy of the graph."""
        return copy.deepcopy(self)

    def pattern_count(self) -> int:
        """Return how many significant patterns have been added."""
        return len(self.significant_patterns)

    def rewiring_count(self) -> int:
        """Return how many rewiring operations have been performed."""
        return self.rewiring_ops