"""Core data structures of the RDS graph: paths, lexicon units and parse trees."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

Connection = tuple[int, int]
"""A (path index, position in path) pair."""

Range = tuple[int, int]
"""An inclusive (start, finish) range of path positions."""


class LexiconType(enum.Enum):
    """Kind of lexicon unit held by a graph node."""

    START = "start"
    END = "end"
    SYMBOL = "symbol"
    EC = "ec"
    SP = "sp"


@dataclass(frozen=True)
class ADIOSParams:
    """Parameters of the distillation algorithm."""

    eta: float
    alpha: float
    context_size: int
    overlap_threshold: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.eta <= 1.0:
            raise ValueError(f"eta must lie in [0, 1], got {self.eta}")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must lie in [0, 1], got {self.alpha}")
        if self.context_size < 0:
            raise ValueError(f"context_size must be non-negative, got {self.context_size}")


def _check_range(length: int, start: int, finish: int) -> None:
    if not 0 <= start <= finish < length:
        raise IndexError(f"range [{start}, {finish}] outside path of length {length}")


class SearchPath(list):
    """A path through the graph: a list of node indices."""

    def segment(self, start: int, finish: int) -> "SearchPath":
        """Return the nodes at positions start..finish inclusive."""
        _check_range(len(self), start, finish)
        return SearchPath(self[start : finish + 1])

    def substitute(self, start: int, finish: int, segment: Iterable[int]) -> "SearchPath":
        """Return a copy with positions start..finish replaced by *segment*."""
        _check_range(len(self), start, finish)
        return SearchPath([*self[:start], *segment, *self[finish + 1 :]])

    def rewire(self, start: int, finish: int, node: int) -> None:
        """Collapse positions start..finish in place into the single *node*."""
        _check_range(len(self), start, finish)
        self[start : finish + 1] = [node]


class EquivalenceClass:
    """An ordered set of interchangeable node indices."""

    __slots__ = ("_units",)

    def __init__(self, units: Iterable[int] = ()) -> None:
        self._units: list[int] = []
        for unit in units:
            self.add(unit)

    def add(self, unit: int) -> bool:
        """Add *unit* unless present; return whether it was added."""
        if unit in self._units:
            return False
        self._units.append(unit)
        return True

    def has(self, unit: int) -> bool:
        """Return whether *unit* belongs to the class."""
        return unit in self._units

    def overlap(self, other: Iterable[int]) -> "EquivalenceClass":
        """Return the units of this class also found in *other*, in this order."""
        others = set(other)
        return EquivalenceClass(unit for unit in self._units if unit in others)

    def __contains__(self, unit: object) -> bool:
        return unit in self._units

    def __len__(self) -> int:
        return len(self._units)

    def __getitem__(self, index: int) -> int:
        return self._units[index]

    def __iter__(self) -> Iterator[int]:
        return iter(self._units)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EquivalenceClass):
            return self._units == other._units
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"EquivalenceClass({self._units!r})"


class SignificantPattern(tuple):
    """An immutable sequence of node indices forming a pattern."""

    def find(self, unit: int) -> int:
        """Return the position of the first occurrence of *unit*."""
        try:
            return self.index(unit)
        except ValueError:
            raise ValueError(f"{unit} is not part of the pattern") from None

    def __repr__(self) -> str:
        return f"SignificantPattern({list(self)!r})"


@dataclass
class ParseNode:
    """A node of a parse tree; children are indices into the tree's node list."""

    value: Optional[int]
    children: list[int] = field(default_factory=list)


class ParseTree:
    """Parse tree of one corpus sentence, built up as the path is rewired.

    Node 0 is the root; its children mirror the current search path.
    """

    def __init__(self, path: Iterable[int] = ()) -> None:
        self._nodes: list[ParseNode] = [ParseNode(None)]
        for value in path:
            self._nodes[0].children.append(len(self._nodes))
            self._nodes.append(ParseNode(value))

    @property
    def nodes(self) -> list[ParseNode]:
        """All nodes, root first."""
        return self._nodes

    @property
    def top_level(self) -> list[int]:
        """Values of the root's children, which match the current path."""
        return [self._nodes[child].value for child in self._nodes[0].children]

    def rewire(self, start: int, finish: int, value: int) -> None:
        """Group the root's children start..finish under a new node holding *value*."""
        root = self._nodes[0]
        _check_range(len(root.children), start, finish)
        new_index = len(self._nodes)
        self._nodes.append(ParseNode(value, root.children[start : finish + 1]))
        root.children[start : finish + 1] = [new_index]

    def leaves(self) -> list[int]:
        """Values of the leaf nodes from left to right."""
        result: list[int] = []
        stack = list(reversed(self._nodes[0].children))
        while stack:
            node = self._nodes[stack.pop()]
            if node.children:
                stack.extend(reversed(node.children))
            else:
                result.append(node.value)
        return result

    def __len__(self) -> int:
        return len(self._nodes)

    def __str__(self) -> str:
        lines: list[str] = []

        def walk(index: int, depth: int) -> None:
            node = self._nodes[index]
            label = "ROOT" if node.value is None else str(node.value)
            lines.append("  " * depth + label)
            for child in node.children:
                walk(child, depth + 1)

        walk(0, 0)
        return "\n".join(lines)


@dataclass
class RDSNode:
    """A graph node: a lexicon unit with the path positions where it occurs."""

    lexicon: Any
    type: LexiconType
    connections: list[Connection] = field(default_factory=list)
    parents: list[Connection] = field(default_factory=list)

    def add_connection(self, connection: Connection) -> None:
        """Record that the node occurs at (path index, position)."""
        self.connections.append(tuple(connection))