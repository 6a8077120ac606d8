"""Syntax tree model consumed by the RefactorIQ rule engine.

Trees arrive from an upstream parser in ESTree shape (``type`` tag, ``loc``
span, kind-specific children).  Nodes keep every non-location attribute in
``fields`` so rules can reach kind-specific children without a class per kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath
from typing import Any, Iterator, Mapping

__all__ = [
    "Language",
    "SourceLocation",
    "Node",
    "SyntaxTree",
    "LOOP_KINDS",
    "FUNCTION_KINDS",
    "call_name",
    "call_receiver",
]

LOOP_KINDS: frozenset[str] = frozenset(
    {"ForStatement", "WhileStatement", "DoWhileStatement", "ForInStatement", "ForOfStatement"}
)
FUNCTION_KINDS: frozenset[str] = frozenset(
    {"FunctionDeclaration", "FunctionExpression", "ArrowFunctionExpression"}
)

_TS_SUFFIXES = {".ts", ".tsx", ".mts", ".cts"}
_SKIPPED_KEYS = {"type", "loc", "range", "start", "end"}


class Language(str, Enum):
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    BOTH = "both"

    @classmethod
    def from_filename(cls, file_name: str) -> Language:
        if PurePath(file_name).suffix.lower() in _TS_SUFFIXES:
            return cls.TYPESCRIPT
        return cls.JAVASCRIPT


@dataclass(frozen=True)
class SourceLocation:
    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SourceLocation:
        start = raw.get("start") if isinstance(raw.get("start"), Mapping) else {}
        end = raw.get("end") if isinstance(raw.get("end"), Mapping) else start
        return cls(
            start_line=int(start.get("line", 1)),
            start_column=int(start.get("column", 0)),
            end_line=int(end.get("line", start.get("line", 1))),
            end_column=int(end.get("column", 0)),
        )


@dataclass(eq=False)
class Node:
    """A single tree node.  Identity equality: two nodes are equal only if they are the same node."""

    kind: str
    loc: SourceLocation | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def child(self, name: str) -> Node | None:
        value = self.fields.get(name)
        return value if isinstance(value, Node) else None

    def children(self) -> Iterator[Node]:
        for value in self.fields.values():
            if isinstance(value, Node):
                yield value
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, Node):
                        yield item

    @property
    def line(self) -> int:
        return self.loc.start_line if self.loc else 1

    @property
    def column(self) -> int:
        return self.loc.start_column if self.loc else 0

    @property
    def name(self) -> str | None:
        """Identifier name for ``Identifier`` nodes (and ESTree-like nodes carrying ``name``)."""
        value = self.fields.get("name")
        return value if isinstance(value, str) else None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Node:
        loc = SourceLocation.from_dict(raw["loc"]) if isinstance(raw.get("loc"), Mapping) else None
        fields: dict[str, Any] = {}
        for key, value in raw.items():
            if key in _SKIPPED_KEYS:
                continue
            fields[key] = _convert(value)
        return cls(kind=str(raw["type"]), loc=loc, fields=fields)


def _is_node_dict(value: Any) -> bool:
    return isinstance(value, Mapping) and isinstance(value.get("type"), str)


def _convert(value: Any) -> Any:
    if _is_node_dict(value):
        return Node.from_dict(value)
    if isinstance(value, list):
        return [_convert(item) for item in value]
    return value


class SyntaxTree:
    """Read-only wrapper around a root :class:`Node` with traversal helpers."""

    def __init__(self, root: Node) -> None:
        self.root = root

    @classmethod
    def empty(cls) -> SyntaxTree:
        return cls(Node(kind="Program", fields={"body": []}))

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> SyntaxTree:
        if not _is_node_dict(raw):
            raise ValueError("Syntax tree root must be a mapping with a string 'type' key")
        return cls(Node.from_dict(raw))

    def walk(self, start: Node | None = None) -> Iterator[tuple[Node, Node | None]]:
        """Yield ``(node, parent)`` pairs in pre-order, children in field order."""
        origin = start or self.root
        stack: list[tuple[Node, Node | None]] = [(origin, None)]
        while stack:
            node, parent = stack.pop()
            yield node, parent
            stack.extend((c, node) for c in reversed(list(node.children())))

    def nodes(self, start: Node | None = None) -> Iterator[Node]:
        for node, _ in self.walk(start):
            yield node

    def find_by_kind(self, kinds: str | frozenset[str] | set[str], start: Node | None = None) -> list[Node]:
        wanted = {kinds} if isinstance(kinds, str) else kinds
        return [n for n in self.nodes(start) if n.kind in wanted]

    def find_calls(self, callee_name: str | None = None, start: Node | None = None) -> list[Node]:
        """Find ``CallExpression`` nodes, optionally filtered by callee or member property name."""
        calls: list[Node] = []
        for node in self.nodes(start):
            if node.kind != "CallExpression":
                continue
            if callee_name is None or call_name(node) == callee_name:
                calls.append(node)
        return calls

    def find_loops(self, start: Node | None = None) -> list[Node]:
        return self.find_by_kind(LOOP_KINDS, start)

    def find_functions(self, start: Node | None = None) -> list[Node]:
        return self.find_by_kind(FUNCTION_KINDS, start)

    def identifiers(self, start: Node | None = None) -> list[Node]:
        return self.find_by_kind("Identifier", start)

    def __len__(self) -> int:
        return sum(1 for _ in self.nodes())


def call_name(call: Node) -> str | None:
    """Return ``foo`` for ``foo()`` and ``x.foo()``; ``None`` for anything else."""
    callee = call.child("callee")
    if callee is None:
        return None
    if callee.kind == "Identifier":
        return callee.name
    if callee.kind == "MemberExpression":
        prop = callee.child("property")
        return prop.name if prop is not None else None
    return None


def call_receiver(call: Node) -> str | None:
    """Return ``x`` for ``x.foo()`` when the receiver is a plain identifier."""
    callee = call.child("callee")
    if callee is None or callee.kind != "MemberExpression":
        return None
    obj = callee.child("object")
    return obj.name if obj is not None and obj.kind == "Identifier" else None
