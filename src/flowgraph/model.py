from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from flowgraph.json_types import NodeMetadata

CO_CHANGE = "co_change"

NEXT = "next"
DONE = "DONE"
FAIL = "FAIL"
TERMINAL_TARGETS: frozenset[str] = frozenset({NEXT, DONE, FAIL})


def strip_kind(node_id: str, kind: str) -> str:
    """Return the identifier part of ``kind:identifier``.

    Ids that do not carry the prefix are returned unchanged.
    """
    prefix = f"{kind}:"
    if node_id.startswith(prefix):
        return node_id[len(prefix):]
    return node_id


def kind_of(node_id: str) -> str:
    kind, sep, _ = node_id.partition(":")
    return kind if sep else ""


@dataclass(frozen=True)
class Node:
    id: str
    kind: str
    loc: str
    schema: str | None = None
    values: tuple[str, ...] = ()
    fk: tuple[str, ...] = ()
    metadata: NodeMetadata = field(default_factory=dict)

    @property
    def identifier(self) -> str:
        return strip_kind(self.id, self.kind)


@dataclass(frozen=True)
class Edge:
    source: str
    target: str
    rel: str
    note: str | None = None

    @property
    def label(self) -> str:
        return f"{self.source} -[{self.rel}]-> {self.target}"

    @property
    def is_co_change(self) -> bool:
        return self.rel == CO_CHANGE


@dataclass(frozen=True)
class Step:
    node: str
    then: str | Mapping[str, str] = NEXT

    @property
    def is_branch(self) -> bool:
        return isinstance(self.then, Mapping)

    def targets(self) -> tuple[tuple[str, str], ...]:
        """Non-terminal ``(label, target)`` pairs this step can jump to.

        A mapping contributes one pair per condition label; a bare node id
        contributes a single pair labelled ``then``.
        """
        if isinstance(self.then, Mapping):
            return tuple(
                (label, target)
                for label, target in self.then.items()
                if target not in TERMINAL_TARGETS
            )
        if self.then in TERMINAL_TARGETS:
            return ()
        return (("then", self.then),)


@dataclass(frozen=True)
class Flow:
    name: str
    trigger: str
    steps: tuple[Step, ...] = ()

    @property
    def step_nodes(self) -> frozenset[str]:
        return frozenset(step.node for step in self.steps)


@dataclass(frozen=True)
class Invariant:
    id: str
    rule: str
    scope: tuple[str, ...] = ()
    enforce: str | None = None


@dataclass(frozen=True)
class Meta:
    name: str = ""
    root: str = ""
    description: str | None = None


@dataclass(frozen=True)
class FlowgraphDocument:
    meta: Meta
    nodes: Mapping[str, Node]
    edges: tuple[Edge, ...] = ()
    flows: Mapping[str, Flow] = field(default_factory=dict)
    invariants: tuple[Invariant, ...] = ()
    version: str | None = None
    source_path: Path | None = None

    @property
    def project_root(self) -> Path:
        if self.source_path is None:
            return Path.cwd()
        return self.source_path.parent

    @property
    def display_name(self) -> str:
        if self.meta.name:
            return self.meta.name
        if self.source_path is not None:
            return self.source_path.name
        return "flowgraph"
