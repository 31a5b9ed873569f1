"""Relational checks: evidence in the source node's file for each edge."""

from __future__ import annotations

import logging
import re
from typing import Callable, Mapping

from flowgraph.analysis.location import SourceTree, matches_any
from flowgraph.analysis.nodes import quoted_literal_pattern
from flowgraph.analysis.results import Category, ResultLog
from flowgraph.model import Edge, FlowgraphDocument, Node, strip_kind

EdgeVerifier = Callable[[Edge, Node, str, ResultLog], None]

_LOGGER = logging.getLogger(__name__)


def _passed(edge: Edge, log: ResultLog, message: str) -> None:
    log.passed(Category.RELATIONAL, edge.label, message)


def _failed(edge: Edge, log: ResultLog, message: str) -> None:
    log.failed(Category.RELATIONAL, edge.label, message)


def _warned(edge: Edge, log: ResultLog, message: str) -> None:
    log.warned(Category.RELATIONAL, edge.label, message)


def verify_co_change(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    # Only endpoint existence is checkable; the obligation itself is declarative.
    message = "Co-change contract"
    if edge.note:
        message = f"{message}: {edge.note}"
    _passed(edge, log, message)


def validation_patterns(schema_name: str) -> list[re.Pattern[str]]:
    escaped = re.escape(schema_name)
    return [
        re.compile(rf"{escaped}\.(?:parse|safeParse|validate)\s*\("),
        re.compile(rf"{escaped}\.check\s*\("),
    ]


def verify_validates(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    schema_name = target.schema
    if not schema_name:
        _warned(edge, log, "No schema declared on target")
        return
    if matches_any(source, validation_patterns(schema_name)):
        _passed(edge, log, f"{schema_name} validation found")
    else:
        _failed(edge, log, f"No {schema_name} validation call")


def verify_calls(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    method_name = strip_kind(edge.target, "method").split(".")[-1]
    if re.search(rf"{re.escape(method_name)}\s*\(", source):
        _passed(edge, log, "Call site found")
    else:
        _failed(edge, log, f"No call to '{method_name}'")


def table_access_patterns(table_name: str) -> list[re.Pattern[str]]:
    escaped = re.escape(table_name)
    return [
        re.compile(
            rf"(?:INSERT\s+INTO|UPDATE|DELETE\s+FROM|SELECT.*FROM)\s+{escaped}",
            re.IGNORECASE,
        ),
        re.compile(rf"['\"`].*{escaped}.*['\"`]"),
    ]


def verify_table_access(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    table_name = strip_kind(edge.target, "table")
    if matches_any(source, table_access_patterns(table_name)):
        _passed(edge, log, f"DB op on '{table_name}' found")
    else:
        _warned(edge, log, "No direct DB op (may be indirect)")


def verify_emits(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    event_name = strip_kind(edge.target, "event")
    if quoted_literal_pattern(event_name).search(source):
        _passed(edge, log, f"Event '{event_name}' referenced")
    else:
        _failed(edge, log, f"No reference to '{event_name}'")


def verify_listens(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    event_name = strip_kind(edge.target, "event")
    if quoted_literal_pattern(event_name).search(source):
        _passed(edge, log, f"Listener for '{event_name}' found")
    else:
        _warned(edge, log, f"No listener for '{event_name}'")


def verify_custom_relation(edge: Edge, target: Node, source: str, log: ResultLog) -> None:
    if not edge.rel:
        _passed(edge, log, "Relation accepted")
        return
    _passed(edge, log, f"Relation '{edge.rel}' accepted")


EDGE_VERIFIERS: dict[str, EdgeVerifier] = {
    "co_change": verify_co_change,
    "validates": verify_validates,
    "calls": verify_calls,
    "writes": verify_table_access,
    "reads": verify_table_access,
    "emits": verify_emits,
    "listens": verify_listens,
}


def verify_edge(
    edge: Edge, nodes: Mapping[str, Node], tree: SourceTree, log: ResultLog
) -> None:
    source_node = nodes.get(edge.source)
    if source_node is None:
        _failed(edge, log, "Source node missing")
        return
    target_node = nodes.get(edge.target)
    if target_node is None:
        _failed(edge, log, "Target node missing")
        return
    _, source = tree.read(source_node.loc)
    if source is None:
        _failed(edge, log, "Source file not found")
        return
    verifier = EDGE_VERIFIERS.get(edge.rel)
    if verifier is None:
        _LOGGER.debug("edge %s has custom relation; accepting", edge.label)
        verifier = verify_custom_relation
    verifier(edge, target_node, source, log)


def verify_edges(document: FlowgraphDocument, tree: SourceTree, log: ResultLog) -> None:
    for edge in document.edges:
        verify_edge(edge, document.nodes, tree, log)
