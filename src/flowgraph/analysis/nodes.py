"""Structural checks: does each declared node exist where its ``loc`` says?

Matching is textual and deliberately language-agnostic. Each built-in kind
offers several declaration shapes (TypeScript, Python, Go, Rust, SQL, ...)
and a node passes when any of them matches.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from flowgraph.analysis.location import (
    DEFAULT_WINDOW,
    ResolvedLocation,
    SourceTree,
    matches_any,
    text_window,
)
from flowgraph.analysis.results import Category, ResultLog
from flowgraph.model import FlowgraphDocument, Node

NodeVerifier = Callable[[Node, SourceTree, ResultLog], None]

_DECLARATION_WINDOW = 5
_ROUTE_WINDOW = 10
_FK_TARGET_RE = re.compile(r"-> (\w+)")

_LOGGER = logging.getLogger(__name__)


def _file_not_found(node: Node, log: ResultLog) -> None:
    log.failed(Category.STRUCTURAL, node.id, f"File not found: {node.loc}")


def _record_presence(
    node: Node,
    source: str,
    location: ResolvedLocation,
    patterns: list[re.Pattern[str]],
    *,
    radius: int,
    log: ResultLog,
    near_line_subject: str = "Found",
) -> None:
    """PASS, or WARN when the evidence sits outside the declared line window.

    The caller has already established that ``patterns`` match ``source``.
    """
    if location.line is None:
        log.passed(Category.STRUCTURAL, node.id, f"Found in {node.loc}")
        return
    region = text_window(source, location.line, radius)
    if matches_any(region, patterns):
        log.passed(Category.STRUCTURAL, node.id, f"Found at {node.loc}")
    else:
        log.warned(
            Category.STRUCTURAL,
            node.id,
            f"{near_line_subject} in file but not near line {location.line}",
        )


def type_patterns(name: str) -> list[re.Pattern[str]]:
    escaped = re.escape(name)
    return [
        re.compile(rf"(?:interface|type|enum|class|struct)\s+{escaped}\b"),
        re.compile(rf"(?:const|let|var)\s+{escaped}Schema\s*="),
        re.compile(rf"(?:const|let|var)\s+{escaped}\s*="),
        re.compile(rf"(?:def|class)\s+{escaped}\s*[:(]"),
        re.compile(rf"^{escaped}(?:Schema)?\s*(?::[^=\n]*)?=(?!=)", re.MULTILINE),
    ]


def method_patterns(name: str) -> list[re.Pattern[str]]:
    escaped = re.escape(name)
    return [
        re.compile(rf"(?:async\s+)?{escaped}\s*\("),
        re.compile(rf"(?:private|public|protected)\s+(?:async\s+)?{escaped}\s*\("),
        re.compile(rf"def\s+{escaped}\s*\("),
        re.compile(rf"func\s+(?:\([^)]*\)\s*)?{escaped}\s*\("),
        re.compile(rf"fn\s+{escaped}\s*[<(]"),
    ]


def table_pattern(name: str) -> re.Pattern[str]:
    return re.compile(
        rf"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?{re.escape(name)}\b",
        re.IGNORECASE,
    )


def route_patterns(http_method: str, path: str) -> list[re.Pattern[str]]:
    method = re.escape(http_method)
    escaped_path = re.escape(path)
    return [
        re.compile(rf"\.(?i:{method})\s*\(\s*['\"`]{escaped_path}['\"`]"),
        re.compile(rf"(?i:{method}).*{escaped_path}"),
    ]


def quoted_literal_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"['\"`]{re.escape(name)}['\"`]")


def verify_type_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    location, source = tree.read(node.loc)
    if source is None:
        _file_not_found(node, log)
        return
    name = node.identifier
    patterns = type_patterns(name)
    if not matches_any(source, patterns):
        log.failed(Category.STRUCTURAL, node.id, f"Type '{name}' not found in {node.loc}")
        return
    _record_presence(
        node, source, location, patterns, radius=_DECLARATION_WINDOW, log=log
    )
    if node.schema and node.schema not in source:
        log.failed(Category.STRUCTURAL, node.id, f"Schema '{node.schema}' not found")
    for value in node.values:
        if value not in source:
            log.failed(Category.STRUCTURAL, node.id, f"Enum value '{value}' not found")


def verify_method_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    location, source = tree.read(node.loc)
    if source is None:
        _file_not_found(node, log)
        return
    method_name = node.identifier.split(".")[-1]
    patterns = method_patterns(method_name)
    if not matches_any(source, patterns):
        log.failed(
            Category.STRUCTURAL,
            node.id,
            f"Method '{method_name}' not found in {node.loc}",
        )
        return
    _record_presence(
        node,
        source,
        location,
        patterns,
        radius=_DECLARATION_WINDOW,
        log=log,
        near_line_subject="Method found",
    )


def verify_table_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    _, source = tree.read(node.loc)
    if source is None:
        _file_not_found(node, log)
        return
    table_name = node.identifier
    if not table_pattern(table_name).search(source):
        log.failed(Category.STRUCTURAL, node.id, f"CREATE TABLE '{table_name}' not found")
        return
    log.passed(Category.STRUCTURAL, node.id, "Table found")
    for entry in node.fk:
        match = _FK_TARGET_RE.search(entry)
        if match and match.group(1) not in source:
            log.warned(
                Category.STRUCTURAL, node.id, f"FK to '{match.group(1)}' not in DDL"
            )


def verify_endpoint_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    location, source = tree.read(node.loc)
    if source is None:
        _file_not_found(node, log)
        return
    endpoint = node.identifier
    http_method, sep, path = endpoint.partition(" ")
    if not sep:
        if endpoint in source:
            log.passed(Category.STRUCTURAL, node.id, "Endpoint reference found")
        else:
            log.failed(Category.STRUCTURAL, node.id, f"Endpoint '{endpoint}' not found")
        return
    http_method = http_method.lower()
    path = path.strip()
    patterns = route_patterns(http_method, path)
    if not matches_any(source, patterns):
        log.failed(
            Category.STRUCTURAL, node.id, f"Route '{http_method} {path}' not found"
        )
        return
    if location.line is None:
        log.passed(Category.STRUCTURAL, node.id, f"Route found in {node.loc}")
    elif matches_any(text_window(source, location.line, _ROUTE_WINDOW), patterns):
        log.passed(Category.STRUCTURAL, node.id, f"Route found at {node.loc}")
    else:
        log.warned(
            Category.STRUCTURAL,
            node.id,
            f"Route in file but not near line {location.line}",
        )


def _mentions_event(text: str, event_name: str) -> bool:
    return bool(quoted_literal_pattern(event_name).search(text)) or event_name in text


def verify_event_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    location, source = tree.read(node.loc)
    if source is None:
        _file_not_found(node, log)
        return
    event_name = node.identifier
    if not _mentions_event(source, event_name):
        log.failed(Category.STRUCTURAL, node.id, f"Event '{event_name}' not found")
        return
    if location.line is not None and not _mentions_event(
        text_window(source, location.line, DEFAULT_WINDOW), event_name
    ):
        log.warned(
            Category.STRUCTURAL,
            node.id,
            f"Event '{event_name}' in file but not near line {location.line}",
        )
        return
    log.passed(Category.STRUCTURAL, node.id, f"Event '{event_name}' found")


def verify_custom_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    if tree.is_readable(node.loc):
        log.passed(Category.STRUCTURAL, node.id, f"File exists at {node.loc}")
    else:
        _file_not_found(node, log)


NODE_VERIFIERS: dict[str, NodeVerifier] = {
    "type": verify_type_node,
    "method": verify_method_node,
    "table": verify_table_node,
    "endpoint": verify_endpoint_node,
    "event": verify_event_node,
}


def verify_node(node: Node, tree: SourceTree, log: ResultLog) -> None:
    verifier = NODE_VERIFIERS.get(node.kind)
    if verifier is None:
        _LOGGER.debug("node %s has custom kind %r; checking file only", node.id, node.kind)
        verifier = verify_custom_node
    verifier(node, tree, log)


def verify_nodes(document: FlowgraphDocument, tree: SourceTree, log: ResultLog) -> None:
    for node in document.nodes.values():
        verify_node(node, tree, log)
