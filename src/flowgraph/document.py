"""Loading and discovery of ``*.flowgraph.json`` documents."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from pydantic import ValidationError

from flowgraph.exceptions import (
    DocumentDiscoveryError,
    DocumentNotFoundError,
    DocumentParseError,
)
from flowgraph.json_types import JSONValue
from flowgraph.model import (
    Edge,
    Flow,
    FlowgraphDocument,
    Invariant,
    Meta,
    Node,
    Step,
    kind_of,
)
from flowgraph.schema import DocumentDTO, NodeDTO

DOCUMENT_SUFFIX = ".flowgraph.json"
_COMMENT_KEY = "_comment"

_LOGGER = logging.getLogger(__name__)


def _strip_comment_edges(payload: Mapping[str, object]) -> dict[str, object]:
    cleaned = dict(payload)
    edges = cleaned.get("edges")
    if isinstance(edges, list):
        cleaned["edges"] = [
            edge
            for edge in edges
            if not (isinstance(edge, Mapping) and _COMMENT_KEY in edge)
        ]
    return cleaned


def _node_from_dto(node_id: str, dto: NodeDTO) -> Node:
    metadata: dict[str, JSONValue] = dict(dto.model_extra or {})
    return Node(
        id=node_id,
        kind=dto.kind if dto.kind else kind_of(node_id),
        loc=dto.loc,
        schema=dto.schema_name,
        values=tuple(str(value) for value in dto.values),
        fk=tuple(str(entry) for entry in dto.fk),
        metadata=metadata,
    )


def document_from_payload(
    payload: Mapping[str, object],
    *,
    source_path: Path | None = None,
) -> FlowgraphDocument:
    label = source_path if source_path is not None else "<payload>"
    try:
        dto = DocumentDTO.model_validate(_strip_comment_edges(payload))
    except ValidationError as exc:
        raise DocumentParseError(label, str(exc)) from exc
    nodes = {node_id: _node_from_dto(node_id, node) for node_id, node in dto.nodes.items()}
    edges = tuple(
        Edge(source=edge.source, target=edge.target, rel=edge.rel, note=edge.note)
        for edge in dto.edges
    )
    flows = {
        name: Flow(
            name=name,
            trigger=flow.trigger,
            steps=tuple(Step(node=step.node, then=step.then) for step in flow.steps),
        )
        for name, flow in dto.flows.items()
    }
    invariants = tuple(
        Invariant(
            id=invariant.id,
            rule=invariant.rule,
            scope=tuple(invariant.scope),
            enforce=invariant.enforce,
        )
        for invariant in dto.invariants
    )
    version = None if dto.version is None else str(dto.version)
    _LOGGER.debug(
        "loaded %s: %d nodes, %d edges, %d flows, %d invariants",
        label,
        len(nodes),
        len(edges),
        len(flows),
        len(invariants),
    )
    return FlowgraphDocument(
        meta=Meta(
            name=dto.meta.name,
            root=dto.meta.root,
            description=dto.meta.description,
        ),
        nodes=nodes,
        edges=edges,
        flows=flows,
        invariants=invariants,
        version=version,
        source_path=source_path,
    )


def load_document(path: Path) -> FlowgraphDocument:
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DocumentNotFoundError(path) from exc
    except (OSError, UnicodeError) as exc:
        raise DocumentParseError(path, str(exc)) from exc
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DocumentParseError(path, str(exc)) from exc
    if not isinstance(payload, dict):
        raise DocumentParseError(path, "top-level value must be a JSON object")
    return document_from_payload(payload, source_path=path.resolve())


def discover_document(directory: Path) -> Path:
    try:
        entries = sorted(entry.name for entry in directory.iterdir())
    except OSError:
        entries = []
    matches = tuple(name for name in entries if name.endswith(DOCUMENT_SUFFIX))
    if len(matches) == 1:
        return directory / matches[0]
    raise DocumentDiscoveryError(directory, matches)


def resolve_document_path(
    explicit: Path | None,
    *,
    cwd: Path,
    configured: Path | None = None,
) -> Path:
    """Pick the document for a command.

    An explicit argument wins, then a path configured in ``flowgraph.toml``,
    then the single ``*.flowgraph.json`` file in ``cwd``.
    """
    for candidate in (explicit, configured):
        if candidate is None:
            continue
        path = candidate if candidate.is_absolute() else cwd / candidate
        if not path.exists():
            raise DocumentNotFoundError(candidate)
        return path
    return discover_document(cwd)
