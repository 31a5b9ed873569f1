from __future__ import annotations

import json
from pathlib import Path

from flowgraph.document import DOCUMENT_SUFFIX
from flowgraph.exceptions import FlowgraphError
from flowgraph.json_types import JSONObject

DEFAULT_SOURCE_ROOT = "src/"
STARTER_VERSION = "2.1"


def starter_document(name: str, *, root: str = DEFAULT_SOURCE_ROOT) -> JSONObject:
    return {
        "$flowgraph": STARTER_VERSION,
        "meta": {"name": name, "root": root},
        "nodes": {
            "type:ExampleConfig": {"kind": "type", "loc": "config.ts:1"},
            "method:loadConfig": {"kind": "method", "loc": "config.ts:10"},
        },
        "edges": [
            {
                "from": "type:ExampleConfig",
                "to": "method:loadConfig",
                "rel": "co_change",
                "note": "adding a config field requires updating the loader",
            }
        ],
        "flows": {},
        "invariants": [],
    }


def write_starter_document(directory: Path, *, root: str = DEFAULT_SOURCE_ROOT) -> Path:
    name = directory.resolve().name
    path = directory / f"{name}{DOCUMENT_SUFFIX}"
    if path.exists():
        raise FlowgraphError(f"{path.name} already exists.")
    payload = starter_document(name, root=root)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path
