from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Callable, Mapping

ROOT = Path(__file__).resolve().parents[1]
for _entry in (ROOT, ROOT / "src"):
    if str(_entry) not in sys.path:
        sys.path.insert(0, str(_entry))


import pytest

from flowgraph.analysis.location import SourceTree
from flowgraph.analysis.results import ResultLog
from tests.helpers import EXAMPLE_DIR, write_sources


@pytest.fixture
def tree(tmp_path: Path) -> SourceTree:
    return SourceTree(project_root=tmp_path)


@pytest.fixture
def log() -> ResultLog:
    return ResultLog()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    def _make(
        document: Mapping[str, object],
        files: Mapping[str, str] | None = None,
        *,
        name: str = "project.flowgraph.json",
    ) -> Path:
        write_sources(tmp_path, files or {})
        path = tmp_path / name
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        return path

    return _make


@pytest.fixture
def example_document_path() -> Path:
    return EXAMPLE_DIR / "tasks.flowgraph.json"
