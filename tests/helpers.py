from __future__ import annotations

from pathlib import Path
from typing import Mapping

EXAMPLE_DIR = Path(__file__).resolve().parents[1] / "example"


def write_sources(base: Path, files: Mapping[str, str]) -> None:
    for rel_path, text in files.items():
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
