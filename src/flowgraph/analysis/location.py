from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from flowgraph.model import FlowgraphDocument

DEFAULT_WINDOW = 15

_LINE_NUMBER_RE = re.compile(r"\d+")

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedLocation:
    path: Path
    line: int | None = None


def resolve_location(loc: str, *, project_root: Path, root: str = "") -> ResolvedLocation:
    """Split ``path[:line]`` and anchor the path under both roots.

    Only a purely numeric final segment counts as a line number, so paths
    that contain colons of their own survive intact.
    """
    parts = loc.split(":")
    line: int | None = None
    if len(parts) > 1 and _LINE_NUMBER_RE.fullmatch(parts[-1]):
        line = int(parts.pop())
    path = project_root / root / ":".join(parts)
    return ResolvedLocation(path=path, line=line)


def read_source(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        _LOGGER.debug("cannot read %s: %s", path, exc)
        return None


def text_window(source: str, line: int, radius: int = DEFAULT_WINDOW) -> str:
    """Return the lines around 1-based ``line``.

    The window starts ``radius`` lines above ``line`` and stops ``radius - 1``
    lines below it, so it holds ``2 * radius`` lines away from the file edges.
    """
    lines = source.split("\n")
    start = max(0, line - 1 - radius)
    end = min(len(lines), line - 1 + radius)
    return "\n".join(lines[start:end])


def matches_any(text: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    return any(pattern.search(text) for pattern in patterns)


@dataclass(frozen=True)
class SourceTree:
    project_root: Path
    root: str = ""

    @classmethod
    def for_document(cls, document: FlowgraphDocument) -> SourceTree:
        return cls(project_root=document.project_root, root=document.meta.root)

    def resolve(self, loc: str) -> ResolvedLocation:
        return resolve_location(loc, project_root=self.project_root, root=self.root)

    def read(self, loc: str) -> tuple[ResolvedLocation, str | None]:
        location = self.resolve(loc)
        return location, read_source(location.path)

    def is_readable(self, loc: str) -> bool:
        _, source = self.read(loc)
        return source is not None
