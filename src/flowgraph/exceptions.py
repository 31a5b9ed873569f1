"""Invocation-level errors for flowgraph.

Content problems found while verifying are never raised; they become
result records. These exceptions cover the conditions that stop a run
before any record is produced.
"""

from __future__ import annotations

from pathlib import Path


class FlowgraphError(RuntimeError):
    """Base class for errors that terminate a command."""


class DocumentNotFoundError(FlowgraphError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class DocumentParseError(FlowgraphError):
    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"Cannot parse flowgraph document {path}: {reason}")
        self.path = path
        self.reason = reason


class DocumentDiscoveryError(FlowgraphError):
    """No single flowgraph document could be picked from a directory.

    An empty ``candidates`` tuple means nothing matched; more than one means
    the choice is ambiguous and the caller has to name a file.
    """

    def __init__(self, directory: Path, candidates: tuple[str, ...] = ()) -> None:
        if candidates:
            message = "Multiple flowgraph files found. Specify one:"
        else:
            message = (
                "No flowgraph file found. Pass a path or run `flowgraph init` "
                "to create one."
            )
        super().__init__(message)
        self.directory = directory
        self.candidates = candidates
