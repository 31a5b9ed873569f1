from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import typer

from flowgraph.analysis import analyze_impact, verify_document
from flowgraph.config import (
    OUTPUT_FORMATS,
    TomlTable,
    init_defaults,
    merge_payload,
    render_defaults,
    section_path,
    section_str,
    verify_defaults,
)
from flowgraph.console import emit_lines, impact_lines, verification_lines
from flowgraph.document import load_document, resolve_document_path
from flowgraph.exceptions import DocumentDiscoveryError, FlowgraphError
from flowgraph.json_types import JSONObject
from flowgraph.mermaid import default_output_path, write_markdown
from flowgraph.model import FlowgraphDocument
from flowgraph.scaffold import DEFAULT_SOURCE_ROOT, write_starter_document

app = typer.Typer(
    add_completion=False,
    help="FlowGraph: machine-verifiable maintenance contracts.",
)

_USAGE_ERROR_CODE = 2
_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

_LOGGER = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        stream=sys.stderr,
    )


def _exit_with_error(exc: FlowgraphError) -> typer.Exit:
    typer.echo(str(exc), err=True)
    if isinstance(exc, DocumentDiscoveryError):
        for candidate in exc.candidates:
            typer.echo(f"  {candidate}", err=True)
    return typer.Exit(code=1)


def _load(document: Optional[Path], section: TomlTable) -> FlowgraphDocument:
    cwd = Path.cwd()
    try:
        path = resolve_document_path(
            document, cwd=cwd, configured=section_path(section, "document")
        )
        return load_document(path)
    except FlowgraphError as exc:
        raise _exit_with_error(exc) from exc


def _resolve_format(json_output: bool, section: TomlTable) -> str:
    if json_output:
        return "json"
    output_format = section_str(section, "format", "text")
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            f"Unknown output format {output_format!r} in the verify config; "
            f"expected one of {', '.join(OUTPUT_FORMATS)}."
        )
    return output_format


def _echo_json(payload: JSONObject) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


@app.callback()
def _main_callback(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log matching decisions to stderr."
    ),
) -> None:
    _configure_logging(verbose)


@app.command()
def verify(
    document: Optional[Path] = typer.Argument(
        None,
        metavar="[FILE]",
        help="Flowgraph document (default: the single *.flowgraph.json here).",
    ),
    impact: Optional[str] = typer.Option(
        None, "--impact", metavar="NODE_ID", help="Show what a change to NODE_ID affects."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="Emit the structured result as JSON."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Verify contracts against source, or run an impact query."""
    section = verify_defaults(config_path=config)
    output_format = _resolve_format(json_output, section)
    loaded = _load(document, section)

    if impact is not None:
        result = analyze_impact(loaded, impact)
        if output_format == "json":
            _echo_json(result.as_dto().model_dump())
        else:
            emit_lines(impact_lines(result))
        raise typer.Exit(code=result.exit_code)

    report = verify_document(loaded)
    _LOGGER.debug("verification produced %d records", len(report.results))
    if output_format == "json":
        _echo_json(report.as_dto().model_dump())
    else:
        emit_lines(verification_lines(report))
    raise typer.Exit(code=report.exit_code)


@app.command()
def render(
    document: Optional[Path] = typer.Argument(None, metavar="[FILE]"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Markdown output path (default: FILE with .md)."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Render the document as Mermaid diagrams in markdown."""
    section = merge_payload(
        {"output": str(output) if output is not None else None},
        render_defaults(config_path=config),
    )
    loaded = _load(document, verify_defaults(config_path=config))
    target = section_path(section, "output")
    if target is None:
        source_path = loaded.source_path or Path.cwd() / "flowgraph.json"
        target = default_output_path(source_path)
    written = write_markdown(loaded, target)
    typer.echo(f"Rendered: {written}")


@app.command()
def init(
    root: Optional[str] = typer.Option(
        None, "--root", help=f"Source root recorded in meta.root (default: {DEFAULT_SOURCE_ROOT})."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
) -> None:
    """Create a starter flowgraph document in the current directory."""
    section = merge_payload({"root": root}, init_defaults(config_path=config))
    try:
        path = write_starter_document(
            Path.cwd(), root=section_str(section, "root", DEFAULT_SOURCE_ROOT)
        )
    except FlowgraphError as exc:
        raise _exit_with_error(exc) from exc
    typer.echo(f"Created {path.name}; edit it to match your project.")


def main(argv: Sequence[str] | None = None) -> int:
    """Console entry point.

    Usage errors exit with 1 rather than the usual 2, and a bare invocation
    prints help.
    """
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        args = ["--help"]
    try:
        app(args=args, prog_name="flowgraph")
    except SystemExit as exc:
        return _exit_status(exc.code)
    return 0


def _exit_status(code: object) -> int:
    if code is None:
        return 0
    if not isinstance(code, int):
        typer.echo(str(code), err=True)
        return 1
    return 1 if code == _USAGE_ERROR_CODE else code
