"""Colored console rendering of verification and impact reports.

Styling goes through ``typer.style``; ``typer.echo`` drops the escape codes
when the output is not a terminal.
"""

from __future__ import annotations

from typing import Callable

import typer

from flowgraph.analysis.impact import ImpactReport, NodeNotFound
from flowgraph.analysis.results import Status, Summary, VerificationReport
from flowgraph.model import Edge

Echo = Callable[[str], None]

_RULE = "=" * 64
_STATUS_COLORS = {
    Status.PASS: typer.colors.GREEN,
    Status.FAIL: typer.colors.RED,
    Status.WARN: typer.colors.YELLOW,
}
_STATUS_ICONS = {Status.PASS: "+", Status.FAIL: "x", Status.WARN: "?"}
_CO_CHANGE_MARKER = typer.style("! MUST CO-CHANGE", fg=typer.colors.RED)


def _counts(summary: Summary) -> str:
    return f"{summary.passed} pass, {summary.failed} fail, {summary.warned} warn"


def verification_lines(report: VerificationReport) -> list[str]:
    lines = [
        "",
        _RULE,
        f"  FlowGraph Verification: {report.name}",
        f"  Spec version: {report.version or 'unknown'}",
        _RULE,
        "",
    ]
    for category, members in report.grouped():
        title = category.value.capitalize()
        lines.append("")
        lines.append(f"## {title} ({_counts(Summary.of(members))})")
        lines.append("")
        for result in members:
            tag = typer.style(f"[{result.status.value}]", fg=_STATUS_COLORS[result.status])
            lines.append(f"  {tag} {_STATUS_ICONS[result.status]} {result.id}")
            if result.message:
                lines.append(f"         {result.message}")

    summary = report.summary
    lines.append("")
    lines.append(_RULE)
    lines.append(
        "  Summary: "
        + typer.style(f"{summary.passed} PASS", fg=typer.colors.GREEN)
        + "  "
        + typer.style(f"{summary.failed} FAIL", fg=typer.colors.RED)
        + "  "
        + typer.style(f"{summary.warned} WARN", fg=typer.colors.YELLOW)
        + f"  ({summary.total} total)"
    )
    lines.append(_RULE)
    lines.append("")
    return lines


def _edge_lines(edges: tuple[Edge, ...], *, outgoing: bool) -> list[str]:
    if not edges:
        return ["  (none)"]
    lines = []
    for edge in edges:
        marker = f"{_CO_CHANGE_MARKER} " if edge.is_co_change else ""
        arrow = typer.style(f"-[{edge.rel}]->", fg=typer.colors.YELLOW)
        if outgoing:
            lines.append(f"  {marker}{arrow} {edge.target}")
        else:
            lines.append(f"  {marker}{edge.source} {arrow}")
        if edge.note:
            lines.append(f"           {edge.note}")
    return lines


def impact_lines(report: ImpactReport | NodeNotFound) -> list[str]:
    header = typer.style(_RULE, fg=typer.colors.CYAN)
    lines = [
        "",
        header,
        typer.style("  Impact Analysis: ", fg=typer.colors.CYAN)
        + typer.style(report.node_id, bold=True),
    ]
    if isinstance(report, NodeNotFound):
        lines.append(typer.style("  Node not found in flowgraph!", fg=typer.colors.RED))
        lines.append(header)
        lines.append("")
        lines.append("Available nodes:")
        lines.extend(f"  {node_id}" for node_id in report.known_ids)
        return lines

    node = report.node
    lines.append(typer.style(f"  Kind: {node.kind}  Loc: {node.loc}", fg=typer.colors.CYAN))
    lines.append(header)

    lines.append("")
    lines.append(
        typer.style("-> Outgoing edges", bold=True)
        + f" ({len(report.outgoing)}, things this node affects):"
    )
    lines.append("")
    lines.extend(_edge_lines(report.outgoing, outgoing=True))

    lines.append("")
    lines.append(
        typer.style("<- Incoming edges", bold=True)
        + f" ({len(report.incoming)}, things that depend on this node):"
    )
    lines.append("")
    lines.extend(_edge_lines(report.incoming, outgoing=False))

    if report.co_change_outgoing or report.co_change_incoming:
        lines.append("")
        lines.append(typer.style("! Required co-changes:", fg=typer.colors.RED, bold=True))
        lines.append("")
        bold_id = typer.style(node.id, bold=True)
        for edge in report.co_change_outgoing:
            target = typer.style(edge.target, bold=True)
            lines.append(f"  -> You change {bold_id}, you MUST also update {target}")
            if edge.note:
                lines.append(f"     Reason: {edge.note}")
        for edge in report.co_change_incoming:
            source = typer.style(edge.source, bold=True)
            lines.append(
                f"  <- If {source} changes, this node ({bold_id}) must also be updated"
            )
            if edge.note:
                lines.append(f"     Reason: {edge.note}")

    lines.append("")
    lines.append(typer.style("Flows", bold=True) + f" ({len(report.flows)}):")
    lines.append("")
    if not report.flows:
        lines.append("  (none)")
    for member in report.flows:
        name = typer.style(member.flow.name, fg=typer.colors.CYAN)
        lines.append(
            f"  {name} ({', '.join(member.roles)}), trigger: {member.flow.trigger}"
        )

    lines.append("")
    lines.append(typer.style("Invariants", bold=True) + f" ({len(report.invariants)}):")
    lines.append("")
    if not report.invariants:
        lines.append("  (none)")
    for invariant in report.invariants:
        lines.append(
            f"  {typer.style(invariant.id, fg=typer.colors.YELLOW)}: {invariant.rule}"
        )
        if invariant.enforce:
            lines.append(f"         Enforce: {invariant.enforce}")
    lines.append("")
    return lines


def emit_lines(lines: list[str], echo: Echo = typer.echo) -> None:
    for line in lines:
        echo(line)
