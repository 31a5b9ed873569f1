"""Mermaid markdown rendering of a flowgraph document."""

from __future__ import annotations

import re
from pathlib import Path

from flowgraph.model import DONE, FAIL, NEXT, Flow, FlowgraphDocument

_MERMAID_ID_RE = re.compile(r"[:./ \-]")
_KIND_PREFIX_RE = re.compile(r"^[^:]+:")

KIND_LABELS = {
    "type": "Types",
    "table": "Tables",
    "method": "Methods",
    "endpoint": "Endpoints",
    "event": "Events",
}
KIND_STYLES = {
    "type": "fill:#dae8fc,stroke:#6c8ebf,color:#333",
    "table": "fill:#d5e8d4,stroke:#82b366,color:#333",
    "method": "fill:#ffe6cc,stroke:#d6b656,color:#333",
    "endpoint": "fill:#e1d5e7,stroke:#9673a6,color:#333",
    "event": "fill:#fff2cc,stroke:#d6b656,color:#333",
}


def mermaid_id(node_id: str) -> str:
    return _MERMAID_ID_RE.sub("_", node_id)


def short_label(node_id: str) -> str:
    return _KIND_PREFIX_RE.sub("", node_id, count=1)


def render_dependency_graph(document: FlowgraphDocument) -> str:
    lines = ["graph LR"]
    groups: dict[str, list[str]] = {}
    for node_id, node in document.nodes.items():
        groups.setdefault(node.kind, []).append(node_id)

    for kind, ids in groups.items():
        lines.append(f"  subgraph {KIND_LABELS.get(kind, kind)}")
        for node_id in ids:
            lines.append(f'    {mermaid_id(node_id)}["{short_label(node_id)}"]')
        lines.append("  end")

    lines.append("")
    for kind, style in KIND_STYLES.items():
        lines.append(f"  classDef {kind} {style}")
    for kind, ids in groups.items():
        if kind not in KIND_STYLES:
            continue
        for node_id in ids:
            lines.append(f"  class {mermaid_id(node_id)} {kind}")

    lines.append("")
    for edge in document.edges:
        source = mermaid_id(edge.source)
        target = mermaid_id(edge.target)
        if edge.is_co_change:
            lines.append(f"  {source} -.->|co_change| {target}")
        else:
            lines.append(f"  {source} -->|{edge.rel}| {target}")
    return "\n".join(lines)


def render_flow(flow: Flow) -> str:
    lines = [
        "flowchart TD",
        "  classDef decision fill:#fff2cc,stroke:#d6b656,color:#333",
        "  classDef terminal fill:#f8cecc,stroke:#b85450,color:#333",
        "  classDef success fill:#d5e8d4,stroke:#82b366,color:#333",
        "",
    ]
    steps = flow.steps
    step_index: dict[str, int] = {}
    for index, step in enumerate(steps):
        step_index.setdefault(step.node, index)
    external: dict[str, None] = {}
    for step in steps:
        for _label, target in step.targets():
            if target not in step_index:
                external.setdefault(target)

    lines.append(f'  trigger(["{flow.trigger}"])')
    for index, step in enumerate(steps):
        label = short_label(step.node)
        if step.is_branch:
            lines.append(f'  s{index}{{"{label}"}}')
            lines.append(f"  class s{index} decision")
        else:
            lines.append(f'  s{index}["{label}"]')

    for ref in external:
        lines.append(f'  {mermaid_id(ref)}["{short_label(ref)}"]:::external')
    if external:
        lines.append(
            "  classDef external fill:#f5f5f5,stroke:#999,stroke-dasharray:5 5,color:#666"
        )

    lines.extend(
        [
            "  done([DONE])",
            "  class done success",
            "  fail([FAIL])",
            "  class fail terminal",
            "",
        ]
    )
    if steps:
        lines.append("  trigger --> s0")

    def resolve(index: int, target: str) -> str:
        if target == DONE:
            return "done"
        if target == FAIL:
            return "fail"
        if target == NEXT:
            return f"s{index + 1}" if index + 1 < len(steps) else "done"
        if target in step_index:
            return f"s{step_index[target]}"
        return mermaid_id(target)

    for index, step in enumerate(steps):
        if isinstance(step.then, str):
            lines.append(f"  s{index} --> {resolve(index, step.then)}")
            continue
        for label, target in step.then.items():
            lines.append(f"  s{index} -->|{label}| {resolve(index, target)}")
    return "\n".join(lines)


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_markdown(document: FlowgraphDocument) -> str:
    out = [f"# {document.display_name} FlowGraph", ""]
    if document.meta.description:
        out.extend([f"> {document.meta.description}", ""])

    out.extend(["## Dependency Graph", "", "```mermaid"])
    out.append(render_dependency_graph(document))
    out.extend(["```", ""])

    for name, flow in document.flows.items():
        out.extend([f"## Flow: {name}", "", f"> {flow.trigger}", "", "```mermaid"])
        out.append(render_flow(flow))
        out.extend(["```", ""])

    if document.invariants:
        out.extend(["## Invariants", "", "| ID | Rule | Enforcement |", "|---|---|---|"])
        for invariant in document.invariants:
            rule = _escape_cell(invariant.rule)
            enforce = _escape_cell(invariant.enforce or "")
            out.append(f"| {invariant.id} | {rule} | {enforce} |")
        out.append("")
    return "\n".join(out)


def default_output_path(document_path: Path) -> Path:
    if document_path.suffix == ".json":
        return document_path.with_suffix(".md")
    return document_path.with_name(document_path.name + ".md")


def write_markdown(document: FlowgraphDocument, output: Path) -> Path:
    output.write_text(render_markdown(document), encoding="utf-8")
    return output
