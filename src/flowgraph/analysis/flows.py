from __future__ import annotations

from typing import Mapping

from flowgraph.analysis.results import Category, ResultLog
from flowgraph.model import Flow, FlowgraphDocument, Node


def missing_flow_nodes(flow: Flow, nodes: Mapping[str, Node]) -> list[str]:
    """Step nodes and jump targets absent from the global node table.

    Ids are reported once each, in the order they are first referenced.
    """
    missing: dict[str, None] = {}
    for step in flow.steps:
        if step.node not in nodes:
            missing.setdefault(step.node)
        for _label, target in step.targets():
            if target not in nodes:
                missing.setdefault(target)
    return list(missing)


def unreachable_targets(flow: Flow) -> list[tuple[str, str]]:
    step_nodes = flow.step_nodes
    return [
        (label, target)
        for step in flow.steps
        for label, target in step.targets()
        if target not in step_nodes
    ]


def verify_flow(flow: Flow, nodes: Mapping[str, Node], log: ResultLog) -> None:
    missing = missing_flow_nodes(flow, nodes)
    if missing:
        log.failed(Category.FLOW, flow.name, f"Missing nodes: {', '.join(missing)}")
    else:
        log.passed(
            Category.FLOW, flow.name, f"All {len(flow.steps)} step nodes exist"
        )

    unreachable = unreachable_targets(flow)
    for label, target in unreachable:
        log.warned(Category.FLOW, flow.name, f"'{label}' -> '{target}' not in step list")
    if not unreachable:
        log.passed(Category.FLOW, flow.name, "All branch targets reachable")


def verify_flows(document: FlowgraphDocument, log: ResultLog) -> None:
    for flow in document.flows.values():
        verify_flow(flow, document.nodes, log)
