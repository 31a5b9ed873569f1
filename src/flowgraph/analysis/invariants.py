from __future__ import annotations

from typing import Mapping

from flowgraph.analysis.location import SourceTree
from flowgraph.analysis.results import Category, ResultLog
from flowgraph.model import FlowgraphDocument, Invariant, Node


def verify_invariant(
    invariant: Invariant,
    nodes: Mapping[str, Node],
    tree: SourceTree,
    log: ResultLog,
) -> None:
    """Check an invariant's scope; the rule itself is left to a human.

    A structurally sound invariant always yields WARN, never PASS.
    """
    if not invariant.scope:
        log.failed(Category.INVARIANT, invariant.id, "Invariant has an empty scope")
        return
    missing = [node_id for node_id in invariant.scope if node_id not in nodes]
    if missing:
        log.failed(
            Category.INVARIANT,
            invariant.id,
            f"Scoped nodes missing: {', '.join(missing)}",
        )
        return
    if not all(tree.is_readable(nodes[node_id].loc) for node_id in invariant.scope):
        log.failed(Category.INVARIANT, invariant.id, "Some scoped files not found")
        return
    message = f"{invariant.rule} (requires manual/custom verification)"
    if invariant.enforce:
        message = f"{message} [enforce: {invariant.enforce}]"
    log.warned(Category.INVARIANT, invariant.id, message)


def verify_invariants(
    document: FlowgraphDocument, tree: SourceTree, log: ResultLog
) -> None:
    for invariant in document.invariants:
        verify_invariant(invariant, document.nodes, tree, log)
