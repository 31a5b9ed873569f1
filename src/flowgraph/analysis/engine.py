from __future__ import annotations

import logging

from flowgraph.analysis.edges import verify_edges
from flowgraph.analysis.flows import verify_flows
from flowgraph.analysis.invariants import verify_invariants
from flowgraph.analysis.location import SourceTree
from flowgraph.analysis.nodes import verify_nodes
from flowgraph.analysis.results import ResultLog, VerificationReport
from flowgraph.model import FlowgraphDocument

_LOGGER = logging.getLogger(__name__)


def verify_document(
    document: FlowgraphDocument, *, tree: SourceTree | None = None
) -> VerificationReport:
    """Run the structural, relational, flow and invariant phases in order.

    No phase stops the run; every problem becomes a record in the report.
    """
    tree = tree if tree is not None else SourceTree.for_document(document)
    log = ResultLog()
    _LOGGER.debug("verifying %s under %s", document.display_name, tree.project_root)
    verify_nodes(document, tree, log)
    verify_edges(document, tree, log)
    verify_flows(document, log)
    verify_invariants(document, tree, log)
    return VerificationReport(
        name=document.display_name,
        results=log.results,
        version=document.version,
    )
