"""Verification phases and impact query over a loaded flowgraph document."""

from flowgraph.analysis.engine import verify_document
from flowgraph.analysis.impact import ImpactReport, NodeNotFound, analyze_impact
from flowgraph.analysis.results import (
    Category,
    CheckResult,
    ResultLog,
    Status,
    Summary,
    VerificationReport,
)

__all__ = [
    "Category",
    "CheckResult",
    "ImpactReport",
    "NodeNotFound",
    "ResultLog",
    "Status",
    "Summary",
    "VerificationReport",
    "analyze_impact",
    "verify_document",
]
