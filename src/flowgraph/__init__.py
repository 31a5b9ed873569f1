"""flowgraph package root."""

from flowgraph.analysis import analyze_impact, verify_document
from flowgraph.document import load_document
from flowgraph.exceptions import FlowgraphError

__all__ = ["__version__", "FlowgraphError", "analyze_impact", "load_document", "verify_document"]

__version__ = "0.1.0"
