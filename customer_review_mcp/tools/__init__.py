"""
Tool layer.

The nine App Store Connect tools as static registry rows, the typed
argument records that validate their inputs, and the dispatcher that
turns a validated call into one authorized REST request.
"""

from customer_review_mcp.tools.base import ToolAdapter
from customer_review_mcp.tools.dispatcher import RequestDispatcher, render_result
from customer_review_mcp.tools.registry import TOOLS, ToolDefinition

__all__ = [
    "RequestDispatcher",
    "TOOLS",
    "ToolAdapter",
    "ToolDefinition",
    "render_result",
]
