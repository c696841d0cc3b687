"""
MCP tools for the library circulation server.

Tools are the operations with side effects (checkout, return, renewal,
reservations) plus catalog search.
"""

from .circulation import circulation_tools
from .search import search_catalog

all_tools = [*circulation_tools, search_catalog]

__all__ = [
    "all_tools",
    "circulation_tools",
    "search_catalog",
]
