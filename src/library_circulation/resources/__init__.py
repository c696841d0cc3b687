"""Library circulation MCP resources.

Resources are the read-only endpoints of the server; every state change
goes through a tool instead.
"""

from .recommendations import recommendation_resources

all_resources = recommendation_resources

__all__ = [
    "all_resources",
    "recommendation_resources",
]
