"""Helpers shaping MCP tool results."""

from typing import Any


def success_response(text: str, data: dict[str, Any]) -> dict[str, Any]:
    """Human-readable text for the model plus structured data for the client."""
    return {
        "content": [{"type": "text", "text": text}],
        "data": data,
    }


def error_response(text: str) -> dict[str, Any]:
    return {
        "isError": True,
        "content": [{"type": "text", "text": text}],
    }
