"""
Catalog search tool for the library circulation MCP server.

Runs one of the named search strategies (title, author or ISBN substring,
case-insensitive) over the whole catalog and returns matches in catalog
order, optionally limited to books that can be checked out right now.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..library import get_library
from ..models.book import BookStatus
from ..search import STRATEGIES
from .responses import error_response, success_response

logger = logging.getLogger(__name__)


class SearchCatalogInput(BaseModel):
    """Input schema for the search_catalog tool."""

    query: str = Field(
        ...,
        description="Text to look for (case-insensitive substring match)",
        min_length=1,
        max_length=200,
        examples=["clean code", "Martin", "978-0"],
    )

    strategy: str = Field(
        default="title",
        description="Which field to match: title, author or isbn",
        pattern="^(title|author|isbn)$",
    )

    available_only: bool = Field(
        default=False,
        description="Only return books that are AVAILABLE",
    )

    @field_validator("query")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Query cannot be blank")
        return v


async def search_catalog_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Handler for the search_catalog tool."""
    try:
        params = SearchCatalogInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid search parameters: %s", e)
        return error_response(f"Invalid search parameters: {e}")

    try:
        books = get_library().catalog.search_books(params.query, STRATEGIES[params.strategy])
    except Exception as e:
        logger.exception("Unexpected error in search_catalog tool")
        return error_response(f"An unexpected error occurred: {e!s}")

    if params.available_only:
        books = [book for book in books if book.status == BookStatus.AVAILABLE]

    if books:
        lines = [f"Found {len(books)} book(s) matching '{params.query}' by {params.strategy}:"]
        lines.extend(
            f"- {book.title} by {book.author} ({book.isbn}) [{book.status.value}]"
            for book in books
        )
        text = "\n".join(lines)
    else:
        text = f"No books found matching '{params.query}' by {params.strategy}."

    return success_response(
        text,
        {
            "books": [book.model_dump(mode="json") for book in books],
            "total": len(books),
        },
    )


# Tool metadata for MCP server registration
search_catalog = {
    "name": "search_catalog",
    "description": (
        "Search the library catalog by title, author or ISBN. Matching is a "
        "case-insensitive substring match on the chosen field."
    ),
    "inputSchema": SearchCatalogInput.model_json_schema(),
    "handler": search_catalog_handler,
}
