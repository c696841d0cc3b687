"""Recommendation resources for the library circulation MCP server.

Read-only endpoints over the recommendation engine:

- library://recommendations/{patron_id}: content-based (favourite authors)
- library://recommendations/{patron_id}/collaborative: similar patrons' books
- library://books/popular: most borrowed books overall

A patron with no history gets the popularity ranking from both personalised
resources. An unknown patron is reported as a ``ResourceError``.
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError
from pydantic import BaseModel, Field

from ..config import get_config
from ..library import get_library
from ..models import Book

logger = logging.getLogger(__name__)


class RecommendationEntry(BaseModel):
    """Single recommended book."""

    rank: int = Field(..., description="Recommendation rank (1 = best match)")
    isbn: str = Field(..., description="Book ISBN")
    title: str = Field(..., description="Book title")
    author: str = Field(..., description="Book author")
    available: bool = Field(..., description="Whether the book can be checked out now")


class RecommendationResponse(BaseModel):
    """Response schema for recommendation resources."""

    patron_id: str | None = Field(None, description="Patron the list was built for")
    strategy_used: str = Field(..., description="Ranking that produced the list")
    recommendations_count: int = Field(..., description="Number of books returned")
    recommendations: list[RecommendationEntry] = Field(..., description="Recommended books")


def _build_response(strategy: str, books: list[Book], patron_id: str | None = None) -> dict[str, Any]:
    entries = [
        RecommendationEntry(
            rank=rank,
            isbn=book.isbn,
            title=book.title,
            author=book.author,
            available=book.is_available,
        )
        for rank, book in enumerate(books, start=1)
    ]
    return RecommendationResponse(
        patron_id=patron_id,
        strategy_used=strategy,
        recommendations_count=len(entries),
        recommendations=entries,
    ).model_dump()


def _require_patron(patron_id: str) -> None:
    if get_library().patrons.find_patron(patron_id) is None:
        raise ResourceError(f"Patron not found: {patron_id}")


async def get_patron_recommendations_handler(patron_id: str) -> dict[str, Any]:
    """Books by the authors the patron borrows most."""
    try:
        _require_patron(patron_id)
        limit = get_config().default_recommendation_limit
        logger.debug("MCP Resource Request - recommendations/%s: limit=%d", patron_id, limit)
        books = get_library().recommendations.get_recommendations(patron_id, limit)
        return _build_response("author_based", books, patron_id)
    except ResourceError:
        raise
    except Exception as e:
        logger.exception("Error in recommendations resource")
        raise ResourceError(f"Failed to generate recommendations: {e!s}") from e


async def get_collaborative_recommendations_handler(patron_id: str) -> dict[str, Any]:
    """Books borrowed by patrons whose history overlaps this patron's."""
    try:
        _require_patron(patron_id)
        limit = get_config().default_recommendation_limit
        books = get_library().recommendations.get_collaborative_recommendations(patron_id, limit)
        return _build_response("collaborative", books, patron_id)
    except ResourceError:
        raise
    except Exception as e:
        logger.exception("Error in collaborative recommendations resource")
        raise ResourceError(f"Failed to generate recommendations: {e!s}") from e


async def get_popular_books_handler() -> dict[str, Any]:
    """Most borrowed books across every loan ever recorded."""
    try:
        limit = get_config().default_recommendation_limit
        books = get_library().recommendations.get_popular_books(limit)
        return _build_response("popular", books)
    except Exception as e:
        logger.exception("Error in popular books resource")
        raise ResourceError(f"Failed to rank popular books: {e!s}") from e


# Define recommendation resources for FastMCP registration
recommendation_resources: list[dict[str, Any]] = [
    {
        "uri_template": "library://recommendations/{patron_id}",
        "name": "Personalized Book Recommendations",
        "description": (
            "Unread books by the authors a patron borrows most. Patrons without "
            "history get the most popular books."
        ),
        "mime_type": "application/json",
        "handler": get_patron_recommendations_handler,
    },
    {
        "uri_template": "library://recommendations/{patron_id}/collaborative",
        "name": "Collaborative Book Recommendations",
        "description": (
            "Books borrowed by patrons who share reading history with this patron, "
            "ranked by how much they overlap."
        ),
        "mime_type": "application/json",
        "handler": get_collaborative_recommendations_handler,
    },
    {
        "uri": "library://books/popular",
        "name": "Popular Books",
        "description": "The most frequently borrowed books in the catalog.",
        "mime_type": "application/json",
        "handler": get_popular_books_handler,
    },
]
