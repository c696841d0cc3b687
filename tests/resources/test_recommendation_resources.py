"""Tests for recommendation resources."""

import pytest
from fastmcp.exceptions import ResourceError

from library_circulation.resources.recommendations import (
    get_collaborative_recommendations_handler,
    get_patron_recommendations_handler,
    get_popular_books_handler,
    recommendation_resources,
)


def borrow_and_return(library, patron_id: str, *isbns: str) -> None:
    for isbn in isbns:
        library.lending.checkout(patron_id, isbn)
        library.lending.return_book(isbn, patron_id)


class TestRecommendationResources:
    async def test_author_based(self, mcp_library):
        borrow_and_return(mcp_library, "patron_general", "isbn-001")

        result = await get_patron_recommendations_handler("patron_general")

        assert result["patron_id"] == "patron_general"
        assert result["strategy_used"] == "author_based"
        assert [r["isbn"] for r in result["recommendations"]] == ["isbn-002", "isbn-003"]
        assert [r["rank"] for r in result["recommendations"]] == [1, 2]
        assert result["recommendations_count"] == 2

    async def test_collaborative(self, mcp_library):
        borrow_and_return(mcp_library, "patron_general", "isbn-001")
        borrow_and_return(mcp_library, "patron_student", "isbn-001", "isbn-005")

        result = await get_collaborative_recommendations_handler("patron_general")

        assert result["strategy_used"] == "collaborative"
        assert [r["isbn"] for r in result["recommendations"]] == ["isbn-005"]

    async def test_popular(self, mcp_library):
        borrow_and_return(mcp_library, "patron_general", "isbn-004", "isbn-004")
        mcp_library.lending.checkout("patron_student", "isbn-001")

        result = await get_popular_books_handler()

        assert result["patron_id"] is None
        assert [r["isbn"] for r in result["recommendations"]] == ["isbn-004", "isbn-001"]
        assert [r["available"] for r in result["recommendations"]] == [True, False]

    async def test_unknown_patron(self, mcp_library):
        with pytest.raises(ResourceError, match="Patron not found"):
            await get_patron_recommendations_handler("patron_missing")
        with pytest.raises(ResourceError, match="Patron not found"):
            await get_collaborative_recommendations_handler("patron_missing")

    def test_resource_definitions(self):
        uris = [r.get("uri_template", r.get("uri")) for r in recommendation_resources]

        assert uris == [
            "library://recommendations/{patron_id}",
            "library://recommendations/{patron_id}/collaborative",
            "library://books/popular",
        ]
        for resource in recommendation_resources:
            assert resource["mime_type"] == "application/json"
