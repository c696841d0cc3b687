"""Tests for the search_catalog tool."""

from library_circulation.tools.search import search_catalog, search_catalog_handler


class TestSearchCatalogTool:
    async def test_search_by_title(self, mcp_library):
        result = await search_catalog_handler({"query": "clean"})

        assert "isError" not in result
        assert result["data"]["total"] == 3
        assert [b["isbn"] for b in result["data"]["books"]] == ["isbn-001", "isbn-002", "isbn-003"]
        assert "Found 3 book(s)" in result["content"][0]["text"]

    async def test_search_by_author(self, mcp_library):
        result = await search_catalog_handler({"query": "Evans", "strategy": "author"})

        assert [b["isbn"] for b in result["data"]["books"]] == ["isbn-005"]

    async def test_available_only(self, mcp_library):
        mcp_library.lending.checkout("patron_general", "isbn-001")

        result = await search_catalog_handler({"query": "clean", "available_only": True})

        assert [b["isbn"] for b in result["data"]["books"]] == ["isbn-002", "isbn-003"]

    async def test_no_results(self, mcp_library):
        result = await search_catalog_handler({"query": "cobol"})

        assert result["data"]["total"] == 0
        assert "No books found" in result["content"][0]["text"]

    async def test_invalid_strategy(self, mcp_library):
        result = await search_catalog_handler({"query": "clean", "strategy": "genre"})

        assert result["isError"] is True
        assert "Invalid search parameters" in result["content"][0]["text"]

    async def test_blank_query(self, mcp_library):
        result = await search_catalog_handler({"query": "   "})
        assert result["isError"] is True

    def test_tool_metadata(self):
        assert search_catalog["name"] == "search_catalog"
        assert "query" in search_catalog["inputSchema"]["properties"]
