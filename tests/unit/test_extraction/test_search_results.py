"""Unit tests for search result page parsing."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from websearch.browser_config import SearchConfig
from websearch.extraction.search_results import (
    RESULT_ENTRIES_JS,
    SearchResultExtractor,
    build_search_url,
    encode_query,
    filter_candidates,
    parse_entries,
)
from websearch.models import CandidateLink, SearchEntry


class TestSearchUrl:
    """Tests for search URL construction."""

    def test_encodes_spaces(self):
        """Test that the query is percent-encoded and num is appended."""
        url = build_search_url("https://www.google.com/search", "php hello world", 6)
        assert url == "https://www.google.com/search?q=php%20hello%20world&num=6"

    def test_encodes_reserved_characters(self):
        """Test that reserved characters are escaped like encodeURIComponent."""
        assert encode_query("c++ & rust?") == "c%2B%2B%20%26%20rust%3F"
        assert encode_query("it's (fine)!") == "it's%20(fine)!"

    def test_encodes_unicode(self):
        """Test that non-ASCII text is UTF-8 encoded."""
        assert encode_query("café") == "caf%C3%A9"


class TestFilterCandidates:
    """Tests for filter_candidates."""

    def test_drops_incomplete_entries(self):
        """Test that entries without a title or url are skipped."""
        entries = [
            SearchEntry(title="First", url="https://a.example"),
            SearchEntry(title=None, url="https://b.example"),
            SearchEntry(title="Third", url=None),
            SearchEntry(title="", url="https://d.example"),
            SearchEntry(title="Fifth", url="https://e.example"),
        ]

        links = filter_candidates(entries)

        assert links == [
            CandidateLink(title="First", url="https://a.example"),
            CandidateLink(title="Fifth", url="https://e.example"),
        ]

    def test_whitespace_only_counts_as_empty(self):
        """Test that whitespace-only fields are treated as missing."""
        entries = [SearchEntry(title="   ", url="https://a.example")]
        assert filter_candidates(entries) == []

    def test_trims_fields(self):
        """Test that surrounding whitespace is removed."""
        links = filter_candidates([SearchEntry(title="  Title \n", url=" https://a.example ")])
        assert links[0].title == "Title"
        assert links[0].url == "https://a.example"

    def test_preserves_document_order(self):
        """Test that order follows the result page."""
        entries = [SearchEntry(title=str(i), url=f"https://{i}.example") for i in range(5)]
        assert [link.title for link in filter_candidates(entries)] == ["0", "1", "2", "3", "4"]


class TestParseEntries:
    """Tests for parse_entries."""

    def test_parses_records(self):
        """Test conversion of script output."""
        raw = [{"title": "A", "url": "https://a.example"}, {"title": None, "url": None}]
        assert parse_entries(raw) == [
            SearchEntry(title="A", url="https://a.example"),
            SearchEntry(title=None, url=None),
        ]

    def test_ignores_unexpected_shapes(self):
        """Test that non-list output and non-dict items are ignored."""
        assert parse_entries(None) == []
        assert parse_entries(["not a record", {"title": "A"}]) == [SearchEntry(title="A", url=None)]


class TestSearchResultExtractor:
    """Tests for SearchResultExtractor."""

    @pytest.fixture
    def page(self):
        """Create a mock managed page."""
        page = MagicMock()
        page.navigate = AsyncMock()
        page.eval_on_selector_all = AsyncMock(return_value=[
            {"title": "Hello World in PHP", "url": "https://php.example/hello"},
            {"title": "People also ask", "url": None},
            {"title": "PHP Manual", "url": "https://www.php.net/manual"},
        ])
        return page

    @pytest.fixture
    def session(self, page):
        """Create a session whose pages are the mock page."""
        session = MagicMock()

        @asynccontextmanager
        async def open_page():
            yield page

        session.open_page = open_page
        return session

    @pytest.mark.asyncio
    async def test_extract(self, session, page):
        """Test a full result page read."""
        extractor = SearchResultExtractor(session, SearchConfig())

        links = await extractor.extract("php hello world", max_results=6)

        page.navigate.assert_awaited_once_with(
            "https://www.google.com/search?q=php%20hello%20world&num=6"
        )
        page.eval_on_selector_all.assert_awaited_once_with(
            ".g", RESULT_ENTRIES_JS, {"title": "h3", "link": "a"}
        )
        page.mark_extracted.assert_called_once()
        assert [link.url for link in links] == [
            "https://php.example/hello",
            "https://www.php.net/manual",
        ]

    @pytest.mark.asyncio
    async def test_custom_selectors(self, session, page):
        """Test that a different engine's selectors are used."""
        config = SearchConfig(
            search_url="https://search.example/",
            result_selector=".result",
            title_selector=".result__title",
            link_selector="a.result__url",
        )
        extractor = SearchResultExtractor(session, config)

        await extractor.extract("q", max_results=3)

        page.navigate.assert_awaited_once_with("https://search.example/?q=q&num=3")
        page.eval_on_selector_all.assert_awaited_once_with(
            ".result", RESULT_ENTRIES_JS, {"title": ".result__title", "link": "a.result__url"}
        )
