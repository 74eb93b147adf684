"""
Search result page parsing.

The result list is read with one in-browser ``querySelectorAll`` pass; the
filtering of incomplete entries happens in Python so it can be tested without
a browser.
"""

import logging
from typing import Any, Iterable, List, Optional
from urllib.parse import quote

from ..browser_config import SearchConfig
from ..infrastructure.session import BrowserSession
from ..models import CandidateLink, SearchEntry

logger = logging.getLogger(__name__)


# Runs once per matched result container list.
# Returns plain {title, url} records; missing parts come back as null.
RESULT_ENTRIES_JS = """
(elements, selectors) => elements.map((element) => {
    const titleEl = element.querySelector(selectors.title);
    const urlEl = element.querySelector(selectors.link);
    return {
        title: titleEl ? titleEl.textContent : null,
        url: urlEl ? urlEl.getAttribute('href') : null,
    };
})
"""


def encode_query(query: str) -> str:
    """Percent-encode a query the way encodeURIComponent does."""
    return quote(query, safe="!~*'()")


def build_search_url(search_url: str, query: str, max_results: int) -> str:
    """
    Build the search endpoint URL.

    Args:
        search_url: Endpoint base, e.g. https://www.google.com/search
        query: Quote-stripped query text
        max_results: Result-count hint passed as ``num``

    Returns:
        Full search URL
    """
    return f"{search_url}?q={encode_query(query)}&num={max_results}"


def _clean(value: Optional[str]) -> str:
    return value.strip() if isinstance(value, str) else ""


def filter_candidates(entries: Iterable[SearchEntry]) -> List[CandidateLink]:
    """
    Keep entries that have both a title and a url, in document order.

    Args:
        entries: Raw entries read from the result page

    Returns:
        Candidate links, never with an empty field
    """
    links = []
    for entry in entries:
        title = _clean(entry.title)
        url = _clean(entry.url)
        if not title or not url:
            continue
        links.append(CandidateLink(title=title, url=url))
    return links


def parse_entries(raw: Any) -> List[SearchEntry]:
    """Convert the script's return value into SearchEntry records."""
    if not isinstance(raw, list):
        return []
    entries = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        entries.append(SearchEntry(title=item.get("title"), url=item.get("url")))
    return entries


class SearchResultExtractor:
    """
    Runs a query against the search endpoint and returns candidate links.

    Usage:
        extractor = SearchResultExtractor(session, SearchConfig())
        links = await extractor.extract("python asyncio", max_results=10)
    """

    def __init__(self, session: BrowserSession, config: Optional[SearchConfig] = None):
        """
        Initialize extractor.

        Args:
            session: Running browser session
            config: Endpoint and selectors, defaults to Google
        """
        self._session = session
        self.config = config or SearchConfig()

    def search_url(self, query: str, max_results: int) -> str:
        return build_search_url(self.config.search_url, query, max_results)

    async def extract(self, query: str, max_results: int) -> List[CandidateLink]:
        """
        Load the result page for query and parse its result containers.

        Args:
            query: Quote-stripped query text
            max_results: Result-count hint for the search engine

        Returns:
            Candidate links in document order

        Raises:
            NavigationError: If the result page cannot be loaded or read
        """
        url = self.search_url(query, max_results)
        logger.info(f"Searching: {url}")

        async with self._session.open_page() as page:
            await page.navigate(url)
            raw = await page.eval_on_selector_all(
                self.config.result_selector,
                RESULT_ENTRIES_JS,
                {"title": self.config.title_selector, "link": self.config.link_selector},
            )
            page.mark_extracted()

        entries = parse_entries(raw)
        links = filter_candidates(entries)
        logger.info(
            f"Found {len(links)} candidate links for '{query}' "
            f"({len(entries) - len(links)} incomplete entries skipped)"
        )
        return links
