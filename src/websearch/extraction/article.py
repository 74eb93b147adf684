"""
Main-content extraction for article pages.

Noise is stripped twice: in the live page before its HTML is serialized, and
again on the parsed tree so ``extract_article`` gives the same answer when
fed saved HTML.
"""

import asyncio
import logging
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup
from readability import Document

from ..browser_config import SearchConfig
from ..exceptions import ExtractionError
from ..infrastructure.session import BrowserSession
from ..models import Article, VisitResult
from .markdown import to_markdown

logger = logging.getLogger(__name__)


REMOVE_NOISE_JS = """
(selectors) => {
    document.querySelectorAll(selectors.join(',')).forEach((el) => el.remove());
}
"""

# readability-lxml's placeholder when a document has no <title>
_NO_TITLE = "[no-title]"


def remove_noise(soup: BeautifulSoup, selectors: Iterable[str]) -> int:
    """
    Remove every element matching one of selectors.

    Returns:
        Number of removed elements
    """
    selector = ",".join(selectors)
    if not selector:
        return 0
    removed = 0
    for element in soup.select(selector):
        # A parent may already have taken this element with it
        if element.decomposed:
            continue
        element.decompose()
        removed += 1
    return removed


def document_title(soup: BeautifulSoup) -> str:
    """Text of the document's own <title> element."""
    if soup.title is None:
        return ""
    return soup.title.get_text(strip=True)


def run_readability(html: str) -> Article:
    """
    Score the document and return its best content fragment.

    Args:
        html: Full document HTML

    Returns:
        Article with the readability title and HTML fragment

    Raises:
        ExtractionError: If the document cannot be parsed or scored
    """
    try:
        doc = Document(html)
        content = doc.summary(html_partial=True)
        title = doc.short_title()
    except Exception as e:
        raise ExtractionError(f"Readability extraction failed: {e}") from e

    if title == _NO_TITLE:
        title = ""
    return Article(title=title or "", content=content or "")


def extract_article(html: str, noise_selectors: Optional[List[str]] = None) -> Article:
    """
    Extract the primary readable content of a document.

    An empty result is not an error: the content is "" and the title falls
    back to the document's <title>.

    Args:
        html: Full document HTML
        noise_selectors: Elements to drop before scoring, defaults to
            SearchConfig's noise selectors

    Returns:
        Article with title and HTML content fragment
    """
    if noise_selectors is None:
        noise_selectors = SearchConfig().noise_selectors

    if not html or not html.strip():
        return Article()

    soup = BeautifulSoup(html, "lxml")
    remove_noise(soup, noise_selectors)
    fallback_title = document_title(soup)

    try:
        article = run_readability(str(soup))
    except ExtractionError as e:
        logger.debug(str(e))
        return Article(title=fallback_title, content="")

    text = BeautifulSoup(article.content, "lxml").get_text(strip=True) if article.content else ""
    if not text:
        return Article(title=fallback_title, content="")

    return Article(title=article.title or fallback_title, content=article.content)


class ArticleExtractor:
    """
    Visits a candidate link and returns its content as Markdown.

    Usage:
        extractor = ArticleExtractor(session)
        result = await extractor.visit("https://example.com/post")
    """

    def __init__(self, session: BrowserSession, config: Optional[SearchConfig] = None):
        """
        Initialize extractor.

        Args:
            session: Running browser session
            config: Supplies the noise selectors
        """
        self._session = session
        self.config = config or SearchConfig()

    async def fetch_html(self, url: str) -> str:
        """
        Load url, strip noise in the page and return the serialized document.

        The page is closed before this returns or raises.

        Raises:
            NavigationError: If the page cannot be loaded or read
        """
        async with self._session.open_page() as page:
            await page.navigate(url)
            await page.evaluate(REMOVE_NOISE_JS, self.config.noise_selectors)
            html = await page.content()
            page.mark_extracted()
        return html

    def extract(self, html: str) -> Tuple[Article, str]:
        """Extract the article of a serialized page and convert it to Markdown."""
        article = extract_article(html, self.config.noise_selectors)
        return article, to_markdown(article.content)

    async def visit(self, url: str) -> VisitResult:
        """
        Fetch, extract and convert one page.

        Args:
            url: Candidate link url

        Returns:
            VisitResult, with empty content when nothing readable was found

        Raises:
            NavigationError: If the page cannot be loaded or read
        """
        html = await self.fetch_html(url)

        # Parsing and scoring are CPU-bound, keep them off the event loop
        loop = asyncio.get_running_loop()
        article, content = await loop.run_in_executor(None, self.extract, html)

        if content:
            logger.info(f"Extracted {len(content)} chars from {url}")
            logger.debug(content)
        else:
            logger.info(f"No readable content at {url}")

        return VisitResult(url=url, title=article.title, content=content)
