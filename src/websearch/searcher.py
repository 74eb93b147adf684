"""
Query dispatch and result aggregation.

Each query runs as its own pipeline: search page, candidate links, one queued
visit per link, aggregation. All pipelines share one browser session and one
work queue, so the concurrency ceiling is global rather than per query.
"""

import asyncio
import dataclasses
import logging
import re
from typing import Iterable, List, Optional, Sequence

from .browser_config import BrowserConfig, SearchConfig
from .config import SearchOptions
from .exceptions import NavigationError, UserInputError
from .extraction.article import ArticleExtractor
from .extraction.search_results import SearchResultExtractor
from .infrastructure.browser_finder import find_browser
from .infrastructure.session import BrowserSession, launch_session
from .infrastructure.work_queue import Outcome, WorkQueue
from .models import CandidateLink, FailureReason, QueryResult, VisitFailure, VisitResult
from .reporting import ResultReporter

logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10
MIN_RESULTS_PER_QUERY = 3

# A run of double quotes touching the start or end of a term
_BOUNDARY_QUOTES_RE = re.compile(r'(?<!\S)"+|"+(?!\S)')


def strip_quotes(text: str) -> str:
    """
    Remove double quotes wrapping the query or any of its terms.

    ``php "hello world"`` becomes ``php hello world``. Quotes inside a term
    are kept. Applying it twice changes nothing.
    """
    return _BOUNDARY_QUOTES_RE.sub("", text)


def effective_max_results(
    total: Optional[int],
    num_queries: int,
    default: int = DEFAULT_MAX_RESULTS,
    minimum: int = MIN_RESULTS_PER_QUERY,
) -> int:
    """
    Per-query result cap.

    Args:
        total: Requested total across all queries, None or 0 for no total
        num_queries: Number of queries sharing the total
        default: Cap used without a total
        minimum: Floor so every query still gets a few results

    Returns:
        ``max(minimum, total // num_queries)`` or ``default``
    """
    if num_queries < 1:
        raise ValueError("num_queries must be at least 1")
    if not total:
        return default
    return max(minimum, total // num_queries)


def validate_queries(queries: Optional[Iterable[str]]) -> List[str]:
    """
    Check run input before any browser work.

    Raises:
        UserInputError: If no query is given or a query is blank
    """
    if queries is None:
        raise UserInputError("missing query")
    if isinstance(queries, str):
        queries = [queries]

    queries = list(queries)
    if not queries:
        raise UserInputError("missing query")

    for query in queries:
        if not isinstance(query, str) or not strip_quotes(query).strip():
            raise UserInputError(f"invalid query: {query!r}")

    return queries


def validate_options(options: SearchOptions) -> None:
    """
    Raises:
        UserInputError: On out-of-range run options
    """
    if options.concurrency < 1:
        raise UserInputError(f"concurrency must be at least 1, got {options.concurrency}")
    if options.max_results is not None and options.max_results < 0:
        raise UserInputError(f"max results must not be negative, got {options.max_results}")
    if options.navigation_timeout is not None and options.navigation_timeout <= 0:
        raise UserInputError(
            f"navigation timeout must be positive, got {options.navigation_timeout}"
        )


def aggregate_results(
    query: str,
    links: Sequence[CandidateLink],
    outcomes: Sequence[Outcome[VisitResult]],
) -> QueryResult:
    """
    Build a query's final result from per-link outcomes.

    Entries keep candidate-link order. Failed visits and visits without
    content are left out of ``results`` and recorded in ``failures``.

    Args:
        query: Original query text, shown as is
        links: Candidate links in submission order
        outcomes: ``outcomes[i]`` settled from visiting ``links[i]``

    Returns:
        QueryResult
    """
    if len(links) != len(outcomes):
        raise ValueError(f"{len(links)} links but {len(outcomes)} outcomes")

    result = QueryResult(query=query)

    for link, outcome in zip(links, outcomes):
        if not outcome.ok:
            error = outcome.error
            message = error.message if isinstance(error, NavigationError) else (
                f"{type(error).__name__}: {error}"
            )
            result.failures.append(
                VisitFailure(url=link.url, reason=FailureReason.NAVIGATION, message=message)
            )
            continue

        visit = outcome.value
        if visit is None or not visit.has_content:
            result.failures.append(
                VisitFailure(url=link.url, reason=FailureReason.EMPTY_CONTENT)
            )
            continue

        if not visit.title:
            visit = dataclasses.replace(visit, title=link.title)
        result.results.append(visit)

    return result


class WebSearcher:
    """
    Runs query pipelines against a shared session and work queue.

    Usage:
        async with launch_session(config) as session:
            searcher = WebSearcher(session, WorkQueue(15))
            results = await searcher.run(["python asyncio"], max_results=10)
    """

    def __init__(
        self,
        session: BrowserSession,
        queue: WorkQueue,
        config: Optional[SearchConfig] = None,
        reporter: Optional[ResultReporter] = None,
    ):
        """
        Initialize searcher.

        Args:
            session: Running browser session
            queue: Work queue shared by every query of the run
            config: Endpoint, selectors and noise rules
            reporter: Receives interim and final records
        """
        self.config = config or SearchConfig()
        self._session = session
        self._queue = queue
        self._reporter = reporter or ResultReporter()
        self._results = SearchResultExtractor(session, self.config)
        self._articles = ArticleExtractor(session, self.config)

    async def search(self, query: str, max_results: int) -> QueryResult:
        """
        Run one query pipeline.

        Args:
            query: Original query text
            max_results: Effective per-query cap

        Returns:
            QueryResult for this query. A failed search page gives an empty
            result with a ``search`` failure instead of raising.
        """
        stripped = strip_quotes(query)

        try:
            links = await self._results.extract(stripped, max_results)
        except NavigationError as e:
            logger.error(f"Search failed for '{query}': {e}")
            result = QueryResult(
                query=query,
                failures=[VisitFailure(url=e.url, reason=FailureReason.SEARCH, message=e.message)],
            )
            self._reporter.on_result(result)
            return result

        self._reporter.on_links(query, links)

        outcomes = await self._queue.map(self._articles.visit, [link.url for link in links])
        result = aggregate_results(query, links, outcomes)

        logger.info(
            f"Query '{query}' done: {len(result.results)} results, "
            f"{len(result.failures)} filtered"
        )
        for failure in result.failures:
            logger.debug(f"Filtered {failure.url}: {failure.reason.value} {failure.message}")

        self._reporter.on_result(result)
        return result

    async def run(self, queries: Sequence[str], max_results: int) -> List[QueryResult]:
        """
        Run every query concurrently and wait for all of them to settle.

        Returns:
            One QueryResult per query, in the order of ``queries``

        Raises:
            Exception: The first unexpected error of any pipeline, re-raised
                once every pipeline has settled
        """
        settled = await asyncio.gather(
            *(self.search(query, max_results) for query in queries),
            return_exceptions=True,
        )

        errors = [item for item in settled if isinstance(item, BaseException)]
        for error in errors:
            logger.error(f"Query pipeline crashed: {type(error).__name__}: {error}")
        if errors:
            raise errors[0]

        return list(settled)


def build_browser_config(options: SearchOptions) -> BrowserConfig:
    """Browser settings for a run's options."""
    return BrowserConfig(
        headless=not options.show,
        executable_path=find_browser(options.browser),
        navigation_timeout=options.navigation_timeout,
    )


async def run_search(
    queries: Iterable[str],
    options: Optional[SearchOptions] = None,
    reporter: Optional[ResultReporter] = None,
    search_config: Optional[SearchConfig] = None,
    browser_config: Optional[BrowserConfig] = None,
) -> List[QueryResult]:
    """
    Run a full search: validate, launch, dispatch, drain, close.

    Args:
        queries: One or more query strings
        options: Run-level options
        reporter: Receives interim and final records
        search_config: Overrides the endpoint/selectors derived from options
        browser_config: Overrides the browser settings derived from options

    Returns:
        One QueryResult per query

    Raises:
        UserInputError: On invalid input, before the browser starts
        FatalLaunchError: If the browser cannot be launched
    """
    options = options or SearchOptions()
    queries = validate_queries(queries)
    validate_options(options)

    search_config = search_config or SearchConfig(search_url=options.search_url)
    max_results = effective_max_results(
        options.max_results,
        len(queries),
        default=search_config.default_max_results,
        minimum=search_config.min_results_per_query,
    )
    if browser_config is None:
        browser_config = build_browser_config(options)

    logger.info(
        f"Running {len(queries)} queries (max_results={max_results}, "
        f"concurrency={options.concurrency})"
    )

    queue = WorkQueue(options.concurrency)
    async with launch_session(browser_config) as session:
        searcher = WebSearcher(session, queue, search_config, reporter)
        try:
            return await searcher.run(queries, max_results)
        finally:
            await queue.drain()
            logger.info(
                f"Visited {queue.completed} pages ({queue.failed} failed, "
                f"peak concurrency {queue.peak})"
            )


def search_sync(
    queries: Iterable[str],
    options: Optional[SearchOptions] = None,
    reporter: Optional[ResultReporter] = None,
    search_config: Optional[SearchConfig] = None,
    browser_config: Optional[BrowserConfig] = None,
) -> List[QueryResult]:
    """
    Synchronous wrapper around ``run_search``.

    Convenience function for non-async contexts; takes the same arguments.
    """
    return asyncio.run(
        run_search(queries, options, reporter, search_config, browser_config)
    )


__all__ = [
    "WebSearcher",
    "aggregate_results",
    "build_browser_config",
    "effective_max_results",
    "run_search",
    "search_sync",
    "strip_quotes",
    "validate_options",
    "validate_queries",
]
