"""Web search and article extraction in a headless browser."""

__version__ = "0.1.0"

from websearch.searcher import (
    WebSearcher,
    aggregate_results,
    effective_max_results,
    run_search,
    search_sync,
    strip_quotes,
)
from websearch.models import (
    Article,
    CandidateLink,
    FailureReason,
    PageState,
    QueryResult,
    SearchEntry,
    VisitFailure,
    VisitResult,
)
from websearch.exceptions import (
    BrowserNotFoundError,
    ExtractionError,
    FatalLaunchError,
    NavigationError,
    UserInputError,
    WebSearchError,
)
from websearch.browser_config import BrowserConfig, SearchConfig, StealthConfig
from websearch.config import SearchOptions, settings
from websearch.reporting import CollectingReporter, ConsoleReporter, ResultReporter

# Infrastructure
from websearch.infrastructure import (
    BrowserSession,
    ManagedPage,
    NetworkIdleWatcher,
    WorkQueue,
    find_browser,
    launch_session,
)

# Extraction
from websearch.extraction import (
    ArticleExtractor,
    SearchResultExtractor,
    extract_article,
    to_markdown,
)

__all__ = [
    # Pipeline
    "WebSearcher",
    "aggregate_results",
    "effective_max_results",
    "run_search",
    "search_sync",
    "strip_quotes",
    # Models
    "Article",
    "CandidateLink",
    "FailureReason",
    "PageState",
    "QueryResult",
    "SearchEntry",
    "VisitFailure",
    "VisitResult",
    # Errors
    "BrowserNotFoundError",
    "ExtractionError",
    "FatalLaunchError",
    "NavigationError",
    "UserInputError",
    "WebSearchError",
    # Configuration
    "BrowserConfig",
    "SearchConfig",
    "StealthConfig",
    "SearchOptions",
    "settings",
    # Reporting
    "CollectingReporter",
    "ConsoleReporter",
    "ResultReporter",
    # Infrastructure
    "BrowserSession",
    "ManagedPage",
    "NetworkIdleWatcher",
    "WorkQueue",
    "find_browser",
    "launch_session",
    # Extraction
    "ArticleExtractor",
    "SearchResultExtractor",
    "extract_article",
    "to_markdown",
]
