"""
Extraction Package.

Search result parsing, readability-based article extraction and Markdown
conversion.
"""

from .article import (
    ArticleExtractor,
    extract_article,
    remove_noise,
    run_readability,
)
from .markdown import to_markdown
from .search_results import (
    SearchResultExtractor,
    build_search_url,
    encode_query,
    filter_candidates,
    parse_entries,
)

__all__ = [
    "ArticleExtractor",
    "extract_article",
    "remove_noise",
    "run_readability",
    "to_markdown",
    "SearchResultExtractor",
    "build_search_url",
    "encode_query",
    "filter_candidates",
    "parse_entries",
]
