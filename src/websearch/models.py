"""Data models for search runs."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PageState(Enum):
    """Lifecycle of a single browser page."""
    CREATED = "created"
    OPENED = "opened"
    NAVIGATED = "navigated"
    EXTRACTED = "extracted"
    FAILED = "failed"
    CLOSED = "closed"


class FailureReason(Enum):
    """Why an entry was left out of a query's results."""
    NAVIGATION = "navigation"
    EMPTY_CONTENT = "empty_content"
    SEARCH = "search"


@dataclass(frozen=True)
class SearchEntry:
    """Raw result container as read from the search page, possibly incomplete."""

    title: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class CandidateLink:
    """A search result eligible for a content visit."""

    title: str
    url: str

    def __post_init__(self):
        if not self.title or not self.url:
            raise ValueError("CandidateLink requires a non-empty title and url")

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url}


@dataclass
class Article:
    """Output of the readability pass over one document."""

    title: str = ""
    content: str = ""


@dataclass
class VisitResult:
    """Content extracted from one candidate link."""

    url: str
    title: str = ""
    content: str = ""

    @property
    def has_content(self) -> bool:
        return bool(self.content and self.content.strip())

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url, "content": self.content}


@dataclass
class VisitFailure:
    """Diagnostic record for an entry that was filtered out."""

    url: str
    reason: FailureReason
    message: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"url": self.url, "reason": self.reason.value, "message": self.message}


@dataclass
class QueryResult:
    """Final, ordered results for one query."""

    query: str
    results: List[VisitResult] = field(default_factory=list)
    failures: List[VisitFailure] = field(default_factory=list)

    def to_dict(self, include_failures: bool = False) -> Dict[str, Any]:
        """Serialize to dictionary.

        Args:
            include_failures: Also emit the typed failure records
        """
        data: Dict[str, Any] = {
            "query": self.query,
            "results": [result.to_dict() for result in self.results],
        }
        if include_failures:
            data["failures"] = [failure.to_dict() for failure in self.failures]
        return data
