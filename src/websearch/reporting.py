"""Presentation of interim and final search records."""

import json
import sys
from typing import List, Optional, TextIO

from .models import CandidateLink, QueryResult


class ResultReporter:
    """Receives records as a run progresses. The base class discards them."""

    def on_links(self, query: str, links: List[CandidateLink]) -> None:
        """Candidate links of a query, before any visit has finished."""

    def on_result(self, result: QueryResult) -> None:
        """Final result of a query, once all its visits have settled."""


class ConsoleReporter(ResultReporter):
    """Writes one ``--> <json>`` line per record."""

    PREFIX = "-->"

    def __init__(self, stream: Optional[TextIO] = None, include_failures: bool = False):
        """
        Args:
            stream: Output stream, defaults to stdout
            include_failures: Add typed failure records to final results
        """
        self._stream = stream
        self.include_failures = include_failures

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stdout

    def _emit(self, record: dict) -> None:
        self.stream.write(f"{self.PREFIX} {json.dumps(record, ensure_ascii=False)}\n")
        self.stream.flush()

    def on_links(self, query: str, links: List[CandidateLink]) -> None:
        self._emit({"query": query, "results": [link.to_dict() for link in links]})

    def on_result(self, result: QueryResult) -> None:
        self._emit(result.to_dict(include_failures=self.include_failures))


class CollectingReporter(ResultReporter):
    """Keeps every record in memory, for library callers."""

    def __init__(self):
        self.links: dict = {}
        self.results: List[QueryResult] = []

    def on_links(self, query: str, links: List[CandidateLink]) -> None:
        self.links[query] = list(links)

    def on_result(self, result: QueryResult) -> None:
        self.results.append(result)
