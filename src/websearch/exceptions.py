"""Error taxonomy for a search run.

Only ``UserInputError`` and ``FatalLaunchError`` are meant to reach the
caller of a run. ``NavigationError`` and ``ExtractionError`` are contained
per page and turned into filtered-out entries.
"""


class WebSearchError(Exception):
    """Base class for all errors raised by websearch."""


class UserInputError(WebSearchError):
    """Missing or invalid run input, reported before any browser work."""


class BrowserNotFoundError(UserInputError):
    """An explicitly requested browser executable could not be resolved."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Could not find a browser executable for '{selector}'")


class FatalLaunchError(WebSearchError):
    """The browser process failed to start. Aborts the whole run."""


class NavigationError(WebSearchError):
    """A page failed to load or evaluate."""

    def __init__(self, url: str, message: str):
        self.url = url
        self.message = message
        super().__init__(f"Navigation to {url} failed: {message}")


class ExtractionError(WebSearchError):
    """The readability pass could not produce content for a document."""
