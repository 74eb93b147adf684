from dotenv import load_dotenv
from dataclasses import dataclass
from typing import Optional
import os

from .exceptions import UserInputError

load_dotenv()  # Loads variables from .env file


def _env_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise UserInputError(f"{name} must be an integer, got {value!r}") from None


def _env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        raise UserInputError(f"{name} must be a number, got {value!r}") from None


class Settings:
    """
    Manages application settings loaded from environment variables.

    Values are read on access, so a malformed variable is reported as a
    UserInputError by whoever asks for it.
    """

    @property
    def SEARCH_URL(self) -> str:
        return os.getenv("WEBSEARCH_SEARCH_URL", "https://www.google.com/search")

    @property
    def CONCURRENCY(self) -> int:
        return _env_int("WEBSEARCH_CONCURRENCY", 15)

    @property
    def BROWSER(self) -> Optional[str]:
        return os.getenv("WEBSEARCH_BROWSER")

    @property
    def NAVIGATION_TIMEOUT(self) -> Optional[float]:
        return _env_float("WEBSEARCH_NAVIGATION_TIMEOUT")

    @property
    def LOG_LEVEL(self) -> str:
        return os.getenv("LOG_LEVEL", "INFO")


settings = Settings()


@dataclass
class SearchOptions:
    """Run-level options for one search invocation."""
    concurrency: int = 15
    max_results: Optional[int] = None  # Total cap, split across queries
    show: bool = False
    browser: Optional[str] = None
    navigation_timeout: Optional[float] = None  # Seconds, None waits forever
    search_url: str = "https://www.google.com/search"

    @classmethod
    def from_env(cls) -> "SearchOptions":
        """Load run options from environment variables.

        Returns:
            SearchOptions: Options with values from environment

        Raises:
            UserInputError: If a numeric variable is malformed
        """
        return cls(
            concurrency=settings.CONCURRENCY,
            max_results=_env_int("WEBSEARCH_MAX_RESULTS"),
            show=os.getenv("WEBSEARCH_SHOW", "").lower() in ("1", "true", "yes"),
            browser=settings.BROWSER,
            navigation_timeout=settings.NAVIGATION_TIMEOUT,
            search_url=settings.SEARCH_URL,
        )
