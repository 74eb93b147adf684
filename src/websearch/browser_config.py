"""
Browser and search configuration.

Pydantic models for everything the browser session and the extractors need:
the versioned stealth profile applied at launch and per page, the navigation
and quiescence settings, and the search endpoint with its result selectors.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

# Sub-trees that never belong to article content.
# ".reflist" drops Wikipedia reference lists.
DEFAULT_NOISE_SELECTORS = [
    "script",
    "noscript",
    "style",
    "link",
    "svg",
    "img",
    "video",
    "iframe",
    "canvas",
    ".reflist",
]


class StealthConfig(BaseModel):
    """
    Stealth profile applied when the browser is launched and to every page.

    Bump ``version`` whenever the flag set or the overrides change so a run
    can be traced back to the exact profile it used.
    """

    version: int = Field(
        default=1,
        description="Revision of this stealth profile",
        ge=1
    )

    launch_args: List[str] = Field(
        default_factory=lambda: [
            "--disable-blink-features=AutomationControlled",
            "--disable-web-security",
        ],
        description="Chromium flags passed at launch"
    )

    ignore_default_args: List[str] = Field(
        default_factory=lambda: ["--enable-automation"],
        description="Playwright default flags that must not be passed"
    )

    viewport_width: int = Field(default=1280, ge=320)
    viewport_height: int = Field(default=720, ge=240)

    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User agent reported by every page"
    )

    languages: List[str] = Field(
        default_factory=lambda: ["en-US", "en"],
        description="Value reported by navigator.languages"
    )

    plugins: List[str] = Field(
        default_factory=lambda: [
            "Chrome PDF Plugin",
            "Chrome PDF Viewer",
            "Native Client",
            "Chromium PDF Plugin",
            "Microsoft Edge PDF Plugin",
        ],
        description="Plugin names reported by navigator.plugins"
    )

    bypass_csp: bool = Field(
        default=True,
        description="Ignore Content-Security-Policy so injected scripts always run"
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @property
    def viewport(self) -> dict:
        return {"width": self.viewport_width, "height": self.viewport_height}


class BrowserConfig(BaseModel):
    """
    Configuration for the shared browser session.

    All fields are validated by Pydantic to ensure type safety and valid values.
    """

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode (no visible UI)"
    )

    executable_path: Optional[str] = Field(
        default=None,
        description="Browser binary to launch. None uses Playwright's bundled Chromium."
    )

    stealth: StealthConfig = Field(default_factory=StealthConfig)

    wait_until: Literal["commit", "domcontentloaded", "load"] = Field(
        default="domcontentloaded",
        description="Lifecycle event awaited by goto before the quiescence wait starts"
    )

    navigation_timeout: Optional[float] = Field(
        default=None,
        description="Seconds allowed for navigation plus quiescence. None waits forever.",
        gt=0
    )

    network_idle_max_inflight: int = Field(
        default=2,
        description="Connections still allowed while the network counts as quiet",
        ge=0
    )

    network_idle_time: float = Field(
        default=0.5,
        description="Seconds the network must stay quiet before a page is read",
        ge=0
    )

    class Config:
        """Pydantic model configuration."""
        frozen = False
        validate_assignment = True

    @property
    def timeout_ms(self) -> float:
        """Navigation timeout in Playwright units, 0 disables it."""
        if self.navigation_timeout is None:
            return 0
        return self.navigation_timeout * 1000


class SearchConfig(BaseModel):
    """Search endpoint, result-page selectors and content clean-up rules."""

    search_url: str = Field(
        default="https://www.google.com/search",
        description="Base URL receiving the q and num parameters"
    )

    result_selector: str = Field(default=".g", description="One element per search result")
    title_selector: str = Field(default="h3", description="Title element inside a result")
    link_selector: str = Field(default="a", description="Link element inside a result")

    noise_selectors: List[str] = Field(
        default_factory=lambda: list(DEFAULT_NOISE_SELECTORS),
        description="Elements removed before running readability"
    )

    default_max_results: int = Field(
        default=10,
        description="Per-query cap when no total cap is requested",
        ge=1
    )

    min_results_per_query: int = Field(
        default=3,
        description="Floor applied when a total cap is split across queries",
        ge=1
    )

    class Config:
        """Pydantic model configuration."""
        frozen = False
        validate_assignment = True
