"""
Browser session management.

One Chromium process is shared by every query pipeline and every queued visit
of a run. Pages are opened per visit and owned by the task that opened them.

Usage:
    async with launch_session(config) as session:
        async with session.open_page() as page:
            await page.navigate("https://example.com")
            html = await page.content()
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ..browser_config import BrowserConfig
from ..exceptions import FatalLaunchError, NavigationError
from ..models import PageState
from .network_idle import NetworkIdleWatcher
from .stealth import apply_evasions

logger = logging.getLogger(__name__)


class ManagedPage:
    """
    A Playwright page with an explicit lifecycle.

    ``created -> opened -> navigated -> extracted | failed -> closed``.
    ``close()`` reaches the underlying page at most once.
    """

    def __init__(self, page: Any, config: BrowserConfig):
        self._page = page
        self._config = config
        self.state = PageState.CREATED
        self.url: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.state == PageState.CLOSED

    async def open(self) -> None:
        """Apply interception and stealth overrides before any navigation."""
        await apply_evasions(self._page, self._config.stealth)
        self.state = PageState.OPENED

    async def navigate(self, url: str) -> None:
        """
        Navigate and wait for network quiescence.

        Args:
            url: Target URL

        Raises:
            NavigationError: If loading fails or exceeds the configured timeout
        """
        self.url = url
        watcher = NetworkIdleWatcher(
            self._page,
            max_inflight=self._config.network_idle_max_inflight,
            idle_time=self._config.network_idle_time,
        )
        watcher.attach()
        try:
            await self._page.goto(
                url,
                wait_until=self._config.wait_until,
                timeout=self._config.timeout_ms,
            )
            await watcher.wait(timeout=self._config.navigation_timeout)
        except PlaywrightError as e:
            self.state = PageState.FAILED
            raise NavigationError(url, str(e)) from e
        except asyncio.TimeoutError as e:
            self.state = PageState.FAILED
            raise NavigationError(url, "network never became idle") from e
        finally:
            watcher.detach()

        self.state = PageState.NAVIGATED

    async def evaluate(self, expression: str, arg: Any = None) -> Any:
        """Run a script in the page, wrapping driver errors."""
        try:
            return await self._page.evaluate(expression, arg)
        except PlaywrightError as e:
            self.state = PageState.FAILED
            raise NavigationError(self.url or "", str(e)) from e

    async def eval_on_selector_all(self, selector: str, expression: str, arg: Any = None) -> Any:
        """Run a script over every element matching selector."""
        try:
            return await self._page.eval_on_selector_all(selector, expression, arg)
        except PlaywrightError as e:
            self.state = PageState.FAILED
            raise NavigationError(self.url or "", str(e)) from e

    async def content(self) -> str:
        """Serialized HTML of the current document."""
        try:
            return await self._page.content()
        except PlaywrightError as e:
            self.state = PageState.FAILED
            raise NavigationError(self.url or "", str(e)) from e

    def mark_extracted(self) -> None:
        self.state = PageState.EXTRACTED

    def mark_failed(self) -> None:
        if self.state != PageState.CLOSED:
            self.state = PageState.FAILED

    async def close(self) -> None:
        """Close the underlying page. Repeated calls are ignored."""
        if self.state == PageState.CLOSED:
            logger.debug(f"Page already closed: {self.url}")
            return
        self.state = PageState.CLOSED
        try:
            await self._page.close()
        except PlaywrightError as e:
            logger.warning(f"Error closing page {self.url}: {e}")


class BrowserSession:
    """
    Owns the browser process for one run.

    Designed to be used as an async context manager, or through
    ``launch_session``; either way the browser is closed on every exit path.
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        """
        Initialize session.

        Args:
            config: Browser configuration, defaults to headless Chromium
        """
        self.config = config or BrowserConfig()
        self._playwright = None
        self._browser = None
        self._open_pages: List[ManagedPage] = []

    async def __aenter__(self) -> "BrowserSession":
        """Enter async context, launching browser."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context, closing browser."""
        await self.close()

    async def start(self) -> None:
        """
        Launch the browser with the configured stealth profile.

        Raises:
            FatalLaunchError: If Playwright or the browser fails to start
        """
        if self._browser is not None:
            return

        stealth = self.config.stealth
        launch_options = {
            "headless": self.config.headless,
            "args": list(stealth.launch_args),
            "ignore_default_args": list(stealth.ignore_default_args),
        }
        if self.config.executable_path:
            launch_options["executable_path"] = self.config.executable_path

        logger.info(
            f"Launching browser (headless={self.config.headless}, "
            f"executable={self.config.executable_path or 'bundled chromium'}, "
            f"stealth v{stealth.version})"
        )

        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(**launch_options)
        except Exception as e:
            await self._stop_driver()
            raise FatalLaunchError(f"Failed to launch browser: {e}") from e

        logger.info("Browser launched successfully")

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver."""
        if self._browser is not None:
            logger.info("Closing browser")
            try:
                await self._browser.close()
            except PlaywrightError as e:
                logger.warning(f"Error closing browser: {e}")
            self._browser = None

        await self._stop_driver()

    async def _stop_driver(self) -> None:
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.warning(f"Error stopping playwright: {e}")
            self._playwright = None

    @property
    def is_running(self) -> bool:
        """Whether the browser process is up."""
        return self._browser is not None

    @property
    def open_page_count(self) -> int:
        """Pages currently held open by tasks."""
        return len(self._open_pages)

    async def new_page(self) -> ManagedPage:
        """
        Create a page with interception and stealth already applied.

        The caller owns the page and must close it; prefer ``open_page``.

        Raises:
            RuntimeError: If the browser is not running
        """
        if self._browser is None:
            raise RuntimeError(
                "Browser is not running. Use BrowserSession as an async context manager: "
                "async with launch_session(config) as session:"
            )

        stealth = self.config.stealth
        try:
            raw_page = await self._browser.new_page(
                viewport=stealth.viewport,
                user_agent=stealth.user_agent,
                bypass_csp=stealth.bypass_csp,
            )
        except PlaywrightError as e:
            raise NavigationError("about:blank", f"could not open page: {e}") from e

        page = ManagedPage(raw_page, self.config)
        try:
            await page.open()
        except Exception:
            await page.close()
            raise
        return page

    @asynccontextmanager
    async def open_page(self) -> AsyncIterator[ManagedPage]:
        """
        Open a page for the duration of the block.

        The page is closed when the block exits, whether it completed or
        raised.

        Yields:
            ManagedPage ready for navigation
        """
        page = await self.new_page()
        self._open_pages.append(page)
        try:
            yield page
        except BaseException:
            page.mark_failed()
            raise
        finally:
            self._open_pages.remove(page)
            await page.close()


@asynccontextmanager
async def launch_session(config: Optional[BrowserConfig] = None) -> AsyncIterator[BrowserSession]:
    """
    Launch a browser session and guarantee it is closed exactly once.

    Args:
        config: Browser configuration

    Yields:
        Running BrowserSession

    Raises:
        FatalLaunchError: If the browser fails to start
    """
    session = BrowserSession(config)
    await session.start()
    try:
        yield session
    finally:
        await session.close()
