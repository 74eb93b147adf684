"""
Network quiescence detection.

A page counts as settled once no more than ``max_inflight`` requests have
been in flight for ``idle_time`` seconds without interruption.
"""

import asyncio
import logging
import time
from typing import Any, Optional, Set

logger = logging.getLogger(__name__)


class NetworkIdleWatcher:
    """
    Tracks in-flight requests of one page through its request events.

    Usage:
        watcher = NetworkIdleWatcher(page)
        watcher.attach()
        try:
            await page.goto(url)
            await watcher.wait()
        finally:
            watcher.detach()
    """

    def __init__(
        self,
        page: Any,
        max_inflight: int = 2,
        idle_time: float = 0.5,
        poll_interval: float = 0.05,
    ):
        """
        Initialize watcher.

        Args:
            page: Playwright page to observe
            max_inflight: Connections tolerated while still counting as quiet
            idle_time: Seconds the quiet period must last
            poll_interval: Seconds between checks of the quiet period
        """
        self._page = page
        self.max_inflight = max_inflight
        self.idle_time = idle_time
        self.poll_interval = poll_interval

        self._inflight: Set[Any] = set()
        self._quiet_since: Optional[float] = time.monotonic()
        self._attached = False

    def attach(self) -> None:
        """Start listening to the page's request events."""
        if self._attached:
            return
        self._page.on("request", self._on_request)
        self._page.on("requestfinished", self._on_done)
        self._page.on("requestfailed", self._on_done)
        self._attached = True

    def detach(self) -> None:
        """Stop listening to the page's request events."""
        if not self._attached:
            return
        self._page.remove_listener("request", self._on_request)
        self._page.remove_listener("requestfinished", self._on_done)
        self._page.remove_listener("requestfailed", self._on_done)
        self._attached = False

    def _on_request(self, request: Any) -> None:
        self._inflight.add(request)
        if len(self._inflight) > self.max_inflight:
            self._quiet_since = None

    def _on_done(self, request: Any) -> None:
        self._inflight.discard(request)
        if len(self._inflight) <= self.max_inflight and self._quiet_since is None:
            self._quiet_since = time.monotonic()

    @property
    def inflight(self) -> int:
        """Number of requests currently in flight."""
        return len(self._inflight)

    def is_idle(self) -> bool:
        """Whether the quiet period has lasted long enough."""
        if self._quiet_since is None:
            return False
        return time.monotonic() - self._quiet_since >= self.idle_time

    async def wait(self, timeout: Optional[float] = None) -> None:
        """
        Wait until the network is quiet.

        Args:
            timeout: Seconds to wait at most, None waits forever

        Raises:
            asyncio.TimeoutError: If the page never settles within timeout
        """
        if timeout is None:
            await self._wait_idle()
        else:
            await asyncio.wait_for(self._wait_idle(), timeout)

    async def _wait_idle(self) -> None:
        while not self.is_idle():
            await asyncio.sleep(self.poll_interval)
        logger.debug(f"Network idle ({self.inflight} in flight)")
