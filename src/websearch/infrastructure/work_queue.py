"""
Bounded work queue shared by every query pipeline of a run.

At most ``concurrency`` submitted tasks execute at any instant, whoever
submitted them. Each task settles into an ``Outcome`` instead of raising, so
one failed visit never cancels its siblings.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Iterable, List, Optional, Set, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
I = TypeVar("I")


@dataclass
class Outcome(Generic[T]):
    """Settled result of one submitted task."""
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class WorkQueue:
    """
    Concurrency limiter with order-preserving collection.

    Usage:
        queue = WorkQueue(concurrency=15)
        outcomes = await queue.map(visit, urls)   # outcomes[i] <-> urls[i]
        await queue.drain()
    """

    def __init__(self, concurrency: int = 15):
        """
        Initialize queue.

        Args:
            concurrency: Maximum tasks executing at once, fixed for the run

        Raises:
            ValueError: If concurrency is below 1
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self._concurrency = concurrency
        self._semaphore = asyncio.Semaphore(concurrency)
        self._pending: Set[asyncio.Task] = set()

        # Statistics
        self._running = 0
        self._peak = 0
        self._completed = 0
        self._failed = 0

    @property
    def concurrency(self) -> int:
        return self._concurrency

    @property
    def running(self) -> int:
        """Tasks executing right now."""
        return self._running

    @property
    def peak(self) -> int:
        """Highest number of tasks that ever executed at once."""
        return self._peak

    @property
    def pending(self) -> int:
        """Tasks submitted but not yet settled."""
        return len(self._pending)

    @property
    def completed(self) -> int:
        return self._completed

    @property
    def failed(self) -> int:
        return self._failed

    def submit(self, factory: Callable[[], Awaitable[T]]) -> "asyncio.Task[Outcome[T]]":
        """
        Schedule a task.

        Args:
            factory: Zero-argument callable returning the awaitable to run.
                It is only called once a slot is free.

        Returns:
            Task resolving to the task's Outcome
        """
        task = asyncio.ensure_future(self._run(factory))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _run(self, factory: Callable[[], Awaitable[T]]) -> Outcome[T]:
        async with self._semaphore:
            self._running += 1
            self._peak = max(self._peak, self._running)
            try:
                value = await factory()
            except Exception as e:
                self._failed += 1
                logger.debug(f"Queued task failed: {type(e).__name__}: {e}")
                return Outcome(error=e)
            finally:
                self._running -= 1
                self._completed += 1
            return Outcome(value=value)

    async def map(self, func: Callable[[I], Awaitable[T]], items: Iterable[I]) -> List[Outcome[T]]:
        """
        Submit ``func(item)`` for every item, in order, and collect outcomes.

        Args:
            func: Coroutine function applied to each item
            items: Work items

        Returns:
            Outcomes indexed like items, independent of completion order
        """
        tasks = [self.submit(lambda item=item: func(item)) for item in items]
        outcomes: List[Optional[Outcome[T]]] = [None] * len(tasks)
        for index, task in enumerate(tasks):
            outcomes[index] = await task
        return outcomes  # type: ignore[return-value]

    async def drain(self) -> None:
        """Wait until every submitted task has settled."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
