"""Unit tests for WorkQueue.

Tests the bounded, order-preserving work queue shared by all queries of a run.
"""

import asyncio
import random

import pytest

from websearch.infrastructure.work_queue import Outcome, WorkQueue


class TestOutcome:
    """Tests for Outcome."""

    def test_ok_without_error(self):
        """Test that an outcome without error is ok."""
        assert Outcome(value=1).ok

    def test_not_ok_with_error(self):
        """Test that an outcome carrying an error is not ok."""
        outcome = Outcome(error=RuntimeError("boom"))
        assert not outcome.ok
        assert outcome.value is None


class TestWorkQueue:
    """Tests for WorkQueue."""

    def test_rejects_zero_concurrency(self):
        """Test that a concurrency below 1 is rejected."""
        with pytest.raises(ValueError):
            WorkQueue(concurrency=0)

    @pytest.mark.asyncio
    async def test_concurrency_ceiling(self):
        """Test that no more than `concurrency` tasks execute at once."""
        queue = WorkQueue(concurrency=3)
        active = 0
        observed = []

        async def work(item):
            nonlocal active
            active += 1
            observed.append(active)
            await asyncio.sleep(0.01)
            active -= 1
            return item

        await queue.map(work, range(20))

        assert max(observed) <= 3
        assert queue.peak == 3

    @pytest.mark.asyncio
    async def test_ceiling_is_shared_across_maps(self):
        """Test that concurrent map calls share one ceiling."""
        queue = WorkQueue(concurrency=2)

        async def work(item):
            await asyncio.sleep(0.01)
            return item

        await asyncio.gather(
            queue.map(work, range(5)),
            queue.map(work, range(5)),
            queue.map(work, range(5)),
        )

        assert queue.peak <= 2
        assert queue.completed == 15

    @pytest.mark.asyncio
    async def test_map_preserves_submission_order(self):
        """Test that outcomes line up with items regardless of completion order."""
        queue = WorkQueue(concurrency=5)
        delays = [random.uniform(0, 0.02) for _ in range(10)]

        async def work(index):
            await asyncio.sleep(delays[index])
            return index * 10

        outcomes = await queue.map(work, range(10))

        assert [outcome.value for outcome in outcomes] == [i * 10 for i in range(10)]

    @pytest.mark.asyncio
    async def test_failure_does_not_affect_siblings(self):
        """Test that one failing task settles as an error and the rest succeed."""
        queue = WorkQueue(concurrency=2)

        async def work(item):
            await asyncio.sleep(0.001)
            if item == 2:
                raise RuntimeError("bad item")
            return item

        outcomes = await queue.map(work, range(5))

        assert [o.ok for o in outcomes] == [True, True, False, True, True]
        assert isinstance(outcomes[2].error, RuntimeError)
        assert queue.failed == 1
        assert queue.completed == 5

    @pytest.mark.asyncio
    async def test_empty_map(self):
        """Test mapping over no items."""
        queue = WorkQueue()
        assert await queue.map(lambda item: item, []) == []

    @pytest.mark.asyncio
    async def test_drain_waits_for_submitted_tasks(self):
        """Test that drain returns only after every submitted task settled."""
        queue = WorkQueue(concurrency=1)
        done = []

        async def work():
            await asyncio.sleep(0.01)
            done.append(True)

        for _ in range(3):
            queue.submit(work)

        assert queue.pending == 3
        await queue.drain()

        assert len(done) == 3
        assert queue.pending == 0
        assert queue.running == 0
