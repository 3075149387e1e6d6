"""Tests for feed_reconciler/common/async_utils.py"""

import asyncio

from feed_reconciler.common.async_utils import bounded_gather


class TestBoundedGather:
    def test_preserves_input_order(self):
        async def work(n):
            # Later items finish first
            await asyncio.sleep(0.001 * (5 - n))
            return n * 10

        assert asyncio.run(bounded_gather(work, range(5), limit=4)) == [0, 10, 20, 30, 40]

    def test_respects_limit(self):
        state = {"running": 0, "peak": 0}

        async def work(n):
            state["running"] += 1
            state["peak"] = max(state["peak"], state["running"])
            await asyncio.sleep(0.001)
            state["running"] -= 1
            return n

        asyncio.run(bounded_gather(work, range(20), limit=4))
        assert state["peak"] <= 4

    def test_empty_input(self):
        async def work(n):
            return n

        assert asyncio.run(bounded_gather(work, [])) == []
