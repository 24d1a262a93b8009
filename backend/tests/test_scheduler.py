"""
tests/test_scheduler.py
────────────────────────
Timer-triggered refresh of every registered dashboard.
"""

import asyncio

import pytest

from aggregation.registry import SessionRegistry
from aggregation.scheduler import refresh_periodically
from aggregation.state import Ready
from core.errors import UnknownDashboard


class TestRefreshPeriodically:
    async def test_triggers_every_session(self, registry) -> None:
        task = asyncio.create_task(refresh_periodically(registry, interval=60))
        await asyncio.sleep(0)
        for session in registry.sessions():
            await session.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert all(isinstance(s.state, Ready) for s in registry.sessions())
        assert all(s.generation == 1 for s in registry.sessions())

    async def test_interval_shorter_than_fetch_still_settles(
        self, dashboards, make_client, payloads
    ) -> None:
        """Ticks arriving while a slow refresh loads do not cancel it."""
        client = make_client(payloads, delays={"posts": 0.05})
        registry = SessionRegistry(dashboards, client, default_time_range=lambda: "7d")

        task = asyncio.create_task(refresh_periodically(registry, interval=0.02))
        await asyncio.sleep(0.3)
        settled_while_running = [s.last_good is not None for s in registry.sessions()]
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert all(settled_while_running)
        for session in registry.sessions():
            state = await session.wait()
            assert isinstance(state, Ready)
            assert session.last_good is not None
            # Far fewer generations than the ~15 ticks that elapsed.
            assert session.generation < 10

    async def test_rejects_non_positive_interval(self, registry) -> None:
        with pytest.raises(ValueError):
            await refresh_periodically(registry, interval=0)


class TestRegistry:
    def test_unknown_dashboard(self, registry) -> None:
        with pytest.raises(UnknownDashboard):
            registry.get("nope")

    async def test_aclose_closes_client(self, registry, stub_client) -> None:
        await registry.aclose()
        assert stub_client.closed
