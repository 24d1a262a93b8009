"""
aggregation/scheduler.py
────────────────────────
Timer-triggered refresh of every dashboard.

Scheduled triggers go through :meth:`AggregationSession.trigger` like a
user's refresh button.  A tick never supersedes a refresh that is still
loading: the tick is folded into the refresh in flight, so a period shorter
than one fetch cannot keep a dashboard in ``Loading`` forever.  The loop
only triggers; it never waits for a refresh to settle.
"""

import asyncio
import logging

from aggregation.registry import SessionRegistry
from aggregation.state import Loading

logger = logging.getLogger(__name__)


async def refresh_periodically(registry: SessionRegistry, interval: float) -> None:
    """
    Trigger every idle or settled session now and then every ``interval``
    seconds, forever.

    Run it as a background task and cancel the task to stop it.

    Raises:
        ValueError: If ``interval`` is not positive.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")

    logger.info("Auto-refresh every %.0f s", interval)
    while True:
        for session in registry.sessions():
            if isinstance(session.state, Loading):
                logger.debug(
                    "Dashboard %s still loading; skipping scheduled refresh",
                    session.dashboard.name,
                )
                continue
            session.trigger()
        await asyncio.sleep(interval)
