"""
aggregation/session.py
──────────────────────
Per-dashboard refresh lifecycle — the SINGLE writer of aggregation state.

Workflow (per trigger)
----------------------
1. Bump the generation number and enter ``Loading``.
2. Fan out to every source of the dashboard and wait for all outcomes.
3. Derive a :class:`SessionResult` from the outcomes.
4. Settle into ``Ready`` or ``Failed`` — but only if no newer trigger has
   happened in the meantime.

Overlapping triggers
--------------------
A trigger while ``Loading`` *supersedes* the in-flight refresh: the old
task is cancelled and a new generation starts.  Completions are written
only when their generation is still the latest, so the final state always
belongs to the most recently *triggered* refresh, even if an older one
finishes later.

Failure policy
--------------
``Failed`` keeps the previous result available through :attr:`last_good`;
the presentation layer shows it as stale data under an error banner.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from aggregation.state import AggregationState, Failed, Idle, Loading, Ready
from analytics.definitions import DashboardDefinition
from analytics.derivation import derive
from core.errors import DerivationError, MissingRequiredSource, NothingToExport
from core.preferences import DEFAULT_TIME_RANGE, TIME_RANGES
from schemas.results import ExportSnapshot, SessionResult
from sources.client import SourceClient
from sources.fanout import fetch_all

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AggregationSession:
    """
    Owns the state machine of one dashboard.

    Args:
        dashboard:          Screen definition (sources, metrics, projections).
        client:             Source client used for every fan-out.
        default_time_range: Called when a trigger does not name a range and
                            no previous range exists (reads user preferences).
        max_points:         Cap on points per correlation projection.
        clock:              Source of ``generated_at`` / ``exported_at``.

    Example:
        >>> session = AggregationSession(dashboards["analytics"], client)
        >>> state = await session.refresh("7d")
        >>> state.status
        'ready'
    """

    def __init__(
        self,
        dashboard: DashboardDefinition,
        client: SourceClient,
        *,
        default_time_range: Callable[[], str] = lambda: DEFAULT_TIME_RANGE,
        max_points: int = 20,
        clock: Clock = utc_now,
    ) -> None:
        self._dashboard = dashboard
        self._client = client
        self._default_time_range = default_time_range
        self._max_points = max_points
        self._clock = clock

        self._state: AggregationState = Idle()
        self._last_good: Optional[SessionResult] = None
        self._generation = 0
        self._time_range: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    # ── read-only view ────────────────────────────────────────────────────

    @property
    def dashboard(self) -> DashboardDefinition:
        return self._dashboard

    @property
    def state(self) -> AggregationState:
        return self._state

    @property
    def last_good(self) -> Optional[SessionResult]:
        """Most recent successful result; survives later failures."""
        return self._last_good

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def time_range(self) -> Optional[str]:
        return self._time_range

    @property
    def last_error(self) -> Optional[str]:
        """Reason of the current ``Failed`` state, else ``None``."""
        return self._state.reason if isinstance(self._state, Failed) else None

    # ── triggers ──────────────────────────────────────────────────────────

    def trigger(self, time_range: Optional[str] = None) -> asyncio.Task:
        """
        Start a new refresh generation and return its task.

        Args:
            time_range: ``7d``, ``30d`` or ``90d``.  Defaults to the range of
                        the previous refresh, then to the user preference.

        Returns:
            The ``asyncio.Task`` running the refresh.

        Raises:
            ValueError: If ``time_range`` is not supported.
        """
        if time_range is None:
            time_range = self._time_range or self._default_time_range()
        if time_range not in TIME_RANGES:
            raise ValueError(f"Unsupported time range '{time_range}'. Use one of {TIME_RANGES}.")

        previous = self._task
        if previous is not None and not previous.done():
            previous.cancel()
            logger.info(
                "Dashboard %s: generation %d superseded", self._dashboard.name, self._generation
            )

        self._generation += 1
        generation = self._generation
        self._time_range = time_range
        self._state = Loading(generation)
        logger.info(
            "Dashboard %s: refresh generation %d (%s)", self._dashboard.name, generation, time_range
        )
        self._task = asyncio.create_task(self._run(generation, time_range))
        return self._task

    def retry(self) -> asyncio.Task:
        """Re-run the refresh with the last time range (same as ``trigger()``)."""
        return self.trigger()

    async def wait(self) -> AggregationState:
        """Wait until the most recently triggered refresh has settled."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._state

    async def refresh(self, time_range: Optional[str] = None) -> AggregationState:
        """Trigger a refresh and wait for it to settle."""
        self.trigger(time_range)
        return await self.wait()

    # ── export ────────────────────────────────────────────────────────────

    def export(self, now: Optional[datetime] = None) -> ExportSnapshot:
        """
        Snapshot the current result for download.  Does not change state.

        Raises:
            NothingToExport: The session is not ``Ready``.
        """
        state = self._state
        if not isinstance(state, Ready):
            raise NothingToExport(
                f"Dashboard '{self._dashboard.name}' has no ready result to export "
                f"(state: {state.status})"
            )
        return ExportSnapshot(
            dashboard=self._dashboard.name,
            exported_at=now or self._clock(),
            result=state.result,
        )

    # ── private helpers ───────────────────────────────────────────────────

    async def _run(self, generation: int, time_range: str) -> None:
        outcomes = await fetch_all(self._client, self._dashboard.sources)
        try:
            result = derive(
                self._dashboard,
                outcomes,
                time_range=time_range,
                as_of=self._clock(),
                max_points=self._max_points,
            )
        except MissingRequiredSource as exc:
            logger.warning("Dashboard %s: %s", self._dashboard.name, exc)
            self._settle(
                generation, Failed(str(exc), generation, tuple(exc.source_ids))
            )
            return
        except Exception as exc:
            # DerivationError, or a bug in a projection's output shape.
            logger.exception("Dashboard %s: derivation failed", self._dashboard.name)
            reason = str(exc) if isinstance(exc, DerivationError) else f"Derivation failed: {exc!r}"
            self._settle(generation, Failed(reason, generation))
            return

        if self._settle(generation, Ready(result, generation)):
            self._last_good = result

    def _settle(self, generation: int, state: AggregationState) -> bool:
        """Write ``state`` unless a newer generation has been triggered."""
        if generation != self._generation:
            logger.info(
                "Dashboard %s: discarding stale completion of generation %d (current %d)",
                self._dashboard.name,
                generation,
                self._generation,
            )
            return False
        self._state = state
        logger.info(
            "Dashboard %s: generation %d settled as %s",
            self._dashboard.name,
            generation,
            state.status,
        )
        return True
