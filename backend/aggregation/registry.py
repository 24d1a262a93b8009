"""
aggregation/registry.py
───────────────────────
One :class:`AggregationSession` per dashboard, all sharing a single
:class:`SourceClient` (and therefore one HTTP connection pool).

The registry is created once per process (``functools.lru_cache``) and
closed by the API lifespan hook.  Route handlers receive it through the
``get_registry`` FastAPI dependency so tests can swap it out.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, List, Mapping

from aggregation.session import AggregationSession, Clock, utc_now
from analytics.dashboards import get_dashboards
from analytics.definitions import DashboardDefinition
from core.config import get_settings
from core.errors import UnknownDashboard
from core.preferences import get_preferences
from sources.client import SourceClient

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Map dashboard names to their sessions.

    Args:
        dashboards:         ``{name: DashboardDefinition}``.
        client:             Shared source client; closed by :meth:`aclose`.
        default_time_range: Preference reader passed to every session.
        max_points:         Correlation point cap passed to every session.
        clock:              Timestamp source passed to every session.
    """

    def __init__(
        self,
        dashboards: Mapping[str, DashboardDefinition],
        client: SourceClient,
        *,
        default_time_range: Callable[[], str],
        max_points: int = 20,
        clock: Clock = utc_now,
    ) -> None:
        self._client = client
        self._sessions: Dict[str, AggregationSession] = {
            name: AggregationSession(
                dashboard,
                client,
                default_time_range=default_time_range,
                max_points=max_points,
                clock=clock,
            )
            for name, dashboard in dashboards.items()
        }

    def get(self, name: str) -> AggregationSession:
        """
        Return the session of dashboard ``name``.

        Raises:
            UnknownDashboard: No dashboard with that name exists.
        """
        try:
            return self._sessions[name]
        except KeyError:
            raise UnknownDashboard(name) from None

    def sessions(self) -> List[AggregationSession]:
        return list(self._sessions.values())

    async def aclose(self) -> None:
        await self._client.aclose()
        logger.info("Source client closed")


@lru_cache(maxsize=1)
def get_registry() -> SessionRegistry:
    """
    Return the application-wide session registry singleton.

    Built lazily from settings, the dashboard catalogue and the user
    preference store.
    """
    settings = get_settings()
    prefs = get_preferences()
    registry = SessionRegistry(
        get_dashboards(),
        SourceClient(timeout=settings.SOURCE_TIMEOUT_SECONDS),
        default_time_range=lambda: prefs.time_range,
        max_points=settings.CORRELATION_MAX_POINTS,
    )
    logger.info("Session registry initialised (%d dashboards)", len(registry.sessions()))
    return registry
