"""
aggregation/view.py
───────────────────
Read-only projection of a session's state for the presentation layer.

Nothing here mutates the session; the HTTP layer calls
:func:`build_view` after every read or trigger.
"""

from aggregation.session import AggregationSession
from aggregation.state import Failed, Idle, Loading, Ready
from schemas.dashboard import DashboardSummary, DashboardView


def build_view(session: AggregationSession) -> DashboardView:
    """
    Map the session's current state to exactly one UI panel.

    Args:
        session: Session to describe.

    Returns:
        A :class:`DashboardView`; ``stale_result`` carries the last known
        good result whenever the current state has none of its own.

    Raises:
        TypeError: The state is not one of the four known states.
    """
    state = session.state
    dashboard = session.dashboard
    common = dict(
        dashboard=dashboard.name,
        title=dashboard.title,
        description=dashboard.description,
        generation=session.generation,
        time_range=session.time_range,
    )

    if isinstance(state, Idle):
        return DashboardView(status="idle", panel="placeholder", **common)
    if isinstance(state, Loading):
        return DashboardView(
            status="loading", panel="spinner", stale_result=session.last_good, **common
        )
    if isinstance(state, Ready):
        return DashboardView(
            status="ready", panel="result", result=state.result, can_export=True, **common
        )
    if isinstance(state, Failed):
        return DashboardView(
            status="failed",
            panel="error",
            stale_result=session.last_good,
            error=state.reason,
            missing_sources=list(state.missing_sources),
            can_retry=True,
            **common,
        )
    raise TypeError(f"Unhandled aggregation state: {state!r}")


def build_summary(session: AggregationSession) -> DashboardSummary:
    return DashboardSummary(
        name=session.dashboard.name,
        title=session.dashboard.title,
        description=session.dashboard.description,
        status=session.state.status,
    )
