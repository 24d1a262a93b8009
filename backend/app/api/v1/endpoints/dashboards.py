"""
app/api/v1/endpoints/dashboards.py
───────────────────────────────────
Dashboard endpoints: the presentation layer's window onto the engine.

Routes
------
GET  /api/v1/dashboards                 List dashboards and their status.
GET  /api/v1/dashboards/{name}          Current view (state + panel).
POST /api/v1/dashboards/{name}/refresh  Trigger a refresh (optionally wait).
POST /api/v1/dashboards/{name}/retry    Re-run the last refresh.
GET  /api/v1/dashboards/{name}/export   Download the current result as JSON.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from aggregation.export import export_filename, serialize_snapshot
from aggregation.registry import SessionRegistry
from aggregation.session import AggregationSession
from aggregation.view import build_summary, build_view
from app.api.dependencies import get_session_registry
from core.errors import NothingToExport, UnknownDashboard
from core.preferences import TimeRange
from schemas.dashboard import DashboardSummary, DashboardView

logger = logging.getLogger(__name__)
router = APIRouter()


def _session_or_404(registry: SessionRegistry, name: str) -> AggregationSession:
    try:
        return registry.get(name)
    except UnknownDashboard as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/", response_model=list[DashboardSummary], summary="List dashboards")
def list_dashboards(
    registry: SessionRegistry = Depends(get_session_registry),
) -> list[DashboardSummary]:
    """
    Return every dashboard with its current status.

    Returns:
        One summary per dashboard, in sidebar order.
    """
    return [build_summary(s) for s in registry.sessions()]


@router.get("/{name}", response_model=DashboardView, summary="Current dashboard view")
def get_dashboard(
    name: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> DashboardView:
    """
    Return the current state of dashboard ``name`` without triggering anything.

    Raises:
        HTTPException 404: Unknown dashboard.
    """
    return build_view(_session_or_404(registry, name))


@router.post("/{name}/refresh", response_model=DashboardView, summary="Refresh a dashboard")
async def refresh_dashboard(
    name: str,
    time_range: Optional[TimeRange] = Query(
        default=None,
        description="7d, 30d or 90d. Defaults to the previous range, then the saved preference.",
    ),
    wait: bool = Query(
        default=True,
        description="Wait for the refresh to settle before responding.",
    ),
    registry: SessionRegistry = Depends(get_session_registry),
) -> DashboardView:
    """
    Start a new refresh generation of dashboard ``name``.

    A refresh already in flight is superseded.  With ``wait=false`` the
    response is the ``loading`` view; poll ``GET /{name}`` for the outcome.

    Raises:
        HTTPException 404: Unknown dashboard.
        HTTPException 422: Unsupported ``time_range``.
    """
    session = _session_or_404(registry, name)
    session.trigger(time_range)
    if wait:
        await session.wait()
    return build_view(session)


@router.post("/{name}/retry", response_model=DashboardView, summary="Retry the last refresh")
async def retry_dashboard(
    name: str,
    wait: bool = Query(default=True),
    registry: SessionRegistry = Depends(get_session_registry),
) -> DashboardView:
    """
    Re-run the refresh of dashboard ``name`` with its last time range.

    Raises:
        HTTPException 404: Unknown dashboard.
    """
    session = _session_or_404(registry, name)
    session.retry()
    if wait:
        await session.wait()
    return build_view(session)


@router.get("/{name}/export", summary="Download the current result")
def export_dashboard(
    name: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> Response:
    """
    Return the current result as a JSON attachment.

    The file is named ``{name}-data-YYYY-MM-DD.json`` from the export date.

    Raises:
        HTTPException 404: Unknown dashboard.
        HTTPException 409: The dashboard has no ready result.
    """
    session = _session_or_404(registry, name)
    try:
        snapshot = session.export()
    except NothingToExport as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    filename = export_filename(snapshot)
    logger.info("Exporting %s as %s", name, filename)
    return Response(
        content=serialize_snapshot(snapshot),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
