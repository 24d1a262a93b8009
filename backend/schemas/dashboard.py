"""
Pydantic schemas for the dashboard and preference endpoints.

``DashboardView`` is the read-only contract of the presentation layer:
for every session state it names exactly one panel the UI must render.

=========  ===============  ==========================================
status     panel            UI
=========  ===============  ==========================================
idle       ``placeholder``  "Press refresh to load data"
loading    ``spinner``      loading indicator (stale data may show)
ready      ``result``       full metrics + charts
failed     ``error``        error panel + retry (stale data may show)
=========  ===============  ==========================================
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from core.preferences import Theme, TimeRange
from schemas.results import SessionResult

Status = Literal["idle", "loading", "ready", "failed"]
Panel = Literal["placeholder", "spinner", "result", "error"]


class DashboardSummary(BaseModel):
    """One entry of ``GET /dashboards``."""

    name: str
    title: str
    description: str
    status: Status


class DashboardView(BaseModel):
    """
    Everything the UI needs to render one dashboard.

    Attributes:
        dashboard:       Dashboard name.
        title:           Page heading.
        description:     Data-source banner text.
        status:          Session state.
        panel:           Panel the UI must render for ``status``.
        generation:      Generation of the latest trigger (0 before any).
        time_range:      Range of the latest trigger.
        result:          Current result — only when ``status == "ready"``.
        stale_result:    Last known good result while loading or failed.
        error:           User-facing failure reason when ``failed``.
        missing_sources: Required sources that failed when ``failed``.
        can_retry:       Whether the retry button is shown.
        can_export:      Whether the export button is enabled.
    """

    dashboard: str
    title: str
    description: str
    status: Status
    panel: Panel
    generation: int
    time_range: Optional[str] = None
    result: Optional[SessionResult] = None
    stale_result: Optional[SessionResult] = None
    error: Optional[str] = None
    missing_sources: List[str] = Field(default_factory=list)
    can_retry: bool = False
    can_export: bool = False


class PreferencesOut(BaseModel):
    time_range: TimeRange
    theme: Theme


class PreferencesUpdate(BaseModel):
    """Partial update; omitted fields keep their value."""

    time_range: Optional[TimeRange] = None
    theme: Optional[Theme] = None
