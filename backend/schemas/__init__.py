"""
Pydantic schemas for request/response serialization and the export file.

Separate from the engine (aggregation, analytics) and routes (HTTP layer).
"""

from schemas.dashboard import DashboardSummary, DashboardView, PreferencesOut, PreferencesUpdate
from schemas.results import (
    CategoricalProjection,
    CorrelationProjection,
    ExportSnapshot,
    HeadlineMetric,
    ListingProjection,
    SessionResult,
    TimeSeriesProjection,
)

__all__ = [
    "CategoricalProjection",
    "CorrelationProjection",
    "DashboardSummary",
    "DashboardView",
    "ExportSnapshot",
    "HeadlineMetric",
    "ListingProjection",
    "PreferencesOut",
    "PreferencesUpdate",
    "SessionResult",
    "TimeSeriesProjection",
]
