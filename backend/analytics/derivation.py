"""
analytics/derivation.py
───────────────────────
Turn one refresh's outcome map into a :class:`SessionResult`.

``derive`` is pure: no I/O, no randomness, no clock — the timestamp is
supplied by the caller.  Calling it twice with the same arguments yields
equal results.

Missing data policy
-------------------
- A failed (or absent) **required** source aborts with
  :class:`~core.errors.MissingRequiredSource`; no partial result exists.
- A failed **optional** source degrades only what reads it: headline
  cards become neutral placeholders, projections become empty.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict

from analytics.definitions import DashboardDefinition, DerivationContext
from analytics.metrics import headline, neutral_headline
from analytics.projections import TIME_RANGE_PROFILES, recent_items, weighted_series
from core.errors import DerivationError, MissingRequiredSource
from schemas.results import (
    CategoricalProjection,
    CorrelationProjection,
    ListingProjection,
    SessionResult,
    TimeSeriesProjection,
)
from sources.fanout import optional_failures, required_failures
from sources.models import OutcomeMap

logger = logging.getLogger(__name__)


def _call(ident: str, fn: Callable[..., Any], *args: Any) -> Any:
    """Run one metric/projection function, wrapping any failure."""
    try:
        return fn(*args)
    except Exception as exc:
        raise DerivationError(f"Failed to derive '{ident}': {exc!r}") from exc


def derive(
    dashboard: DashboardDefinition,
    outcomes: OutcomeMap,
    *,
    time_range: str,
    as_of: datetime,
    max_points: int = 20,
) -> SessionResult:
    """
    Derive headline metrics and chart projections for ``dashboard``.

    Args:
        dashboard:  Screen definition (sources, metrics, projections).
        outcomes:   ``{source_id: FetchOutcome}`` from the fan-out.
        time_range: Selected range; picks the time-series label profile.
        as_of:      Timestamp stored as ``generated_at``.
        max_points: Cap on points per correlation projection.

    Returns:
        A frozen :class:`SessionResult`.

    Raises:
        MissingRequiredSource: A required source failed or is missing.
        DerivationError:       A metric or projection function raised.
    """
    missing = required_failures(dashboard.sources, outcomes)
    if missing:
        raise MissingRequiredSource(missing)

    degraded = optional_failures(dashboard.sources, outcomes)
    if degraded:
        logger.warning(
            "Dashboard %s: optional source(s) %s unavailable — using neutral data",
            dashboard.name,
            ", ".join(degraded),
        )

    payloads: Dict[str, Any] = {sid: o.payload for sid, o in outcomes.items() if o.ok}
    ctx = DerivationContext(time_range=time_range, max_points=max_points)

    def available(inputs) -> bool:
        return all(i in payloads for i in inputs)

    def args(inputs) -> list:
        return [payloads[i] for i in inputs]

    metrics = {}
    for m in dashboard.metrics:
        if available(m.inputs):
            value = _call(m.metric_id, m.compute, *args(m.inputs))
            metrics[m.metric_id] = headline(m.metric_id, m.title, value, m.baseline, m.fmt)
        else:
            metrics[m.metric_id] = neutral_headline(m.metric_id, m.title, m.baseline)

    time_series = {}
    for ts in dashboard.time_series:
        points = []
        if available(ts.inputs):
            profile = ts.profile
            if profile is None:
                if time_range not in TIME_RANGE_PROFILES:
                    raise DerivationError(f"Unsupported time range '{time_range}'")
                profile = TIME_RANGE_PROFILES[time_range]
            count = _call(ts.projection_id, ts.count, *args(ts.inputs))
            points = weighted_series(int(count), profile)
        time_series[ts.projection_id] = TimeSeriesProjection(
            projection_id=ts.projection_id, title=ts.title, points=points
        )

    categorical = {}
    for cat in dashboard.categorical:
        buckets = []
        if available(cat.inputs):
            buckets = _call(cat.projection_id, cat.build, ctx, *args(cat.inputs))
        categorical[cat.projection_id] = CategoricalProjection(
            projection_id=cat.projection_id, title=cat.title, buckets=buckets
        )

    correlation = {}
    for cor in dashboard.correlation:
        points = []
        if available(cor.inputs):
            points = _call(cor.projection_id, cor.build, ctx, *args(cor.inputs))
        correlation[cor.projection_id] = CorrelationProjection(
            projection_id=cor.projection_id,
            title=cor.title,
            x_label=cor.x_label,
            y_label=cor.y_label,
            points=points,
        )

    listings = {}
    for lst in dashboard.listings:
        items, total = [], 0
        if available(lst.inputs):
            (records,) = args(lst.inputs)
            items = _call(lst.projection_id, recent_items, records, lst.limit, lst.label_field)
            total = len(records)
        listings[lst.projection_id] = ListingProjection(
            projection_id=lst.projection_id,
            title=lst.title,
            unit=lst.unit,
            total=total,
            items=items,
        )

    return SessionResult(
        dashboard=dashboard.name,
        time_range=time_range,
        generated_at=as_of,
        metrics=metrics,
        time_series=time_series,
        categorical=categorical,
        correlation=correlation,
        listings=listings,
    )
