"""
Pydantic schemas for one aggregation result.

A :class:`SessionResult` is built once per successful refresh and never
patched afterwards.  Models are frozen, sequences are tuples and mappings
are :class:`FrozenDict`, so accidental mutation fails loudly instead of
corrupting the result a session keeps as its last good one.
The same models are used for the HTTP responses and the export artifact,
so field names here are part of the public file format.
"""

from datetime import datetime
from typing import Annotated, Dict, Literal, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict

Trend = Literal["up", "down", "neutral"]


class FrozenDict(dict):
    """``dict`` that rejects every mutation after construction."""

    def _read_only(self, *args, **kwargs):
        raise TypeError(f"{type(self).__name__} is read-only")

    __setitem__ = __delitem__ = __ior__ = _read_only
    clear = pop = popitem = setdefault = update = _read_only

    def __reduce__(self):
        return type(self), (dict(self),)


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class HeadlineMetric(_Frozen):
    """
    One headline card.

    Attributes:
        metric_id: Stable identifier (key in ``SessionResult.metrics``).
        title:     Card title.
        value:     Raw scalar, ``None`` when an optional input was missing.
        display:   Formatted value shown on the card (``"2.0"``, ``"50.00%"``).
        baseline:  Fixed reference value the delta is measured against.
        delta_pct: ``(value - baseline) / baseline * 100``.
        change:    Signed, one-decimal delta string (``"+11.1%"``).
        trend:     ``up`` / ``down`` / ``neutral`` from the rounded delta.
    """

    metric_id: str
    title: str
    value: Optional[float]
    display: str
    baseline: float
    delta_pct: float
    change: str
    trend: Trend


class TimeSeriesPoint(_Frozen):
    label: str
    value: int


class TimeSeriesProjection(_Frozen):
    projection_id: str
    title: str
    points: Tuple[TimeSeriesPoint, ...]


class CategoryBucket(_Frozen):
    name: str
    value: float


class CategoricalProjection(_Frozen):
    """Named buckets in category insertion order; empty when degraded."""

    projection_id: str
    title: str
    buckets: Tuple[CategoryBucket, ...]


class ScatterPoint(_Frozen):
    name: str
    x: float
    y: float


class CorrelationProjection(_Frozen):
    projection_id: str
    title: str
    x_label: str
    y_label: str
    points: Tuple[ScatterPoint, ...]


class ListItem(_Frozen):
    id: int
    title: str


class ListingProjection(_Frozen):
    """
    The first records of a source, plus how many records were loaded.

    ``total`` counts every record of the source, not only ``items``.
    """

    projection_id: str
    title: str
    unit: str
    total: int
    items: Tuple[ListItem, ...]


# Mappings of a result are converted to FrozenDict after validation.
_freeze = AfterValidator(FrozenDict)


class SessionResult(_Frozen):
    """
    Aggregate of one refresh cycle.

    Attributes:
        dashboard:    Dashboard name the result was derived for.
        time_range:   Selected range the refresh ran with (``7d``, ...).
        generated_at: UTC timestamp supplied by the session.
        metrics:      ``metric_id → HeadlineMetric`` in card order.
        time_series:  ``projection_id → TimeSeriesProjection``.
        categorical:  ``projection_id → CategoricalProjection``.
        correlation:  ``projection_id → CorrelationProjection``.
        listings:     ``projection_id → ListingProjection``.
    """

    dashboard: str
    time_range: str
    generated_at: datetime
    metrics: Annotated[Dict[str, HeadlineMetric], _freeze]
    time_series: Annotated[Dict[str, TimeSeriesProjection], _freeze]
    categorical: Annotated[Dict[str, CategoricalProjection], _freeze]
    correlation: Annotated[Dict[str, CorrelationProjection], _freeze]
    listings: Annotated[Dict[str, ListingProjection], _freeze]


class ExportSnapshot(_Frozen):
    """Downloadable artifact: the current result plus its export time."""

    dashboard: str
    exported_at: datetime
    result: SessionResult
