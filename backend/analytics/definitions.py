"""
analytics/definitions.py
────────────────────────
Declarative building blocks of a dashboard screen.

A :class:`DashboardDefinition` names the sources a screen needs and the
metrics and projections derived from them.  Each metric / projection
lists its ``inputs`` (source ids); its function is called with the parsed
payloads of those sources, in the same order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from sources.models import Source


@dataclass(frozen=True)
class DerivationContext:
    """Per-refresh parameters available to projection builders."""

    time_range: str
    max_points: int = 20


@dataclass(frozen=True)
class MetricDefinition:
    """
    One headline card.

    Attributes:
        metric_id: Key in ``SessionResult.metrics``.
        title:     Card title.
        inputs:    Source ids passed positionally to ``compute``.
        compute:   ``compute(*payloads) -> float``; must be pure.
        baseline:  Fixed reference value for the trend delta.
        fmt:       ``str.format`` pattern for the displayed value.
    """

    metric_id: str
    title: str
    inputs: Tuple[str, ...]
    compute: Callable[..., float]
    baseline: float
    fmt: str = "{:.1f}"


@dataclass(frozen=True)
class TimeSeriesDefinition:
    """
    ``count(*payloads)`` spread over a label profile.

    ``profile=None`` selects the profile of the refresh's time range.
    """

    projection_id: str
    title: str
    inputs: Tuple[str, ...]
    count: Callable[..., int]
    profile: Optional[Tuple[Tuple[str, float], ...]] = None


@dataclass(frozen=True)
class CategoricalDefinition:
    """``build(ctx, *payloads) -> List[CategoryBucket]``."""

    projection_id: str
    title: str
    inputs: Tuple[str, ...]
    build: Callable[..., List[Any]]


@dataclass(frozen=True)
class CorrelationDefinition:
    """``build(ctx, *payloads) -> List[ScatterPoint]``."""

    projection_id: str
    title: str
    x_label: str
    y_label: str
    inputs: Tuple[str, ...]
    build: Callable[..., List[Any]]


@dataclass(frozen=True)
class ListingDefinition:
    """
    The first ``limit`` records of one source, shown as a titled list.

    ``total`` on the projection counts every record, not just the listed ones.
    """

    projection_id: str
    title: str
    inputs: Tuple[str, ...]
    unit: str
    limit: int = 5
    label_field: str = "title"


@dataclass(frozen=True)
class DashboardDefinition:
    """
    A named screen: its sources plus everything derived from them.

    Raises:
        ValueError: If a metric or projection reads a source the dashboard
                    does not declare, or two sources share an id.
    """

    name: str
    title: str
    sources: Tuple[Source, ...]
    metrics: Tuple[MetricDefinition, ...] = ()
    time_series: Tuple[TimeSeriesDefinition, ...] = ()
    categorical: Tuple[CategoricalDefinition, ...] = ()
    correlation: Tuple[CorrelationDefinition, ...] = ()
    listings: Tuple[ListingDefinition, ...] = ()
    description: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        ids = [s.source_id for s in self.sources]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Dashboard '{self.name}' declares duplicate sources: {ids}")
        declared = set(ids)
        for item in (
            *self.metrics,
            *self.time_series,
            *self.categorical,
            *self.correlation,
            *self.listings,
        ):
            unknown = [i for i in item.inputs if i not in declared]
            if unknown:
                ident = getattr(item, "metric_id", None) or getattr(item, "projection_id")
                raise ValueError(
                    f"Dashboard '{self.name}': '{ident}' reads undeclared source(s) {unknown}"
                )
