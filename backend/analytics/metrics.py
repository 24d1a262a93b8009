"""
analytics/metrics.py
────────────────────
Headline-metric arithmetic: ratios, deltas against a fixed baseline,
trend direction and display formatting.

Everything here is pure — the same inputs always give the same card.

Trend rule
----------
The delta is rounded to one decimal (the precision shown on the card)
before choosing the direction, so a card never reads ``+0.0%`` with an
``up`` arrow.
"""

from schemas.results import HeadlineMetric, Trend

NEUTRAL_DISPLAY = "—"


def safe_ratio(numerator: float, denominator: float) -> float:
    """``numerator / denominator``, or ``0.0`` for a zero denominator."""
    if denominator == 0:
        return 0.0
    return float(numerator) / float(denominator)


def delta_pct(value: float, baseline: float) -> float:
    """Percentage change of ``value`` relative to ``baseline`` (0 for a zero baseline)."""
    if baseline == 0:
        return 0.0
    return (float(value) - float(baseline)) / float(baseline) * 100.0


def trend_for(delta: float) -> Trend:
    rounded = round(delta, 1)
    if rounded > 0:
        return "up"
    if rounded < 0:
        return "down"
    return "neutral"


def format_change(delta: float) -> str:
    """Signed one-decimal percentage: ``+11.1%``, ``-2.0%``, ``0.0%``."""
    rounded = round(delta, 1)
    if rounded == 0:
        return "0.0%"
    return f"{rounded:+.1f}%"


def headline(
    metric_id: str,
    title: str,
    value: float,
    baseline: float,
    fmt: str = "{:.1f}",
) -> HeadlineMetric:
    """
    Build a headline card for a computed ``value``.

    Args:
        metric_id: Stable metric identifier.
        title:     Card title.
        value:     Computed scalar.
        baseline:  Fixed reference value for the delta.
        fmt:       ``str.format`` pattern for the displayed value.

    Returns:
        Frozen :class:`HeadlineMetric`.
    """
    delta = delta_pct(value, baseline)
    return HeadlineMetric(
        metric_id=metric_id,
        title=title,
        value=float(value),
        display=fmt.format(value),
        baseline=float(baseline),
        delta_pct=round(delta, 2),
        change=format_change(delta),
        trend=trend_for(delta),
    )


def neutral_headline(metric_id: str, title: str, baseline: float) -> HeadlineMetric:
    """Placeholder card for a metric whose optional inputs are unavailable."""
    return HeadlineMetric(
        metric_id=metric_id,
        title=title,
        value=None,
        display=NEUTRAL_DISPLAY,
        baseline=float(baseline),
        delta_pct=0.0,
        change=format_change(0.0),
        trend="neutral",
    )
