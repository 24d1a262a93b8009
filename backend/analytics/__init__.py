"""
analytics — Pure metric derivation for the dashboards.

Modules
-------
    analytics.metrics      Headline-card arithmetic (ratios, deltas, trends).
    analytics.projections  Time-series, categorical and correlation builders.
    analytics.definitions  Declarative dashboard / metric / projection types.
    analytics.dashboards   The overview and analytics screens.
    analytics.derivation   ``derive(dashboard, outcomes, ...) -> SessionResult``.
"""
