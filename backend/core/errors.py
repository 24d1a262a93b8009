"""
core/errors.py
──────────────
Exception hierarchy for the aggregation engine.

Transport problems never appear here: the source client reports them as
``Failure`` outcomes.  These exceptions cover what happens *after* the
fan-out — deriving a result, and using the session.
"""

from typing import Sequence


class AggregationError(Exception):
    """Base class for every engine error surfaced to the API layer."""


class DerivationError(AggregationError):
    """Metric derivation could not produce a ``SessionResult``."""


class MissingRequiredSource(DerivationError):
    """One or more required sources failed during the refresh."""

    def __init__(self, source_ids: Sequence[str]) -> None:
        self.source_ids = list(source_ids)
        super().__init__(
            "Required data source(s) unavailable: " + ", ".join(self.source_ids)
        )


class NothingToExport(AggregationError):
    """Export was requested while the session holds no ``Ready`` result."""


class UnknownDashboard(AggregationError):
    """No dashboard is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Dashboard '{name}' not found")
