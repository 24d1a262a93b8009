"""
aggregation — Refresh lifecycle, export and presentation view.

Public API
----------
    from aggregation import AggregationSession, SessionRegistry, build_view
"""

from aggregation.registry import SessionRegistry, get_registry
from aggregation.session import AggregationSession
from aggregation.state import AggregationState, Failed, Idle, Loading, Ready
from aggregation.view import build_summary, build_view

__all__ = [
    "AggregationSession",
    "AggregationState",
    "Failed",
    "Idle",
    "Loading",
    "Ready",
    "SessionRegistry",
    "build_summary",
    "build_view",
    "get_registry",
]
