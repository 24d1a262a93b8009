"""
sources — Remote data source descriptors, client and fan-out.

Public API
----------
    from sources import Source, SourceClient, fetch_all
"""

from sources.client import SourceClient
from sources.fanout import fetch_all, optional_failures, required_failures
from sources.models import (
    Failure,
    FailureKind,
    FailureReason,
    FetchOutcome,
    OutcomeMap,
    Source,
    Success,
)

__all__ = [
    "Failure",
    "FailureKind",
    "FailureReason",
    "FetchOutcome",
    "OutcomeMap",
    "Source",
    "SourceClient",
    "Success",
    "fetch_all",
    "optional_failures",
    "required_failures",
]
