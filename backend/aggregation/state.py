"""
aggregation/state.py
────────────────────
The four states of an aggregation session.

    Idle ──trigger──▶ Loading ──▶ Ready(result)
                         ▲    └──▶ Failed(reason)
                         └────────── trigger / retry (from Ready or Failed)

Every non-idle state carries the generation number of the refresh that
produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from schemas.results import SessionResult


@dataclass(frozen=True)
class Idle:
    status: str = "idle"


@dataclass(frozen=True)
class Loading:
    generation: int
    status: str = "loading"


@dataclass(frozen=True)
class Ready:
    result: SessionResult
    generation: int
    status: str = "ready"


@dataclass(frozen=True)
class Failed:
    reason: str
    generation: int
    missing_sources: Tuple[str, ...] = ()
    status: str = "failed"


AggregationState = Union[Idle, Loading, Ready, Failed]
