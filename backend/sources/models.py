"""
sources/models.py
─────────────────
Source descriptors and per-fetch outcomes.

A :class:`Source` is defined once at import time (see
``sources/catalog.py``) and never mutated.  Every fetch of a source
produces exactly one :data:`FetchOutcome`: either :class:`Success` with
the parsed payload or :class:`Failure` with a classified reason.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Union

# Parser from the decoded JSON body to the typed record collection.
Parser = Callable[[Any], Any]


def passthrough(payload: Any) -> Any:
    """Default parser: keep the decoded JSON as-is."""
    return payload


@dataclass(frozen=True)
class Source:
    """
    Immutable descriptor of one remote data provider.

    Attributes:
        source_id: Stable identifier used as the key in outcome maps.
        url:       Absolute URL fetched with ``GET``.
        params:    Query-string parameters sent with every request.
        parser:    Raw JSON → typed record collection.  Any exception it
                   raises is reported as a ``malformed`` failure.
        required:  When ``True`` a failure of this source aborts the
                   whole refresh; optional sources degrade to neutral data.
    """

    source_id: str
    url: str
    params: Mapping[str, Any] = field(default_factory=dict)
    parser: Parser = passthrough
    required: bool = True


class FailureKind(str, Enum):
    UNREACHABLE = "unreachable"
    HTTP_ERROR = "http_error"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class FailureReason:
    """Why a fetch failed; ``status_code`` is set only for ``http_error``."""

    kind: FailureKind
    detail: str = ""
    status_code: Optional[int] = None

    @classmethod
    def unreachable(cls, detail: str = "") -> "FailureReason":
        return cls(FailureKind.UNREACHABLE, detail)

    @classmethod
    def http_error(cls, status_code: int, detail: str = "") -> "FailureReason":
        return cls(FailureKind.HTTP_ERROR, detail, status_code)

    @classmethod
    def malformed(cls, detail: str = "") -> "FailureReason":
        return cls(FailureKind.MALFORMED, detail)

    def __str__(self) -> str:
        if self.kind is FailureKind.HTTP_ERROR:
            return f"HTTP {self.status_code}"
        return self.kind.value


@dataclass(frozen=True)
class Success:
    source_id: str
    payload: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    source_id: str
    reason: FailureReason

    @property
    def ok(self) -> bool:
        return False


FetchOutcome = Union[Success, Failure]

# source_id → outcome, in the order the sources were declared.
OutcomeMap = Dict[str, FetchOutcome]
