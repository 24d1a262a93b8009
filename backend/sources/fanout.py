"""
sources/fanout.py
─────────────────
Concurrent "wait for all, collect all" retrieval of a list of sources.

Every source is independent and valuable on its own, so the fan-out never
stops at the first failure: it waits until every fetch has settled and
returns the full outcome map.  Deciding what a missing source means is
left to the caller (see ``analytics/derivation.py``).
"""

import asyncio
import logging
from typing import Iterable, List, Sequence

from sources.client import SourceClient
from sources.models import Failure, FailureReason, OutcomeMap, Source

logger = logging.getLogger(__name__)


async def fetch_all(client: SourceClient, sources: Sequence[Source]) -> OutcomeMap:
    """
    Fetch every source concurrently and wait for all of them to settle.

    Args:
        client:  Source client shared by all fetches.
        sources: Declarative source list of one dashboard.

    Returns:
        ``{source_id: FetchOutcome}`` in declaration order, one entry per
        source regardless of success or failure.

    Raises:
        ValueError: If two sources share the same ``source_id``.
    """
    ids = [s.source_id for s in sources]
    if len(set(ids)) != len(ids):
        raise ValueError(f"Duplicate source ids in fan-out: {ids}")

    results = await asyncio.gather(
        *(client.fetch(source) for source in sources),
        return_exceptions=True,
    )

    outcomes: OutcomeMap = {}
    for source, result in zip(sources, results):
        if isinstance(result, BaseException):
            # The client contract says this cannot happen; keep the other
            # sources' data anyway.
            logger.error(
                "Unexpected error fetching %s",
                source.source_id,
                exc_info=(type(result), result, result.__traceback__),
            )
            outcomes[source.source_id] = Failure(
                source.source_id, FailureReason.unreachable(repr(result))
            )
        else:
            outcomes[source.source_id] = result

    ok = sum(1 for o in outcomes.values() if o.ok)
    logger.info("Fan-out settled: %d/%d sources succeeded", ok, len(outcomes))
    return outcomes


def _failed(sources: Iterable[Source], outcomes: OutcomeMap, required: bool) -> List[str]:
    return [
        s.source_id
        for s in sources
        if s.required is required
        and (s.source_id not in outcomes or not outcomes[s.source_id].ok)
    ]


def required_failures(sources: Iterable[Source], outcomes: OutcomeMap) -> List[str]:
    """Ids of required sources that failed or are missing from ``outcomes``."""
    return _failed(sources, outcomes, required=True)


def optional_failures(sources: Iterable[Source], outcomes: OutcomeMap) -> List[str]:
    """Ids of optional sources that failed or are missing from ``outcomes``."""
    return _failed(sources, outcomes, required=False)
