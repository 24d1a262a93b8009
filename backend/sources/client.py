"""
sources/client.py
─────────────────
Thin async wrapper around ``httpx`` — the ONLY place in the codebase that
calls the remote data sources directly.

All other modules must go through :func:`sources.fanout.fetch_all` or the
aggregation session, not issue HTTP requests themselves.

Failure contract
----------------
:meth:`SourceClient.fetch` never raises for transport or payload problems.
Every problem is folded into a :class:`~sources.models.Failure`:

=====================================  ====================
Problem                                Failure kind
=====================================  ====================
connect error, timeout, protocol error ``unreachable``
non-2xx status                         ``http_error(code)``
body is not JSON                       ``malformed``
parser raised                          ``malformed``
=====================================  ====================

Task cancellation is the single exception that propagates, so a
superseded refresh can be stopped.
"""

import logging
from typing import Optional

import httpx

from sources.models import FailureReason, Failure, FetchOutcome, Source, Success

logger = logging.getLogger(__name__)

USER_AGENT = "Pulseboard/0.3 (analytics dashboard)"


class SourceClient:
    """
    Fetch and parse one :class:`Source` at a time.

    Args:
        http:    Shared ``httpx.AsyncClient``.  When omitted, the client
                 creates (and owns) its own instance.
        timeout: Per-request timeout in seconds for an owned client.

    Example:
        >>> client = SourceClient(timeout=5.0)
        >>> outcome = await client.fetch(POSTS)
        >>> outcome.ok
        True
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    # ── public API ────────────────────────────────────────────────────────

    async def fetch(self, source: Source) -> FetchOutcome:
        """
        Retrieve ``source`` and run its parser.

        Args:
            source: Descriptor of the remote endpoint.

        Returns:
            ``Success(payload)`` with the parsed records, or
            ``Failure(reason)`` — never raises for I/O or parse errors.
        """
        try:
            response = await self._http.get(source.url, params=dict(source.params))
        except httpx.HTTPError as exc:
            logger.warning("Source %s unreachable: %s", source.source_id, exc)
            return Failure(source.source_id, FailureReason.unreachable(str(exc)))

        if not response.is_success:
            logger.warning(
                "Source %s returned HTTP %d", source.source_id, response.status_code
            )
            return Failure(
                source.source_id,
                FailureReason.http_error(response.status_code, response.reason_phrase),
            )

        try:
            raw = response.json()
        except ValueError as exc:
            logger.warning("Source %s returned invalid JSON: %s", source.source_id, exc)
            return Failure(source.source_id, FailureReason.malformed(f"invalid JSON: {exc}"))

        try:
            payload = source.parser(raw)
        except Exception as exc:
            logger.warning(
                "Source %s payload rejected by parser: %r", source.source_id, exc
            )
            return Failure(source.source_id, FailureReason.malformed(repr(exc)))

        logger.debug(
            "Fetched %s (%s records)",
            source.source_id,
            len(payload) if hasattr(payload, "__len__") else "n/a",
        )
        return Success(source.source_id, payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http:
            await self._http.aclose()
