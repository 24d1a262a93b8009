"""
tests/conftest.py
──────────────────
Shared pytest fixtures for the backend test suite.

Fixtures
--------
payloads
    Parsed payloads for every source of the catalogue: 10 posts, 5 users,
    55 comments, 10 albums, a Bitcoin price index, quotes and a weather
    reading.

make_client
    Factory for :class:`StubSourceClient`, a ``SourceClient`` stand-in that
    answers from canned payloads so tests never hit the network.

dashboards
    The real dashboard definitions built from the default settings.

registry / prefs_store
    A session registry on top of a stub client and a preference store in
    ``tmp_path``; injected into the API by ``app_client``.

app_client
    ``httpx.AsyncClient`` wired to the FastAPI app with both dependencies
    overridden.

Usage
-----
    async def test_health(app_client):
        resp = await app_client.get("/")
        assert resp.status_code == 200
"""

import asyncio
from datetime import datetime, timezone
from typing import AsyncGenerator, Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient

from aggregation.registry import SessionRegistry
from analytics.dashboards import build_dashboards
from app.api.dependencies import get_preference_store, get_session_registry
from app.main import app
from core.config import Settings
from core.preferences import PreferenceStore
from sources.catalog import build_catalog
from sources.models import Failure, FailureReason, Source, Success

FIXED_NOW = datetime(2026, 10, 19, 8, 30, tzinfo=timezone.utc)


# ── Stub source client ────────────────────────────────────────────────────────


class StubSourceClient:
    """
    Answer ``fetch`` from canned, already-parsed payloads.

    Args:
        payloads: ``{source_id: payload}`` returned as ``Success``.
        failures: ``{source_id: FailureReason}`` returned as ``Failure``.
        delays:   ``{source_id: seconds}`` slept before answering.

    Any source with neither a payload nor a failure is ``unreachable``.
    Mutate ``payloads`` / ``failures`` between refreshes to simulate a
    recovering source.
    """

    def __init__(
        self,
        payloads: Dict[str, object],
        failures: Optional[Dict[str, FailureReason]] = None,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.payloads = dict(payloads)
        self.failures = dict(failures or {})
        self.delays = dict(delays or {})
        self.calls = []
        self.closed = False

    async def fetch(self, source: Source):
        self.calls.append(source.source_id)
        delay = self.delays.get(source.source_id, 0)
        if delay:
            await asyncio.sleep(delay)
        sid = source.source_id
        if sid in self.failures:
            return Failure(sid, self.failures[sid])
        if sid in self.payloads:
            return Success(sid, self.payloads[sid])
        return Failure(sid, FailureReason.unreachable("no stub payload"))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def make_client():
    """Return the :class:`StubSourceClient` class for custom setups."""
    return StubSourceClient


# ── Sample data ───────────────────────────────────────────────────────────────


@pytest.fixture
def payloads() -> Dict[str, object]:
    """
    Parsed payloads for every catalogue source.

    Post ``i`` belongs to user ``(i - 1) % 5 + 1``, has a body of ``10 * i``
    characters and ``i`` comments.
    """
    posts = [
        {"id": i, "userId": (i - 1) % 5 + 1, "title": f"post {i}", "body": "x" * (10 * i)}
        for i in range(1, 11)
    ]
    users = [
        {"id": 1, "name": "Leanne Graham"},
        {"id": 2, "name": "Ervin Howell"},
        {"id": 3, "name": "Clementine Bauch"},
        {"id": 4, "name": "Patricia Lebsack"},
        {"id": 5, "name": "Chelsey Dietrich"},
    ]
    comments = []
    for post_id in range(1, 11):
        for _ in range(post_id):
            comments.append({"id": len(comments) + 1, "postId": post_id})
    albums = [{"id": i, "userId": (i - 1) % 5 + 1} for i in range(1, 11)]
    return {
        "posts": posts,
        "users": users,
        "comments": comments,
        "albums": albums,
        "crypto": [
            {"code": "USD", "rate": 65000.0},
            {"code": "GBP", "rate": 51000.0},
            {"code": "EUR", "rate": 60000.0},
        ],
        "quotes": [
            {"author": "A", "tags": ["wisdom"], "length": 40},
            {"author": "B", "tags": [], "length": 20},
            {"author": "C", "tags": ["wisdom", "life"], "length": 30},
            {"author": "D", "tags": ["famous-quotes"], "length": 50},
        ],
        "weather": {"city": "London", "temp_c": 16.5},
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def dashboards(settings: Settings):
    return build_dashboards(build_catalog(settings))


# ── Registry and preferences ──────────────────────────────────────────────────


@pytest.fixture
def stub_client(payloads) -> StubSourceClient:
    return StubSourceClient(payloads)


@pytest.fixture
def prefs_store(tmp_path) -> PreferenceStore:
    return PreferenceStore(tmp_path / "preferences.json")


@pytest.fixture
def registry(dashboards, stub_client, prefs_store) -> SessionRegistry:
    return SessionRegistry(
        dashboards,
        stub_client,
        default_time_range=lambda: prefs_store.time_range,
        max_points=5,
        clock=lambda: FIXED_NOW,
    )


# ── Test client ───────────────────────────────────────────────────────────────


@pytest.fixture
async def app_client(
    registry: SessionRegistry, prefs_store: PreferenceStore
) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTPX client with the registry and preference store overridden.

    Startup lifespan is skipped so no real HTTP client or file is touched.
    """
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_preference_store] = lambda: prefs_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()
