"""
sources/catalog.py
──────────────────
Declarative descriptors for every public data source the dashboards use,
together with the parsers that turn raw JSON into typed record lists.

Which sources are required
--------------------------
The JSONPlaceholder collections (posts, users, comments, albums) feed the
headline metrics and are **required**: a refresh without them is a
failure.  The Bitcoin price index, the quotes feed and the weather reading
only decorate single panels and are **optional**: when they fail the panel
shows neutral data and the rest of the dashboard is unaffected.
"""

from functools import lru_cache
from typing import Any, Dict, List

from core.config import Settings, get_settings
from sources.models import Parser, Source

POSTS = "posts"
USERS = "users"
COMMENTS = "comments"
ALBUMS = "albums"
CRYPTO = "crypto"
QUOTES = "quotes"
WEATHER = "weather"

KELVIN_OFFSET = 273.15


# ── parsers ───────────────────────────────────────────────────────────────────


def record_list(*required_keys: str) -> Parser:
    """
    Build a parser accepting a JSON array of objects that carry ``required_keys``.

    Raises (inside the parser):
        ValueError: Payload is not a list of objects, or a key is missing.
    """

    def parse(payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, list):
            raise ValueError(f"expected a JSON array, got {type(payload).__name__}")
        for i, item in enumerate(payload):
            if not isinstance(item, dict):
                raise ValueError(f"item {i} is not an object")
            missing = [k for k in required_keys if k not in item]
            if missing:
                raise ValueError(f"item {i} is missing {missing}")
        return payload

    return parse


def parse_bitcoin_index(payload: Any) -> List[Dict[str, Any]]:
    """
    ``{"bpi": {"USD": {"code": "USD", "rate_float": 1.0}, ...}}`` →
    ``[{"code": "USD", "rate": 1.0}, ...]`` in payload order.
    """
    bpi = payload["bpi"]
    return [
        {"code": entry.get("code", code), "rate": float(entry["rate_float"])}
        for code, entry in bpi.items()
    ]


def parse_quotes(payload: Any) -> List[Dict[str, Any]]:
    """Quotable pages wrap records in ``results``; bare arrays are accepted too."""
    results = payload["results"] if isinstance(payload, dict) else payload
    if not isinstance(results, list):
        raise ValueError("quotes payload has no result list")
    return [
        {
            "author": q.get("author", ""),
            "tags": list(q.get("tags") or []),
            "length": int(q.get("length", len(q.get("content", "")))),
        }
        for q in results
    ]


def parse_weather(payload: Any) -> Dict[str, Any]:
    """Current-weather body → ``{"city": ..., "temp_c": ...}``."""
    return {
        "city": payload.get("name", ""),
        "temp_c": round(float(payload["main"]["temp"]) - KELVIN_OFFSET, 1),
    }


# ── catalogue ─────────────────────────────────────────────────────────────────


def build_catalog(settings: Settings) -> Dict[str, Source]:
    """
    Create every :class:`Source` from the configured endpoints.

    Args:
        settings: Application settings (base URLs, API keys).

    Returns:
        ``{source_id: Source}``.
    """
    base = settings.JSONPLACEHOLDER_URL
    return {
        POSTS: Source(POSTS, f"{base}/posts", parser=record_list("id", "userId", "title", "body")),
        USERS: Source(USERS, f"{base}/users", parser=record_list("id", "name")),
        COMMENTS: Source(COMMENTS, f"{base}/comments", parser=record_list("id", "postId")),
        ALBUMS: Source(ALBUMS, f"{base}/albums", parser=record_list("id", "userId")),
        CRYPTO: Source(
            CRYPTO, settings.COINDESK_URL, parser=parse_bitcoin_index, required=False
        ),
        QUOTES: Source(
            QUOTES,
            settings.QUOTES_URL,
            params={"limit": 50},
            parser=parse_quotes,
            required=False,
        ),
        WEATHER: Source(
            WEATHER,
            settings.WEATHER_URL,
            params={"q": "London", "appid": settings.WEATHER_API_KEY},
            parser=parse_weather,
            required=False,
        ),
    }


@lru_cache(maxsize=1)
def get_catalog() -> Dict[str, Source]:
    """Return the process-wide source catalogue built from settings."""
    return build_catalog(get_settings())
