"""
core/preferences.py
───────────────────
Process-wide user preferences persisted to a small JSON file.

The store is created once per process (``functools.lru_cache``) and must
be initialised explicitly with :func:`init_preferences` — the API does
this in its lifespan hook.  Nothing else in the codebase reads or writes
the preferences file.

The aggregation engine only ever *reads* ``time_range``; the selected
theme is kept here for the frontend and has no effect on derivation.

Usage
-----
    from core.preferences import get_preferences

    prefs = get_preferences()
    prefs.time_range            # "7d"
    prefs.set_time_range("30d")
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal, get_args

from core.config import get_settings

logger = logging.getLogger(__name__)

TimeRange = Literal["7d", "30d", "90d"]
Theme = Literal["light", "dark"]

TIME_RANGES: tuple = get_args(TimeRange)
THEMES: tuple = get_args(Theme)

DEFAULT_TIME_RANGE: TimeRange = "7d"
DEFAULT_THEME: Theme = "light"


class PreferenceStore:
    """
    Narrow read/mutate interface over the persisted preferences file.

    Args:
        path: JSON file location.  Parent directories are created on the
              first write, never on read.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._time_range: TimeRange = DEFAULT_TIME_RANGE
        self._theme: Theme = DEFAULT_THEME

    # ── public API ────────────────────────────────────────────────────────

    @property
    def time_range(self) -> TimeRange:
        return self._time_range

    @property
    def theme(self) -> Theme:
        return self._theme

    def load(self) -> None:
        """
        Read persisted values, keeping defaults for anything missing.

        An unreadable or corrupt file is not fatal: defaults are kept and a
        warning is logged.
        """
        if not self._path.exists():
            logger.info("No preferences file at %s — using defaults", self._path)
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable preferences file %s: %s", self._path, exc)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self._path)
            return

        if data.get("time_range") in TIME_RANGES:
            self._time_range = data["time_range"]
        if data.get("theme") in THEMES:
            self._theme = data["theme"]
        logger.info(
            "Loaded preferences (time_range=%s, theme=%s)", self._time_range, self._theme
        )

    def set_time_range(self, value: str) -> None:
        """
        Persist a new selected time range.

        Raises:
            ValueError: If ``value`` is not one of ``7d``, ``30d``, ``90d``.
        """
        if value not in TIME_RANGES:
            raise ValueError(f"Unsupported time range '{value}'. Use one of {TIME_RANGES}.")
        self._time_range = value
        self._save()

    def set_theme(self, value: str) -> None:
        """Persist a new theme (``light`` or ``dark``)."""
        if value not in THEMES:
            raise ValueError(f"Unsupported theme '{value}'. Use one of {THEMES}.")
        self._theme = value
        self._save()

    def as_dict(self) -> dict:
        return {"time_range": self._time_range, "theme": self._theme}

    # ── private helpers ───────────────────────────────────────────────────

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self.as_dict(), indent=2), encoding="utf-8")


@lru_cache(maxsize=1)
def get_preferences() -> PreferenceStore:
    """
    Return the application-wide preference store singleton.

    The store is *not* loaded here; call :func:`init_preferences` once at
    startup so reading the file happens at a well-defined point.
    """
    return PreferenceStore(get_settings().PREFERENCES_PATH)


def init_preferences() -> PreferenceStore:
    """Load persisted preferences into the singleton and return it."""
    store = get_preferences()
    store.load()
    return store
