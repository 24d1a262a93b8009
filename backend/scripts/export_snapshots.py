"""
Refresh every dashboard once and write its export file to EXPORT_DIR.

Usage::

    cd backend
    python scripts/export_snapshots.py            # all dashboards, saved range
    python scripts/export_snapshots.py analytics 30d

An unknown dashboard name or time range is logged and skipped, like a
dashboard whose refresh fails.
"""
import asyncio
import logging
import os
import sys

# Add the parent directory to sys.path so we can import backend modules
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from aggregation.export import write_snapshot
from aggregation.registry import get_registry
from aggregation.state import Ready
from core.config import get_settings
from core.errors import UnknownDashboard
from core.preferences import init_preferences

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def export(registry, directory, names=None, time_range=None):
    """Refresh ``names`` (default: every dashboard) and return the written paths."""
    written = []
    for name in names or [s.dashboard.name for s in registry.sessions()]:
        try:
            session = registry.get(name)
            logger.info(f"Refreshing {name}...")
            state = await session.refresh(time_range)
        except (UnknownDashboard, ValueError) as e:
            logger.error(f"Skipping {name}: {e}")
            continue
        if not isinstance(state, Ready):
            logger.error(f"Skipping {name}: {state.reason}")
            continue
        path = write_snapshot(session.export(), directory)
        logger.info(f"Wrote {path}")
        written.append(path)
    return written


async def main(argv):
    settings = get_settings()
    init_preferences()
    registry = get_registry()
    try:
        written = await export(
            registry,
            settings.EXPORT_DIR,
            argv[:1] or None,
            argv[1] if len(argv) > 1 else None,
        )
    finally:
        await registry.aclose()
        get_registry.cache_clear()
    return 0 if written else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
