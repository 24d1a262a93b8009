"""
aggregation/export.py
─────────────────────
Serialize an :class:`ExportSnapshot` to the downloadable JSON artifact and
back.

File format
-----------
Pretty-printed JSON with the field names of ``schemas.results`` and
ISO-8601 timestamps::

    {
      "dashboard": "analytics",
      "exported_at": "2026-10-19T08:30:00Z",
      "result": {"dashboard": "analytics", "metrics": {...}, ...}
    }

File names are derived from the dashboard and the export date only, e.g.
``analytics-data-2026-10-19.json``.
"""

import logging
from pathlib import Path

from schemas.results import ExportSnapshot

logger = logging.getLogger(__name__)


def export_filename(snapshot: ExportSnapshot) -> str:
    """``{dashboard}-data-YYYY-MM-DD.json`` from the snapshot's export date."""
    return f"{snapshot.dashboard}-data-{snapshot.exported_at.date().isoformat()}.json"


def serialize_snapshot(snapshot: ExportSnapshot) -> str:
    return snapshot.model_dump_json(indent=2)


def parse_snapshot(text: str) -> ExportSnapshot:
    """
    Parse an exported file back into a snapshot.

    Raises:
        pydantic.ValidationError: The text is not a valid export artifact.
    """
    return ExportSnapshot.model_validate_json(text)


def write_snapshot(snapshot: ExportSnapshot, directory: Path) -> Path:
    """
    Write ``snapshot`` into ``directory`` under its deterministic file name.

    An export from the same dashboard on the same day overwrites the
    previous file.

    Returns:
        Path of the written file.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(snapshot)
    path.write_text(serialize_snapshot(snapshot) + "\n", encoding="utf-8")
    logger.info("Exported %s snapshot to %s", snapshot.dashboard, path)
    return path
