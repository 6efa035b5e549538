"""Single source of truth for the project file format.

Used by:
- src/infrastructure/persistence/project_codec.py (export key order, version
  check, default filename when saving into a directory)
- tests/infrastructure/test_project_codec.py (format checks)

When the format changes, bump FORMAT_VERSION here only.
"""

from __future__ import annotations

from datetime import date

FORMAT_VERSION: str = "1.0"

# Top-level keys, in export order
PROJECT_KEYS: tuple[str, ...] = ("version", "towers", "links")

# Per-entity keys, in export order
TOWER_KEYS: tuple[str, ...] = (
    "id",
    "lat",
    "lng",
    "name",
    "frequency",
    "height",
    "createdAt",
)
LINK_KEYS: tuple[str, ...] = ("id", "fromTowerId", "toTowerId", "frequency")

PROJECT_FILE_SUFFIX: str = ".json"


def default_project_filename(day: date) -> str:
    """Download name for an exported project, e.g. rf-link-plan-2024-05-01.json."""
    return f"rf-link-plan-{day.isoformat()}{PROJECT_FILE_SUFFIX}"
