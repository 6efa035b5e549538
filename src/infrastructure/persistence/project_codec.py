"""Project export/import codec.

Blob layout (see shared/project_format.py):

    {
      "version": "1.0",
      "towers": [{id, lat, lng, name, frequency, height, createdAt}, ...],
      "links":  [{id, fromTowerId, toTowerId, frequency}, ...]
    }

Import lifecycle:
1) Check the top-level shape; a bad shape raises before any state changes
2) Clear links, then towers
3) Restore towers with their original ids (malformed entries skipped)
4) Recreate links through LinkRegistry.create so validation still applies
   (unknown tower ids, malformed entries and rejected links skipped)
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as SchemaError

from domain.network.entities import Link, Tower
from domain.network.errors import ValidationError
from domain.network.links import LinkRegistry
from domain.network.towers import TowerRegistry, normalize_frequency, normalize_height
from infrastructure.persistence.errors import ProjectFormatError
from shared.project_format import (
    FORMAT_VERSION,
    LINK_KEYS,
    PROJECT_KEYS,
    TOWER_KEYS,
    default_project_filename,
)

# Module-level logger (reused across all calls)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Wire Schema
# ---------------------------------------------------------------------------
class TowerRecord(BaseModel):
    """One entry of the "towers" array. Unknown keys are ignored."""

    id: str
    lat: float
    lng: float
    name: str | None = None
    frequency: Any = None
    height: Any = None
    createdAt: datetime | None = None

    model_config = ConfigDict(extra="ignore")


class LinkRecord(BaseModel):
    """One entry of the "links" array. Unknown keys are ignored."""

    id: str
    fromTowerId: str
    toTowerId: str
    frequency: Any = None

    model_config = ConfigDict(extra="ignore")


class ImportReport(BaseModel):
    """Counts from one import (Value Object)."""

    towers_imported: int = 0
    towers_skipped: int = 0
    links_imported: int = 0
    links_skipped: int = 0

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------
def _tower_record(tower: Tower) -> dict[str, Any]:
    values = (
        tower.id,
        tower.latitude,
        tower.longitude,
        tower.name,
        tower.frequency_ghz,
        tower.height_m,
        tower.created_at.isoformat(),
    )
    return dict(zip(TOWER_KEYS, values))


def _link_record(link: Link) -> dict[str, Any]:
    values = (link.id, link.from_tower_id, link.to_tower_id, link.frequency_ghz)
    return dict(zip(LINK_KEYS, values))


def export_project(towers: TowerRegistry, links: LinkRegistry) -> dict[str, Any]:
    """Snapshot both registries as a JSON-compatible blob."""
    values = (
        FORMAT_VERSION,
        [_tower_record(t) for t in towers],
        [_link_record(link) for link in links],
    )
    return dict(zip(PROJECT_KEYS, values))


# ---------------------------------------------------------------------------
# Import
# ---------------------------------------------------------------------------
def _entries(blob: dict[str, Any], key: str) -> list[Any]:
    # Missing or null means empty; any other non-list is not a project
    entries = blob.get(key)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise ProjectFormatError(f'"{key}" must be a list')
    return entries


def _check_shape(blob: Any) -> tuple[list[Any], list[Any]]:
    if not isinstance(blob, dict):
        raise ProjectFormatError(
            f"Project must be a JSON object, got {type(blob).__name__}"
        )
    tower_entries = _entries(blob, "towers")
    link_entries = _entries(blob, "links")

    version = blob.get("version")
    if version is not None and version != FORMAT_VERSION:
        logger.warning(
            "Importing project version %r (expected %s)", version, FORMAT_VERSION
        )
    return tower_entries, link_entries


def _build_tower(entry: Any, default_height_m: int, fallback_name: str) -> Tower:
    record = TowerRecord.model_validate(entry)
    fields: dict[str, Any] = {
        "id": record.id,
        "latitude": record.lat,
        "longitude": record.lng,
        "name": record.name or fallback_name,
        "frequency_ghz": normalize_frequency(record.frequency),
        "height_m": normalize_height(record.height, default_height_m),
    }
    if record.createdAt is not None:
        created = record.createdAt
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        fields["created_at"] = created
    return Tower(**fields)


def import_project(
    blob: Any, towers: TowerRegistry, links: LinkRegistry
) -> ImportReport:
    """Replace both registries with the contents of `blob`.

    Partial success is allowed per entity: a bad tower or link entry is
    skipped with a warning and the rest of the project still loads.

    Raises:
        ProjectFormatError: If the blob's top-level shape is wrong; registries
            are untouched in that case
    """
    tower_entries, link_entries = _check_shape(blob)

    links.clear()
    towers.clear()

    towers_imported = towers_skipped = 0
    for index, entry in enumerate(tower_entries):
        try:
            fallback_name = f"Tower {len(towers) + 1}"
            towers.restore(_build_tower(entry, towers.default_height_m, fallback_name))
        except (SchemaError, ValueError, OverflowError) as e:
            # pydantic's ValidationError is a ValueError; listed for clarity
            logger.warning("Skipping tower entry %d: %s", index, e)
            towers_skipped += 1
            continue
        towers_imported += 1

    links_imported = links_skipped = 0
    for index, entry in enumerate(link_entries):
        try:
            record = LinkRecord.model_validate(entry)
        except SchemaError as e:
            logger.warning("Skipping link entry %d: %s", index, e)
            links_skipped += 1
            continue

        known = (towers.get(record.fromTowerId), towers.get(record.toTowerId))
        if None in known:
            logger.debug(
                "Skipping link %s: references unknown tower (%s -> %s)",
                record.id,
                record.fromTowerId,
                record.toTowerId,
            )
            links_skipped += 1
            continue

        try:
            link = links.create(record.fromTowerId, record.toTowerId, link_id=record.id)
        except ValidationError as e:
            logger.warning("Skipping link %s: %s", record.id, e.reason)
            links_skipped += 1
            continue

        stored = normalize_frequency(record.frequency)
        if stored is not None and stored != link.frequency_ghz:
            logger.debug(
                "Link %s frequency %s re-derived as %s from its towers",
                link.id,
                stored,
                link.frequency_ghz,
            )
        links_imported += 1

    # create() selects each link; an import leaves nothing selected
    links.deselect()

    report = ImportReport(
        towers_imported=towers_imported,
        towers_skipped=towers_skipped,
        links_imported=links_imported,
        links_skipped=links_skipped,
    )
    logger.info(
        "Imported %d tower(s), %d link(s) (skipped %d tower(s), %d link(s))",
        report.towers_imported,
        report.links_imported,
        report.towers_skipped,
        report.links_skipped,
    )
    return report


# ---------------------------------------------------------------------------
# Text and File I/O
# ---------------------------------------------------------------------------
def dumps_project(blob: dict[str, Any]) -> str:
    """Serialize a blob the way exports are written (2-space indent)."""
    return json.dumps(blob, indent=2)


def loads_project(text: str) -> Any:
    """Parse exported text.

    Raises:
        ProjectFormatError: If the text is not valid JSON
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ProjectFormatError(f"Project is not valid JSON: {e}") from e


def write_project_file(file_path: Path | str, blob: dict[str, Any]) -> Path:
    """Write a blob as JSON. A directory gets the dated default filename."""
    path = Path(file_path)
    if path.is_dir():
        path = path / default_project_filename(date.today())
    path.write_text(dumps_project(blob), encoding="utf-8")
    # Log only the filename, not the full path
    logger.info("Wrote project %s", path.name)
    return path


def read_project_file(file_path: Path | str) -> Any:
    """Read and parse a project file.

    Raises:
        FileNotFoundError: If the file does not exist
        ProjectFormatError: If the content is not valid JSON
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(str(path))
    return loads_project(path.read_text(encoding="utf-8"))
