"""Network Bounded Context - TowerRegistry.

Owns the ordered tower collection, the tower selection and the connection
rules every link must pass. Link-side effects (cascade delete, resync) go
through the LinkIndex port bound by LinkRegistry.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterator

from domain.network.entities import (
    DEFAULT_HEIGHT_M,
    ConnectionCheck,
    Tower,
    is_usable_frequency,
)
from domain.network.errors import NotFoundError
from domain.network.ports import LinkIndex, NullPlanView, PlanView

logger = logging.getLogger(__name__)

# update() keyword -> Tower field
_UPDATE_FIELDS = {
    "name": "name",
    "frequency": "frequency_ghz",
    "frequency_ghz": "frequency_ghz",
    "height": "height_m",
    "height_m": "height_m",
    "lat": "latitude",
    "latitude": "latitude",
    "lng": "longitude",
    "longitude": "longitude",
}
_RESYNC_FIELDS = frozenset({"frequency_ghz", "latitude", "longitude"})


# ---------------------------------------------------------------------------
# Input Normalization
# ---------------------------------------------------------------------------
def normalize_frequency(value: Any) -> float | None:
    """Map raw frequency input to a float, or None for "unset".

    Empty string, None, non-numeric text, NaN and inf all mean unset.
    Non-positive numbers are kept; validate_connection rejects them.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        frequency = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(frequency):
        return None
    return frequency


def normalize_height(value: Any, previous: int) -> int:
    """Map raw height input to a positive int, falling back to `previous`.

    Empty string and None keep the previous value silently; anything that
    does not parse to a positive integer keeps it with a warning.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return previous
    try:
        height = int(float(value))
    except (TypeError, ValueError, OverflowError):
        logger.warning("Ignoring unparseable tower height %r", value)
        return previous
    if height <= 0:
        logger.warning("Ignoring non-positive tower height %r", value)
        return previous
    return height


class TowerRegistry:
    """Ordered tower collection with single selection.

    Parameters
    ----------
    view: PlanView | None
        Collaborator notified of marker changes. Defaults to NullPlanView.
    default_height_m: int
        Height given to towers created without one.
    """

    def __init__(
        self, view: PlanView | None = None, default_height_m: int = DEFAULT_HEIGHT_M
    ) -> None:
        self.view: PlanView = view if view is not None else NullPlanView()
        self.default_height_m = default_height_m
        self._towers: list[Tower] = []
        self._selected_id: str | None = None
        self._links: LinkIndex | None = None

    def bind_links(self, links: LinkIndex) -> None:
        """Attach the link side (called by LinkRegistry on construction)."""
        self._links = links

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._towers)

    def __iter__(self) -> Iterator[Tower]:
        return iter(tuple(self._towers))

    @property
    def towers(self) -> tuple[Tower, ...]:
        return tuple(self._towers)

    def get(self, tower_id: str) -> Tower | None:
        for tower in self._towers:
            if tower.id == tower_id:
                return tower
        return None

    def resolve(self, tower: Tower | str | None) -> Tower | None:
        """Return the registered tower for an id or Tower, None if unknown.

        A Tower that has been deleted resolves to None.
        """
        if tower is None:
            return None
        return self.get(tower if isinstance(tower, str) else tower.id)

    def require(self, tower: Tower | str) -> Tower:
        """Like resolve(), but raise on a miss.

        Raises:
            NotFoundError: If the tower is not registered
        """
        target = self.resolve(tower)
        if target is None:
            raise NotFoundError("tower", tower if isinstance(tower, str) else tower.id)
        return target

    @property
    def selected(self) -> Tower | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(
        self,
        lat: float,
        lng: float,
        name: str | None = None,
        frequency: Any = None,
        height: Any = None,
    ) -> Tower:
        """Place a new tower, append it and select it.

        Raises:
            pydantic.ValidationError: If the coordinates are out of range
        """
        tower = Tower(
            latitude=lat,
            longitude=lng,
            name=name or f"Tower {len(self._towers) + 1}",
            frequency_ghz=normalize_frequency(frequency),
            height_m=normalize_height(height, self.default_height_m),
        )
        self._towers.append(tower)
        self.view.add_tower_marker(tower)
        logger.debug("Created %s (%s) at (%.6f, %.6f)", tower.id, tower.name, lat, lng)

        # Auto-select so the operator can set frequency/height immediately
        self.select(tower)
        self.view.refresh()
        return tower

    def restore(self, tower: Tower) -> Tower:
        """Append an already-built tower (import path). Does not select it.

        Raises:
            ValueError: If a tower with the same id is registered
        """
        if self.get(tower.id) is not None:
            raise ValueError(f"Duplicate tower id: {tower.id}")
        self._towers.append(tower)
        self.view.add_tower_marker(tower)
        return tower

    def update(self, tower_id: Tower | str, **changes: Any) -> Tower | None:
        """Merge `changes` into a tower. Returns None for unknown towers.

        Accepted keywords: name, frequency (or frequency_ghz), height (or
        height_m), lat/latitude, lng/longitude. A frequency or position
        change re-syncs every touching link. Selection is left untouched.

        Raises:
            TypeError: On an unknown keyword
            pydantic.ValidationError: If a value is out of range; the tower is
                left unchanged
        """
        tower = self.resolve(tower_id)
        if tower is None:
            logger.debug("Update ignored for unknown tower %r", tower_id)
            return None

        updates: dict[str, Any] = {}
        for key, value in changes.items():
            field = _UPDATE_FIELDS.get(key)
            if field is None:
                raise TypeError(f"update() got an unexpected keyword argument {key!r}")
            if field == "frequency_ghz":
                updates[field] = normalize_frequency(value)
            elif field == "height_m":
                updates[field] = normalize_height(value, tower.height_m)
            elif value is not None:
                updates[field] = value

        # Validate the merged state first so a bad value leaves the tower intact
        merged = Tower.model_validate({**tower.model_dump(), **updates})
        for field in updates:
            setattr(tower, field, getattr(merged, field))

        self.view.update_tower_marker(tower)
        if self._links is not None and _RESYNC_FIELDS.intersection(updates):
            self._links.resync_tower(tower)
        self.view.refresh()
        return tower

    def delete(self, tower_id: Tower | str) -> bool:
        """Delete a tower after removing every link touching it.

        Returns False for unknown towers.
        """
        tower = self.resolve(tower_id)
        if tower is None:
            return False

        # Cascade first: links never outlive their endpoints
        removed = (
            self._links.remove_all_touching(tower) if self._links is not None else 0
        )

        if self._selected_id == tower.id:
            self.deselect()
        self._towers.remove(tower)
        self.view.remove_tower_marker(tower)

        logger.debug("Deleted %s and %d link(s)", tower.id, removed)
        self.view.refresh()
        return True

    def clear(self) -> None:
        """Remove every tower. Links must already be gone."""
        for tower in self._towers:
            self.view.remove_tower_marker(tower)
        count = len(self._towers)
        self._towers = []
        self._selected_id = None
        logger.info("Cleared %d tower(s)", count)
        self.view.refresh()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, tower: Tower | str | None) -> None:
        """Select a tower. Re-selecting the current one is a no-op."""
        target = self.resolve(tower)
        if target is None:
            return
        if self._selected_id == target.id:
            return
        if self._selected_id is not None:
            self.deselect()

        self._selected_id = target.id
        self.view.highlight_tower(target, True)
        self.view.refresh()

    def deselect(self) -> None:
        previous = self.selected
        if previous is None:
            self._selected_id = None
            return
        self.view.highlight_tower(previous, False)
        self._selected_id = None
        self.view.refresh()

    # ------------------------------------------------------------------
    # Connection Rules
    # ------------------------------------------------------------------
    def validate_connection(
        self, tower_a: Tower | None, tower_b: Tower | None
    ) -> ConnectionCheck:
        """Decide whether a link may join two towers.

        This is the single gate in front of every link creation.
        """
        if tower_a is None or tower_b is None:
            return ConnectionCheck.rejected("Invalid towers")
        if tower_a.id == tower_b.id:
            return ConnectionCheck.rejected("Cannot connect tower to itself")

        for tower in (tower_a, tower_b):
            if not is_usable_frequency(tower.frequency_ghz):
                return ConnectionCheck.rejected(
                    f"Please set a valid frequency for {tower.name}"
                )

        if tower_a.frequency_ghz != tower_b.frequency_ghz:
            return ConnectionCheck.rejected(
                f"Frequency mismatch: {tower_a.frequency_ghz} GHz "
                f"vs {tower_b.frequency_ghz} GHz"
            )

        if self._links is not None and self._links.find_between(tower_a, tower_b):
            return ConnectionCheck.rejected("Link already exists between these towers")

        return ConnectionCheck.ok()
