"""PlanningSession - composition root of the RF link planner.

One session is constructed by the host and handed to every collaborator
(map view, forms, import/export). It wires the two registries together,
tracks the interaction mode and runs Fresnel analyses on demand.

All calls are synchronous and run to completion; there is no background
work to cancel.
"""

from __future__ import annotations

import enum
import logging
from pathlib import Path
from typing import Any

from domain.coverage.errors import InvalidInputError
from domain.coverage.services import analyze
from domain.coverage.value_objects import FresnelAnalysis
from domain.network.entities import Link, LinkSummary, PendingLink, Tower
from domain.network.links import LinkRegistry
from domain.network.ports import NullPlanView, PlanView
from domain.network.towers import TowerRegistry
from infrastructure.persistence.project_codec import (
    ImportReport,
    export_project,
    import_project,
    read_project_file,
    write_project_file,
)

from .config import PlannerSettings

logger = logging.getLogger(__name__)

# add_tower() without a frequency argument uses the configured default
_DEFAULT = object()


class InteractionMode(str, enum.Enum):
    """What a click on the map means."""

    NAVIGATION = "navigation"
    ADD_TOWER = "add-tower"
    ADD_LINK = "add-link"


class PlanningSession:
    """Single-operator planning session.

    Parameters
    ----------
    settings: PlannerSettings | None
        Defaults for new towers and Fresnel sampling.
    view: PlanView | None
        Map/view collaborator. Defaults to NullPlanView, so the session works
        headless.
    """

    def __init__(
        self, settings: PlannerSettings | None = None, view: PlanView | None = None
    ) -> None:
        self.settings = settings if settings is not None else PlannerSettings()
        self.view: PlanView = view if view is not None else NullPlanView()
        self.towers = TowerRegistry(self.view, self.settings.default_height_m)
        self.links = LinkRegistry(self.towers, self.view)
        self.mode = InteractionMode.NAVIGATION
        self._fresnel_link_id: str | None = None

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------
    def set_mode(self, mode: InteractionMode | str) -> None:
        """Switch interaction mode. Leaving ADD_LINK drops any pending link."""
        self.mode = InteractionMode(mode)
        if self.mode is not InteractionMode.ADD_LINK:
            self.links.cancel_pending()
        logger.debug("Mode set to %s", self.mode.value)
        self.view.refresh()

    def handle_map_click(self, lat: float, lng: float) -> Tower | None:
        """Place a tower when in ADD_TOWER mode; otherwise ignore the click."""
        if self.mode is InteractionMode.ADD_TOWER:
            return self.add_tower(lat, lng)
        return None

    def handle_tower_click(self, tower: Tower | str) -> PendingLink | Link | None:
        """Select the tower; in ADD_LINK mode also start or finish a link.

        Raises:
            ValidationError: If the link step is rejected (see LinkRegistry)
        """
        self.select_tower(tower)
        if self.mode is not InteractionMode.ADD_LINK:
            return None
        if self.links.pending is None:
            return self.start_link(tower)
        return self.complete_link(tower)

    # ------------------------------------------------------------------
    # Towers
    # ------------------------------------------------------------------
    def add_tower(
        self,
        lat: float,
        lng: float,
        name: str | None = None,
        frequency: Any = _DEFAULT,
        height: Any = None,
    ) -> Tower:
        if frequency is _DEFAULT:
            frequency = self.settings.default_frequency_ghz
        return self.towers.create(
            lat, lng, name=name, frequency=frequency, height=height
        )

    def select_tower(self, tower: Tower | str | None) -> None:
        self.towers.select(tower)

    def update_tower(self, tower: Tower | str, **changes: Any) -> Tower | None:
        """Edit a tower; touching links re-sync through the registry binding."""
        return self.towers.update(tower, **changes)

    def delete_tower(self, tower: Tower | str) -> bool:
        deleted = self.towers.delete(tower)
        if deleted:
            self._drop_stale_fresnel()
        return deleted

    def delete_selected_tower(self) -> bool:
        selected = self.towers.selected
        if selected is None:
            return False
        return self.delete_tower(selected)

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------
    def start_link(self, tower: Tower | str) -> PendingLink:
        return self.links.start_pending(tower)

    def complete_link(self, tower: Tower | str) -> Link:
        return self.links.complete_pending(tower)

    def cancel_link(self) -> None:
        self.links.cancel_pending()

    def select_link(self, link: Link | str | None) -> None:
        self.links.select(link)

    def delete_link(self, link: Link | str) -> bool:
        deleted = self.links.delete(link)
        if deleted:
            self._drop_stale_fresnel()
        return deleted

    def delete_selected_link(self) -> bool:
        selected = self.links.selected
        if selected is None:
            return False
        return self.delete_link(selected)

    def describe_link(self, link: Link | str) -> LinkSummary | None:
        return self.links.describe(link)

    # ------------------------------------------------------------------
    # Fresnel
    # ------------------------------------------------------------------
    def analyze_fresnel(self, link: Link | str | None) -> FresnelAnalysis:
        """Analyze the first Fresnel zone of a link.

        Uses the link's frequency, falling back to its `from` tower's.

        Raises:
            InvalidInputError: If the link or an endpoint is missing, or no
                usable frequency is available
        """
        target = self.links.resolve(link)
        if target is None:
            raise InvalidInputError("Invalid link for Fresnel analysis")

        start, end = self.links.endpoints(target)
        frequency = target.frequency_ghz
        if frequency is None and start is not None:
            frequency = start.frequency_ghz

        return analyze(
            start.point if start is not None else None,
            end.point if end is not None else None,
            frequency,
            samples=self.settings.fresnel_samples,
        )

    def show_fresnel(self) -> FresnelAnalysis:
        """Analyze the selected link and hand the result to the view overlay.

        Overlay failures are logged; the analysis is still returned.

        Raises:
            InvalidInputError: If no link is selected or the analysis fails
        """
        link = self.links.selected
        if link is None:
            raise InvalidInputError("Select a link first to analyze Fresnel zone.")

        analysis = self.analyze_fresnel(link)
        self._fresnel_link_id = link.id
        try:
            self.view.clear_fresnel_overlay()
            self.view.add_fresnel_overlay(analysis)
        except Exception:
            logger.warning("Fresnel overlay failed for %s", link.id, exc_info=True)
        return analysis

    def hide_fresnel(self) -> None:
        self._fresnel_link_id = None
        try:
            self.view.clear_fresnel_overlay()
        except Exception:
            logger.warning("Clearing Fresnel overlay failed", exc_info=True)

    def _drop_stale_fresnel(self) -> None:
        if self._fresnel_link_id is None:
            return
        if self.links.get(self._fresnel_link_id) is None:
            self.hide_fresnel()

    # ------------------------------------------------------------------
    # Whole-project Operations
    # ------------------------------------------------------------------
    def clear_all(self) -> None:
        """Remove every link and tower and return to navigation mode."""
        self.hide_fresnel()
        self.links.clear()
        self.towers.clear()
        self.view.clear_all()
        self.set_mode(InteractionMode.NAVIGATION)

    def export_state(self) -> dict[str, Any]:
        return export_project(self.towers, self.links)

    def import_state(self, blob: Any) -> ImportReport:
        """Replace the whole project with `blob`.

        Raises:
            ProjectFormatError: If the blob is not a project (state untouched)
        """
        report = import_project(blob, self.towers, self.links)
        self.hide_fresnel()
        return report

    def save_project(self, file_path: Path | str) -> Path:
        return write_project_file(file_path, self.export_state())

    def load_project(self, file_path: Path | str) -> ImportReport:
        return self.import_state(read_project_file(file_path))
