"""Network Bounded Context - LinkRegistry.

Owns the link collection, the link selection and the two-click "pending
link" state machine:

    Idle --start_pending(a)--> PendingFrom(a) --complete_pending(b)--> Idle
                                    |
                                    +--cancel_pending / tower deleted--> Idle

Every link is created through TowerRegistry.validate_connection.
"""

from __future__ import annotations

import logging
from typing import Iterator

from domain.geodesy.services import azimuth_deg, distance_km
from domain.network.entities import Link, LinkSummary, PendingLink, Tower
from domain.network.errors import NoPendingLinkError, NotFoundError, ValidationError
from domain.network.ports import NullPlanView, PlanView
from domain.network.towers import TowerRegistry

logger = logging.getLogger(__name__)

STATUS_CONNECTED = "Connected"
STATUS_MISMATCH = "Frequency Mismatch"


def _missing_frequency_reason(tower: Tower | None) -> str:
    name = tower.name if tower is not None else "the tower"
    return f"Please set a valid frequency for {name} before creating a link."


class LinkRegistry:
    """Link collection bound to a TowerRegistry.

    Links store tower ids; endpoints are resolved through the tower registry
    on every read, so a deleted tower can never be reached through a link.
    """

    def __init__(self, towers: TowerRegistry, view: PlanView | None = None) -> None:
        self.towers = towers
        self.view: PlanView = view if view is not None else NullPlanView()
        self._links: list[Link] = []
        self._selected_id: str | None = None
        self._pending: PendingLink | None = None
        towers.bind_links(self)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._links)

    def __iter__(self) -> Iterator[Link]:
        return iter(tuple(self._links))

    @property
    def links(self) -> tuple[Link, ...]:
        return tuple(self._links)

    def get(self, link_id: str) -> Link | None:
        for link in self._links:
            if link.id == link_id:
                return link
        return None

    def resolve(self, link: Link | str | None) -> Link | None:
        if link is None:
            return None
        return self.get(link if isinstance(link, str) else link.id)

    def require(self, link: Link | str) -> Link:
        """Like resolve(), but raise on a miss.

        Raises:
            NotFoundError: If the link is not registered
        """
        target = self.resolve(link)
        if target is None:
            raise NotFoundError("link", link if isinstance(link, str) else link.id)
        return target

    @property
    def selected(self) -> Link | None:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def endpoints(self, link: Link) -> tuple[Tower | None, Tower | None]:
        """Resolve (from, to) towers through the tower registry."""
        return (self.towers.get(link.from_tower_id), self.towers.get(link.to_tower_id))

    def find_between(self, tower_a: Tower, tower_b: Tower) -> Link | None:
        """The link joining the unordered pair, or None."""
        for link in self._links:
            if link.connects(tower_a.id, tower_b.id):
                return link
        return None

    def links_touching(self, tower: Tower) -> list[Link]:
        return [link for link in self._links if link.touches(tower.id)]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def create(
        self,
        from_tower: Tower | str | None,
        to_tower: Tower | str | None,
        link_id: str | None = None,
    ) -> Link:
        """Validate, create, append and select a link.

        Args:
            from_tower: First endpoint; the link copies its frequency
            to_tower: Second endpoint
            link_id: Id to reuse (import path); a fresh one otherwise

        Raises:
            ValidationError: If validate_connection rejects the pair, or
                link_id is already taken
        """
        start = self.towers.resolve(from_tower)
        end = self.towers.resolve(to_tower)

        check = self.towers.validate_connection(start, end)
        if not check.valid:
            raise ValidationError(check.reason or "Invalid link")

        if link_id is not None and self.get(link_id) is not None:
            raise ValidationError(f"Duplicate link id: {link_id}")

        fields = {
            "from_tower_id": start.id,
            "to_tower_id": end.id,
            "frequency_ghz": start.frequency_ghz,
            "distance_km": distance_km(start.point, end.point),
        }
        link = Link(id=link_id, **fields) if link_id is not None else Link(**fields)

        self._links.append(link)
        self.view.add_link_line(link, start, end)
        logger.debug(
            "Created %s: %s -> %s (%.3f km @ %s GHz)",
            link.id,
            start.name,
            end.name,
            link.distance_km,
            link.frequency_ghz,
        )
        self.view.refresh()
        self.select(link)
        return link

    def delete(self, link_id: Link | str) -> bool:
        """Remove a link. Returns False for unknown links."""
        link = self.resolve(link_id)
        if link is None:
            return False

        if self._selected_id == link.id:
            self.deselect()
        self._links.remove(link)
        self.view.remove_link_line(link)
        self.view.refresh()
        return True

    def remove_all_touching(self, tower: Tower) -> int:
        """Delete every link touching `tower` (tower delete cascade).

        A pending link anchored on the tower is cancelled as well.
        """
        doomed = self.links_touching(tower)
        for link in doomed:
            self.delete(link.id)
        if self._pending is not None and self._pending.from_tower_id == tower.id:
            self.cancel_pending()
        return len(doomed)

    def resync_tower(self, tower: Tower) -> None:
        """Refresh frequency and distance of every link touching `tower`."""
        for link in self.links_touching(tower):
            # A dangling endpoint is unreachable while the cascade rule holds
            start = self.towers.require(link.from_tower_id)
            end = self.towers.require(link.to_tower_id)
            link.frequency_ghz = tower.frequency_ghz
            link.distance_km = distance_km(start.point, end.point)
            self.view.update_link_line(link, start, end)
        self.view.refresh()

    def clear(self) -> None:
        """Remove every link and any pending link."""
        self.cancel_pending()
        for link in self._links:
            self.view.remove_link_line(link)
        count = len(self._links)
        self._links = []
        self._selected_id = None
        logger.info("Cleared %d link(s)", count)
        self.view.refresh()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, link: Link | str | None) -> None:
        """Select a link. Re-selecting the current one is a no-op."""
        target = self.resolve(link)
        if target is None:
            return
        if self._selected_id == target.id:
            return
        if self._selected_id is not None:
            self.deselect()

        self._selected_id = target.id
        self.view.highlight_link(target, True)
        self.view.refresh()

    def deselect(self) -> None:
        previous = self.selected
        if previous is None:
            self._selected_id = None
            return
        self.view.highlight_link(previous, False)
        self._selected_id = None
        self.view.refresh()

    # ------------------------------------------------------------------
    # Pending Link State Machine
    # ------------------------------------------------------------------
    @property
    def pending(self) -> PendingLink | None:
        return self._pending

    @property
    def pending_from(self) -> Tower | None:
        if self._pending is None:
            return None
        return self.towers.get(self._pending.from_tower_id)

    def start_pending(self, from_tower: Tower | str | None) -> PendingLink:
        """Pick the first endpoint of a new link.

        An already-active pending link is replaced.

        Raises:
            ValidationError: If the tower has no usable frequency; the tower
                becomes the selected one so the operator can fix it
        """
        tower = self.towers.resolve(from_tower)
        if tower is None or not tower.has_usable_frequency:
            if tower is not None:
                self.towers.select(tower)
            raise ValidationError(_missing_frequency_reason(tower))

        if self._pending is not None:
            logger.debug(
                "Replacing pending link from %s with one from %s",
                self._pending.from_tower_id,
                tower.id,
            )
            self.cancel_pending()

        self._pending = PendingLink(from_tower_id=tower.id)
        self.view.start_temp_link(tower)
        logger.debug("Pending link started from %s", tower.id)
        return self._pending

    def complete_pending(self, to_tower: Tower | str | None) -> Link:
        """Pick the second endpoint and create the link.

        A missing frequency on `to_tower` or picking the first tower again
        keeps the pending link so the operator can retry. A rejection from
        create() clears it.

        Raises:
            NoPendingLinkError: If no pending link is active
            ValidationError: If the link cannot be created
        """
        if self._pending is None:
            raise NoPendingLinkError()

        start = self.pending_from
        if start is None:
            self.cancel_pending()
            raise NoPendingLinkError("Pending link tower no longer exists")

        end = self.towers.resolve(to_tower)
        if end is None or not end.has_usable_frequency:
            if end is not None:
                self.towers.select(end)
            raise ValidationError(_missing_frequency_reason(end))

        if end.id == start.id:
            raise ValidationError("Cannot connect tower to itself")

        try:
            link = self.create(start, end)
        except ValidationError:
            self.cancel_pending()
            raise

        self.cancel_pending()
        return link

    def cancel_pending(self) -> None:
        """Drop the pending link, if any. Idempotent."""
        if self._pending is not None:
            logger.debug("Pending link from %s cleared", self._pending.from_tower_id)
        self._pending = None
        self.view.clear_temp_link()

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------
    def describe(self, link: Link | str) -> LinkSummary | None:
        """Summarize a link for list rows and the info panel."""
        target = self.resolve(link)
        if target is None:
            return None
        start, end = self.endpoints(target)
        if start is None or end is None:
            return None

        status = (
            STATUS_CONNECTED
            if start.has_usable_frequency and start.frequency_ghz == end.frequency_ghz
            else STATUS_MISMATCH
        )
        return LinkSummary(
            link_id=target.id,
            from_name=start.name,
            to_name=end.name,
            distance_km=distance_km(start.point, end.point),
            frequency_ghz=target.frequency_ghz,
            status=status,
            azimuth_deg=azimuth_deg(start.point, end.point),
        )
