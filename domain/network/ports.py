"""Domain Port(s) for the network context.

Defines interfaces (Protocols) that collaborators must implement.
No concrete rendering here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from domain.coverage.value_objects import FresnelAnalysis
    from domain.network.entities import Link, Tower


class PlanView(Protocol):
    """Port for the map/view layer that renders the planned network.

    Implementations live with the host UI. Every hook is fire-and-forget:
    the core never reads anything back, so state transitions do not depend
    on what (if anything) gets drawn.
    """

    def add_tower_marker(self, tower: "Tower") -> None: ...

    def update_tower_marker(self, tower: "Tower") -> None: ...

    def remove_tower_marker(self, tower: "Tower") -> None: ...

    def highlight_tower(self, tower: "Tower", selected: bool) -> None: ...

    def add_link_line(self, link: "Link", start: "Tower", end: "Tower") -> None: ...

    def update_link_line(self, link: "Link", start: "Tower", end: "Tower") -> None: ...

    def remove_link_line(self, link: "Link") -> None: ...

    def highlight_link(self, link: "Link", selected: bool) -> None: ...

    def start_temp_link(self, tower: "Tower") -> None: ...

    def clear_temp_link(self) -> None: ...

    def add_fresnel_overlay(self, analysis: "FresnelAnalysis") -> None: ...

    def clear_fresnel_overlay(self) -> None: ...

    def refresh(self) -> None: ...

    def clear_all(self) -> None: ...


class NullPlanView:
    """PlanView with every hook as a no-op.

    Used when no view is attached. Hosts that only draw some things subclass
    it and override just those hooks.
    """

    def add_tower_marker(self, tower: "Tower") -> None:
        pass

    def update_tower_marker(self, tower: "Tower") -> None:
        pass

    def remove_tower_marker(self, tower: "Tower") -> None:
        pass

    def highlight_tower(self, tower: "Tower", selected: bool) -> None:
        pass

    def add_link_line(self, link: "Link", start: "Tower", end: "Tower") -> None:
        pass

    def update_link_line(self, link: "Link", start: "Tower", end: "Tower") -> None:
        pass

    def remove_link_line(self, link: "Link") -> None:
        pass

    def highlight_link(self, link: "Link", selected: bool) -> None:
        pass

    def start_temp_link(self, tower: "Tower") -> None:
        pass

    def clear_temp_link(self) -> None:
        pass

    def add_fresnel_overlay(self, analysis: "FresnelAnalysis") -> None:
        pass

    def clear_fresnel_overlay(self) -> None:
        pass

    def refresh(self) -> None:
        pass

    def clear_all(self) -> None:
        pass


class LinkIndex(Protocol):
    """What TowerRegistry needs from the link side.

    Implemented by LinkRegistry; kept as a port so the tower side never
    imports the link registry.
    """

    def find_between(self, tower_a: "Tower", tower_b: "Tower") -> "Link | None": ...

    def remove_all_touching(self, tower: "Tower") -> int: ...

    def resync_tower(self, tower: "Tower") -> None: ...
