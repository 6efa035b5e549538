"""Tests for PlanningSession: delegation, modes, Fresnel handling."""

from __future__ import annotations

import pytest

from application.config import PlannerSettings
from application.session import InteractionMode, PlanningSession
from domain.coverage.errors import InvalidInputError
from domain.geodesy.services import distance_km
from domain.network.entities import Link, PendingLink
from domain.network.errors import NoPendingLinkError, ValidationError
from domain.network.ports import NullPlanView


# ===========================================================================
# Towers
# ===========================================================================
def test_add_tower_uses_default_frequency(session):
    tower = session.add_tower(1.0, 2.0)

    assert tower.frequency_ghz == 5.0
    assert session.towers.selected is tower


def test_add_tower_explicit_unset_frequency(session):
    assert session.add_tower(1.0, 2.0, frequency=None).frequency_ghz is None


def test_settings_drive_new_towers():
    session = PlanningSession(
        PlannerSettings(default_frequency_ghz=None, default_height_m=18)
    )

    tower = session.add_tower(0, 0)

    assert tower.frequency_ghz is None
    assert tower.height_m == 18


def test_session_works_without_view():
    session = PlanningSession()
    a = session.add_tower(12.97, 77.59)
    b = session.add_tower(12.98, 77.60)

    session.start_link(a)
    session.complete_link(b)

    assert isinstance(session.view, NullPlanView)
    assert len(session.links) == 1


def test_update_tower_resyncs_links(session, tower_a, tower_b):
    link = session.links.create(tower_a, tower_b)
    session.select_tower(tower_a)

    session.update_tower(tower_a.id, frequency=5.8)

    assert link.frequency_ghz == 5.8
    assert session.towers.selected is tower_a


def test_update_unknown_tower(session):
    assert session.update_tower("tower_missing", name="x") is None


def test_delete_tower_cascades(session, tower_a, tower_b, tower_c):
    session.links.create(tower_a, tower_b)

    assert session.delete_tower(tower_a) is True
    assert session.links.links_touching(tower_a) == []
    assert len(session.links) == 0
    assert session.delete_tower(tower_a) is False


def test_delete_selected_tower(session, tower_a, tower_b):
    assert session.towers.selected is tower_b

    assert session.delete_selected_tower() is True
    assert session.towers.get(tower_b.id) is None
    assert session.delete_selected_tower() is False


# ===========================================================================
# Links
# ===========================================================================
def test_scenario_two_click_link(session, tower_a, tower_b):
    session.start_link(tower_a)
    link = session.complete_link(tower_b)

    assert session.links.links == (link,)
    assert link.frequency_ghz == 5.0
    assert link.distance_km == pytest.approx(distance_km(tower_a.point, tower_b.point))

    with pytest.raises(NoPendingLinkError):
        session.complete_link(tower_b)


def test_scenario_retry_after_unset_frequency(session, tower_a, tower_b, tower_c):
    session.start_link(tower_a)

    with pytest.raises(ValidationError):
        session.complete_link(tower_c)

    link = session.complete_link(tower_b)
    assert (link.from_tower_id, link.to_tower_id) == (tower_a.id, tower_b.id)


def test_cancel_link(session, tower_a):
    session.start_link(tower_a)
    session.cancel_link()

    assert session.links.pending is None


def test_select_and_delete_link(session, tower_a, tower_b, tower_c):
    session.update_tower(tower_c, frequency=5.0)
    ab = session.links.create(tower_a, tower_b)
    session.links.create(tower_b, tower_c)

    session.select_link(ab.id)
    assert session.links.selected is ab

    assert session.delete_selected_link() is True
    assert session.links.get(ab.id) is None
    assert session.delete_selected_link() is False
    assert session.delete_link("link_missing") is False


def test_describe_link(session, tower_a, tower_b):
    link = session.links.create(tower_a, tower_b)

    assert session.describe_link(link.id).title == "A ↔ B"


# ===========================================================================
# Modes
# ===========================================================================
def test_map_click_adds_tower_only_in_add_tower_mode(session):
    assert session.handle_map_click(1.0, 1.0) is None

    session.set_mode("add-tower")
    tower = session.handle_map_click(1.0, 1.0)

    assert tower is not None
    assert session.towers.towers == (tower,)


def test_tower_clicks_in_add_link_mode(session, tower_a, tower_b):
    session.set_mode(InteractionMode.ADD_LINK)

    first = session.handle_tower_click(tower_a)
    second = session.handle_tower_click(tower_b.id)

    assert isinstance(first, PendingLink)
    assert isinstance(second, Link)
    assert session.links.pending is None


def test_tower_click_in_navigation_mode_only_selects(session, tower_a, tower_b):
    assert session.handle_tower_click(tower_a) is None
    assert session.towers.selected is tower_a
    assert session.links.pending is None


def test_leaving_add_link_mode_cancels_pending(session, tower_a):
    session.set_mode(InteractionMode.ADD_LINK)
    session.start_link(tower_a)

    session.set_mode(InteractionMode.NAVIGATION)

    assert session.links.pending is None


def test_deleting_anchor_tower_without_links_restarts_link_flow(
    session, tower_a, tower_b, recording_view
):
    session.set_mode(InteractionMode.ADD_LINK)
    session.handle_tower_click(tower_a)

    session.delete_tower(tower_a)

    assert session.links.pending is None
    assert recording_view.count("clear_temp_link") == 1
    # Next click starts a fresh link instead of completing a stale one
    assert isinstance(session.handle_tower_click(tower_b), PendingLink)


def test_unknown_mode_rejected(session):
    with pytest.raises(ValueError):
        session.set_mode("fly")


def test_clear_all(session, tower_a, tower_b, recording_view):
    session.links.create(tower_a, tower_b)
    session.set_mode(InteractionMode.ADD_TOWER)

    session.clear_all()

    assert len(session.towers) == 0
    assert len(session.links) == 0
    assert session.mode is InteractionMode.NAVIGATION
    assert "clear_all" in recording_view.names()


# ===========================================================================
# Fresnel
# ===========================================================================
def test_analyze_fresnel(session, tower_a, tower_b):
    link = session.links.create(tower_a, tower_b)

    analysis = session.analyze_fresnel(link)

    assert analysis.frequency_ghz == 5.0
    assert analysis.distance_km == pytest.approx(link.distance_km)
    assert analysis.profile[12].radius_m == pytest.approx(analysis.max_radius_m)


def test_analyze_fresnel_falls_back_to_tower_frequency(session, tower_a, tower_b):
    link = session.links.create(tower_a, tower_b)
    link.frequency_ghz = None

    assert session.analyze_fresnel(link).frequency_ghz == 5.0


def test_analyze_fresnel_unusable_frequency(session, tower_a, tower_b):
    link = session.links.create(tower_a, tower_b)
    # Unsetting the `from` tower leaves neither the link nor the fallback usable
    session.update_tower(tower_a, frequency="")

    with pytest.raises(InvalidInputError, match="Invalid frequency"):
        session.analyze_fresnel(link)


def test_analyze_fresnel_unknown_link(session):
    with pytest.raises(InvalidInputError, match="Invalid link"):
        session.analyze_fresnel("link_missing")


def test_show_fresnel_requires_selection(session):
    with pytest.raises(InvalidInputError, match="Select a link first"):
        session.show_fresnel()


def test_show_fresnel_pushes_overlay(session, tower_a, tower_b, recording_view):
    session.links.create(tower_a, tower_b)

    analysis = session.show_fresnel()

    assert ("add_fresnel_overlay", (analysis,)) in recording_view.calls


def test_show_fresnel_survives_overlay_failure(failing_overlay_session, caplog):
    session = failing_overlay_session

    with caplog.at_level("WARNING", logger="application.session"):
        analysis = session.show_fresnel()

    assert analysis.max_radius_m > 0
    assert "Fresnel overlay failed" in caplog.text


def test_deleting_analyzed_link_clears_overlay(
    session, tower_a, tower_b, recording_view
):
    link = session.links.create(tower_a, tower_b)
    session.show_fresnel()
    before = recording_view.count("clear_fresnel_overlay")

    session.delete_link(link)

    assert recording_view.count("clear_fresnel_overlay") == before + 1


@pytest.fixture
def failing_overlay_session() -> PlanningSession:
    class BrokenOverlayView(NullPlanView):
        def add_fresnel_overlay(self, analysis):
            raise RuntimeError("canvas gone")

    session = PlanningSession(view=BrokenOverlayView())
    a = session.add_tower(12.97, 77.59)
    b = session.add_tower(12.98, 77.60)
    session.links.create(a, b)
    return session
