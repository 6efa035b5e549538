"""Root pytest configuration for all tests.

Import roots come from pyproject.toml (pythonpath = ["src", "."]), so tests
import domain.*, shared.*, application.* and infrastructure.* directly.

Shared fixtures:
- recording_view: PlanView that records every hook call
- session: PlanningSession wired to recording_view
- tower_a / tower_b: 5.0 GHz towers about 1.5 km apart (Bangalore)
- tower_c: tower with the frequency unset
"""

from __future__ import annotations

from typing import Any

import pytest

from application.session import PlanningSession
from domain.network.entities import Tower
from domain.network.ports import NullPlanView


class RecordingView(NullPlanView):
    """PlanView that records (hook_name, args) for every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, hook: str, *args: Any) -> None:
        self.calls.append((hook, args))

    def add_tower_marker(self, tower):
        self._record("add_tower_marker", tower)

    def update_tower_marker(self, tower):
        self._record("update_tower_marker", tower)

    def remove_tower_marker(self, tower):
        self._record("remove_tower_marker", tower)

    def highlight_tower(self, tower, selected):
        self._record("highlight_tower", tower, selected)

    def add_link_line(self, link, start, end):
        self._record("add_link_line", link, start, end)

    def update_link_line(self, link, start, end):
        self._record("update_link_line", link, start, end)

    def remove_link_line(self, link):
        self._record("remove_link_line", link)

    def highlight_link(self, link, selected):
        self._record("highlight_link", link, selected)

    def start_temp_link(self, tower):
        self._record("start_temp_link", tower)

    def clear_temp_link(self):
        self._record("clear_temp_link")

    def add_fresnel_overlay(self, analysis):
        self._record("add_fresnel_overlay", analysis)

    def clear_fresnel_overlay(self):
        self._record("clear_fresnel_overlay")

    def refresh(self):
        self._record("refresh")

    def clear_all(self):
        self._record("clear_all")

    def names(self) -> list[str]:
        return [hook for hook, _ in self.calls]

    def count(self, hook: str) -> int:
        return sum(1 for name, _ in self.calls if name == hook)


@pytest.fixture
def recording_view() -> RecordingView:
    return RecordingView()


@pytest.fixture
def session(recording_view: RecordingView) -> PlanningSession:
    return PlanningSession(view=recording_view)


@pytest.fixture
def tower_a(session: PlanningSession) -> Tower:
    return session.add_tower(12.97, 77.59, name="A", frequency=5.0)


@pytest.fixture
def tower_b(session: PlanningSession) -> Tower:
    return session.add_tower(12.98, 77.60, name="B", frequency=5.0)


@pytest.fixture
def tower_c(session: PlanningSession) -> Tower:
    return session.add_tower(12.99, 77.61, name="C", frequency=None)
