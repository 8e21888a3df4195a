"""Tests for tabdeck.core.history.

NavigationStack is exercised on its own first; the synchronizer tests
then drive a registry and a stack together the way the terminal host does.
"""

from __future__ import annotations

import pytest

from tabdeck.core import (
    HistorySynchronizer,
    NavigationEvent,
    NavigationStack,
    TabRegistry,
)


class RecordingStack(NavigationStack):
    """NavigationStack that remembers every write it receives."""

    def __init__(self, initial: str = "/app") -> None:
        super().__init__(initial)
        self.writes: list[tuple[str, dict | None]] = []

    def write(self, location, state):
        self.writes.append((str(location), state))
        super().write(location, state)


@pytest.fixture
def stack() -> RecordingStack:
    return RecordingStack("/app")


def _sync(registry: TabRegistry, provider, **kwargs) -> HistorySynchronizer:
    synchronizer = HistorySynchronizer(registry, provider, **kwargs)
    synchronizer.start()
    return synchronizer


# ── NavigationStack ─────────────────────────────────────────────


class TestNavigationStack:
    def test_initial_entry(self, nav: NavigationStack):
        assert nav.read() == "/app"
        assert nav.index == 0
        assert not nav.can_go_back
        assert not nav.can_go_forward

    def test_write_pushes_without_event(self, nav: NavigationStack):
        events: list[NavigationEvent] = []
        nav.subscribe(events.append)
        nav.write("/app#tab=a", {"tabId": "a"})
        assert nav.read() == "/app#tab=a"
        assert nav.current.state == {"tabId": "a"}
        assert events == []

    def test_back_and_forward_fire_one_event_each(self, nav: NavigationStack):
        events: list[NavigationEvent] = []
        nav.subscribe(events.append)
        nav.write("/app#tab=a", {"tabId": "a"})
        nav.write("/app#tab=b", {"tabId": "b"})
        assert nav.back() is True
        assert nav.forward() is True
        assert [e.location for e in events] == ["/app#tab=a", "/app#tab=b"]
        assert events[0].state == {"tabId": "a"}

    def test_out_of_range_moves_are_ignored(self, nav: NavigationStack):
        events: list[NavigationEvent] = []
        nav.subscribe(events.append)
        assert nav.back() is False
        assert nav.forward() is False
        assert nav.go(0) is False
        assert events == []

    def test_write_drops_forward_entries(self, nav: NavigationStack):
        nav.write("/app#tab=a", None)
        nav.write("/app#tab=b", None)
        nav.back()
        nav.write("/app#tab=c", None)
        assert [e.location for e in nav.entries] == ["/app", "/app#tab=a", "/app#tab=c"]
        assert not nav.can_go_forward

    def test_go_multiple(self, nav: NavigationStack):
        for name in ("a", "b", "c"):
            nav.write(f"/app#tab={name}", None)
        assert nav.go(-3) is True
        assert nav.read() == "/app"
        assert nav.go(-1) is False

    def test_unsubscribe(self, nav: NavigationStack):
        events: list[NavigationEvent] = []
        unsubscribe = nav.subscribe(events.append)
        nav.write("/app#tab=a", None)
        unsubscribe()
        nav.back()
        assert events == []

    def test_state_is_copied(self, nav: NavigationStack):
        state = {"tabId": "a"}
        nav.write("/app#tab=a", state)
        state["tabId"] = "mutated"
        assert nav.current.state == {"tabId": "a"}


# ── Startup ─────────────────────────────────────────────────────


class TestStartup:
    def test_initial_fragment_restores_open_tab(self, registry: TabRegistry, tab):
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        stack = RecordingStack("/app#tab=a")
        _sync(registry, stack)
        assert registry.active_tab_id == "a"
        assert stack.writes == []

    def test_initial_fragment_never_opens(self, registry: TabRegistry):
        stack = RecordingStack("/app#tab=ghost")
        _sync(registry, stack)
        assert len(registry) == 0
        assert registry.active_tab_id is None
        # nothing active: the bare path replaces the stale fragment
        assert stack.writes == [("/app", {"tabId": None})]

    def test_initial_fragment_for_unopened_tab_keeps_active(self, registry: TabRegistry, tab):
        registry.open_or_activate(tab("a"))
        stack = RecordingStack("/app#tab=ghost")
        _sync(registry, stack)
        assert registry.active_tab_id == "a"
        assert stack.read() == "/app#tab=a"

    def test_start_writes_current_active(self, registry: TabRegistry, stack: RecordingStack, tab):
        registry.open_or_activate(tab("a"))
        _sync(registry, stack)
        assert stack.writes == [("/app#tab=a", {"tabId": "a"})]

    def test_start_twice_is_harmless(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = _sync(registry, stack)
        synchronizer.start()
        registry.open_or_activate(tab("a"))
        assert stack.writes == [("/app#tab=a", {"tabId": "a"})]

    def test_not_armed_before_start(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = HistorySynchronizer(registry, stack)
        registry.open_or_activate(tab("a"))
        assert not synchronizer.started
        assert stack.writes == []


# ── Outbound ────────────────────────────────────────────────────


class TestOutbound:
    def test_each_activation_writes_once(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        registry.activate("a")
        assert [w[0] for w in stack.writes] == [
            "/app#tab=a",
            "/app#tab=b",
            "/app#tab=a",
        ]

    def test_no_write_when_location_unchanged(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("a"))
        registry.toggle_group("sales")
        assert len(stack.writes) == 1

    def test_state_payload_names_tab(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("orders"))
        assert stack.current.state == {"tabId": "orders"}

    def test_closing_last_tab_writes_bare_path(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.close("a")
        assert stack.read() == "/app"

    def test_dangling_active_writes_bare_path(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.activate("dashboard")
        assert stack.read() == "/app"

    def test_base_path_override(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack, base_path="/workspace")
        registry.open_or_activate(tab("a"))
        assert stack.read() == "/workspace#tab=a"

    def test_path_follows_current_location(self, registry: TabRegistry, tab):
        stack = RecordingStack("/deep/path#other=1")
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        assert stack.read() == "/deep/path#tab=a"


# ── Inbound ─────────────────────────────────────────────────────


class TestInbound:
    def test_back_activates_previous_tab(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        stack.back()
        assert registry.active_tab_id == "a"

    def test_round_trip_does_not_push(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        writes_before = len(stack.writes)
        stack.back()
        stack.forward()
        assert registry.active_tab_id == "b"
        assert len(stack.writes) == writes_before
        assert stack.can_go_back

    def test_back_to_bare_path_falls_back_to_dashboard_id(
        self, registry: TabRegistry, stack: RecordingStack, tab
    ):
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        stack.back()
        assert stack.read() == "/app"
        assert registry.active_tab_id == "dashboard"
        assert registry.is_dangling

    def test_fallback_activates_open_dashboard(self, registry: TabRegistry, stack: RecordingStack, tab):
        registry.open_or_activate(tab("dashboard", component="Dashboard"))
        _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.close("a")
        # /app#tab=dashboard, /app#tab=a, /app#tab=dashboard
        stack.back()
        assert registry.active_tab_id == "dashboard"
        assert not registry.is_dangling
        assert stack.read() == "/app#tab=dashboard"

    def test_back_to_closed_tab_falls_back(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack)
        registry.open_or_activate(tab("x"))
        registry.open_or_activate(tab("y"))
        registry.close("y")
        # entries: /app, #tab=x, #tab=y, #tab=x; back lands on #tab=y
        stack.back()
        # y is gone: the dangling fallback rewrites the bare path
        assert stack.read() == "/app"
        assert registry.active_tab_id == "dashboard"
        assert "y" not in registry

    def test_custom_fallback(self, registry: TabRegistry, stack: RecordingStack, tab):
        _sync(registry, stack, fallback_tab_id="home")
        registry.open_or_activate(tab("a"))
        stack.back()
        assert registry.active_tab_id == "home"

    def test_state_payload_wins_over_fragment(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        synchronizer.on_navigate(NavigationEvent("/app#tab=b", {"tabId": "a"}))
        assert registry.active_tab_id == "a"

    def test_fragment_used_without_state(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        synchronizer.on_navigate(NavigationEvent("/app#tab=a"))
        assert registry.active_tab_id == "a"

    def test_empty_state_tab_id_uses_fragment(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        synchronizer.on_navigate(NavigationEvent("/app#tab=a", {"tabId": ""}))
        assert registry.active_tab_id == "a"

    def test_resolve(self, registry: TabRegistry, stack: RecordingStack):
        synchronizer = HistorySynchronizer(registry, stack)
        assert synchronizer.resolve(NavigationEvent("/app#tab=x")) == "x"
        assert synchronizer.resolve(NavigationEvent("/app", {"tabId": "y"})) == "y"
        assert synchronizer.resolve(NavigationEvent("/app")) is None
        assert synchronizer.resolve(NavigationEvent("/app#other=1")) is None


# ── Stop ────────────────────────────────────────────────────────


class TestStop:
    def test_stop_disarms_both_directions(self, registry: TabRegistry, stack: RecordingStack, tab):
        synchronizer = _sync(registry, stack)
        registry.open_or_activate(tab("a"))
        registry.open_or_activate(tab("b"))
        synchronizer.stop()
        writes_before = len(stack.writes)
        registry.activate("a")
        stack.back()
        assert len(stack.writes) == writes_before
        assert registry.active_tab_id == "a"
        assert not synchronizer.started
