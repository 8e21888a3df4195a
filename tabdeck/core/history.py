"""Keep the host navigation history in step with the active tab.

The host's back/forward stack is an external, mutable singleton.  The
:class:`HistorySynchronizer` only talks to it through the narrow
:class:`HistoryProvider` protocol, so the terminal host and the test suite
can both drive it with an in-memory :class:`NavigationStack`.

Two directions:

- outbound: after every registry change, write ``<path>#tab=<id>`` (or the
  bare path) as a non-navigating update, skipping the write when the
  location already matches
- inbound: on each external back/forward event, resolve a tab id and
  ``activate`` it, falling back to the reserved dashboard id
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..constants import FALLBACK_TAB_ID, STATE_TAB_ID_KEY
from ..log import logger
from .location import Location, tab_id_from_fragment
from .registry import TabRegistry


@dataclass(frozen=True)
class NavigationEvent:
    """An externally triggered navigation (back/forward)."""

    location: str
    state: dict[str, Any] | None = None


NavigationListener = Callable[[NavigationEvent], None]


class HistoryProvider(Protocol):
    """Minimal interface onto the host navigation stack."""

    def read(self) -> str: ...

    def write(self, location: Location | str, state: dict[str, Any] | None) -> None:
        """Record *location* without raising a navigation event."""
        ...

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        """Deliver external navigations to *listener*.  Returns an unsubscriber."""
        ...


# ---------------------------------------------------------------------------
# In-memory provider
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HistoryEntry:
    location: str
    state: dict[str, Any] | None = None


class NavigationStack:
    """Session history kept in memory, with browser-like semantics.

    :meth:`write` pushes a new entry (dropping any forward entries) and fires
    nothing.  :meth:`back`, :meth:`forward` and :meth:`go` move the cursor and
    fire exactly one :class:`NavigationEvent` per successful move.
    """

    def __init__(self, initial: Location | str = "/") -> None:
        self._entries: list[HistoryEntry] = [HistoryEntry(str(initial))]
        self._index = 0
        self._listeners: list[NavigationListener] = []

    @property
    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def current(self) -> HistoryEntry:
        return self._entries[self._index]

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def read(self) -> str:
        return self.current.location

    def write(self, location: Location | str, state: dict[str, Any] | None) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append(HistoryEntry(str(location), dict(state) if state else state))
        self._index += 1

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def go(self, delta: int) -> bool:
        """Move *delta* entries; False (and no event) when out of range."""
        target = self._index + delta
        if delta == 0 or not 0 <= target < len(self._entries):
            return False
        self._index = target
        entry = self.current
        event = NavigationEvent(entry.location, dict(entry.state) if entry.state else None)
        for listener in list(self._listeners):
            listener(event)
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)


# ---------------------------------------------------------------------------
# Synchronizer
# ---------------------------------------------------------------------------


class HistorySynchronizer:
    """Adapter between a :class:`TabRegistry` and a :class:`HistoryProvider`.

    Parameters
    ----------
    registry:
        The registry whose active tab is mirrored.
    provider:
        The host navigation stack.
    fallback_tab_id:
        Id activated when a back/forward lands on no open tab.  It is
        activated even if no such tab is open.
    base_path:
        Path written in front of the fragment.  When None, the path of the
        provider's current location is reused.
    """

    def __init__(
        self,
        registry: TabRegistry,
        provider: HistoryProvider,
        *,
        fallback_tab_id: str = FALLBACK_TAB_ID,
        base_path: str | None = None,
    ) -> None:
        self.registry = registry
        self.provider = provider
        self.fallback_tab_id = fallback_tab_id
        self.base_path = base_path
        self._armed = False
        self._unsubscribers: list[Callable[[], None]] = []

    @property
    def started(self) -> bool:
        return self._armed

    # -- lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """One-time startup: restore the active tab from the location, then arm.

        The initial fragment only re-points ``active_tab_id`` at a tab the
        caller already opened; it never opens one.
        """
        if self._armed:
            return
        initial_id = tab_id_from_fragment(self.provider.read())
        if initial_id and initial_id in self.registry:
            logger.debug("restoring active tab %s from location", initial_id)
            self.registry.activate(initial_id)

        self._unsubscribers.append(self.registry.subscribe(self._on_registry_change))
        self._unsubscribers.append(self.provider.subscribe(self.on_navigate))
        self._armed = True
        self.sync()

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._armed = False

    # -- outbound -------------------------------------------------------------

    def target_location(self) -> Location:
        """Location matching the registry's current active tab."""
        path = self.base_path
        if path is None:
            path = Location.parse(self.provider.read()).path
        active = self.registry.active_tab
        return Location.for_tab(path, active.id if active is not None else None)

    def sync(self) -> bool:
        """Write the target location if it differs.  Returns True on write."""
        target = self.target_location()
        if str(target) == self.provider.read():
            return False
        self.provider.write(target, {STATE_TAB_ID_KEY: target.tab_id})
        logger.debug("history write %s", target)
        return True

    def _on_registry_change(self, _registry: TabRegistry) -> None:
        if self._armed:
            self.sync()

    # -- inbound --------------------------------------------------------------

    def resolve(self, event: NavigationEvent) -> str | None:
        """Tab id named by *event*: state payload first, then the fragment."""
        if event.state:
            tab_id = event.state.get(STATE_TAB_ID_KEY)
            if tab_id:
                return str(tab_id)
        return tab_id_from_fragment(event.location)

    def on_navigate(self, event: NavigationEvent) -> None:
        candidate = self.resolve(event)
        if candidate and candidate in self.registry:
            logger.debug("navigation to %s -> activate %s", event.location, candidate)
            self.registry.activate(candidate)
        else:
            logger.debug(
                "navigation to %s names no open tab, falling back to %s",
                event.location,
                self.fallback_tab_id,
            )
            self.registry.activate(self.fallback_tab_id)
