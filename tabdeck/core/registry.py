"""Tab registry: open tabs, the active tab, and recently closed tabs.

The registry is pure state plus transition rules.  It performs no I/O and
never raises on unknown ids; every operation produces a well-defined next
state.  Listeners registered with :meth:`TabRegistry.subscribe` are called
synchronously after each operation, so a listener always observes the fully
applied transition.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable

from ..constants import MAX_CLOSED_TABS
from ..log import logger
from .tab import Tab, TabDescriptor, coerce_tab, now_millis

RegistryListener = Callable[["TabRegistry"], None]


class TabRegistry:
    """Ordered set of open tabs with a single active tab.

    Invariants:
    - no two open tabs share an ``id``
    - no two open tabs share ``(component, url)``
    - ``closed_tab_history`` is newest-first and never longer than
      ``closed_history_limit``

    ``active_tab_id`` is *not* guaranteed to name an open tab; see
    :meth:`activate`.
    """

    def __init__(
        self,
        *,
        closed_history_limit: int = MAX_CLOSED_TABS,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.closed_history_limit = max(0, closed_history_limit)
        self._clock = clock
        self._tabs: list[Tab] = []
        self._active_tab_id: str | None = None
        self._closed: list[Tab] = []  # newest first
        self._expanded_groups: list[str] = []
        self._listeners: list[RegistryListener] = []

    # -- read-only views ------------------------------------------------------

    @property
    def tabs(self) -> tuple[Tab, ...]:
        """Open tabs in render order."""
        return tuple(self._tabs)

    @property
    def active_tab_id(self) -> str | None:
        return self._active_tab_id

    @property
    def active_tab(self) -> Tab | None:
        """The open tab named by ``active_tab_id``, or None if it dangles."""
        if self._active_tab_id is None:
            return None
        return self.get(self._active_tab_id)

    @property
    def is_dangling(self) -> bool:
        """True when ``active_tab_id`` is set but names no open tab."""
        return self._active_tab_id is not None and self.active_tab is None

    @property
    def closed_tab_history(self) -> tuple[Tab, ...]:
        return tuple(self._closed)

    @property
    def expanded_groups(self) -> tuple[str, ...]:
        return tuple(self._expanded_groups)

    def get(self, tab_id: str) -> Tab | None:
        for tab in self._tabs:
            if tab.id == tab_id:
                return tab
        return None

    def index_of(self, tab_id: str) -> int:
        """Position of *tab_id* in render order, or -1."""
        for i, tab in enumerate(self._tabs):
            if tab.id == tab_id:
                return i
        return -1

    def __len__(self) -> int:
        return len(self._tabs)

    def __contains__(self, tab_id: object) -> bool:
        return any(tab.id == tab_id for tab in self._tabs)

    def snapshot(self) -> dict:
        """Plain-data view for collaborators (camelCase keys)."""
        return {
            "tabs": [tab.to_dict() for tab in self._tabs],
            "activeTabId": self._active_tab_id,
            "closedTabHistory": [tab.to_dict() for tab in self._closed],
            "expandedGroups": list(self._expanded_groups),
        }

    # -- change notification --------------------------------------------------

    def subscribe(self, listener: RegistryListener) -> Callable[[], None]:
        """Call *listener* after every operation.  Returns an unsubscriber."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # -- operations -----------------------------------------------------------

    def _find_existing(self, tab: Tab) -> Tab | None:
        # id first, then the (component, url) pair; call sites rely on either
        by_id = self.get(tab.id)
        if by_id is not None:
            return by_id
        for candidate in self._tabs:
            if candidate.dedup_key == tab.dedup_key:
                return candidate
        return None

    def open_or_activate(self, descriptor: TabDescriptor) -> Tab:
        """Open a tab, or activate the matching one if it is already open.

        A match on ``id`` or on ``(component, url)`` makes this idempotent:
        the existing entry becomes active and nothing else changes.
        """
        tab = coerce_tab(descriptor)
        existing = self._find_existing(tab)
        if existing is not None:
            self._active_tab_id = existing.id
            logger.debug("tab %s already open, activating", existing.id)
            self._notify()
            return existing

        self._closed = [t for t in self._closed if t.id != tab.id]
        opened = replace(tab, opened_at=self._clock())
        self._tabs.append(opened)
        self._active_tab_id = opened.id
        logger.debug("opened tab %s (%s)", opened.id, opened.component)
        self._notify()
        return opened

    def close(self, tab_id: str) -> Tab | None:
        """Close *tab_id*, moving it to the front of closed-tab history.

        Returns the closed snapshot, or None when *tab_id* is not open.  If
        the closed tab was active, the tab to its left becomes active, else
        the first tab, else nothing.
        """
        index = self.index_of(tab_id)
        if index == -1:
            return None

        closed = replace(self._tabs[index], closed_at=self._clock())
        self._closed.insert(0, closed)
        if len(self._closed) > self.closed_history_limit:
            evicted = self._closed[self.closed_history_limit :]
            self._closed = self._closed[: self.closed_history_limit]
            logger.debug(
                "closed-tab history full, evicted %s",
                ", ".join(t.id for t in evicted),
            )

        del self._tabs[index]

        if self._active_tab_id == tab_id:
            if self._tabs:
                neighbor = self._tabs[index - 1] if index - 1 >= 0 else self._tabs[0]
                self._active_tab_id = neighbor.id
            else:
                self._active_tab_id = None

        logger.debug("closed tab %s, active is now %s", tab_id, self._active_tab_id)
        self._notify()
        return closed

    def activate(self, tab_id: str) -> None:
        """Make *tab_id* the active tab.

        Unchecked: *tab_id* need not name an open tab.  The history fallback
        relies on this to activate the reserved dashboard id even when no
        dashboard tab is open; renderers treat a dangling id as "show nothing".
        """
        self._active_tab_id = tab_id
        self._notify()

    def close_all(self) -> None:
        """Drop every open tab.  Closed-tab history is left as is."""
        self._tabs.clear()
        self._active_tab_id = None
        logger.debug("closed all tabs")
        self._notify()

    def clear_closed_history(self) -> None:
        self._closed.clear()
        self._notify()

    def reopen_last_closed(self) -> Tab | None:
        """Reopen the most recently closed tab, if any."""
        if not self._closed:
            return None
        return self.open_or_activate(self._closed[0])

    def reset(self) -> None:
        """Return to the initial empty state (e.g. on logout)."""
        self._tabs.clear()
        self._active_tab_id = None
        self._closed.clear()
        self._expanded_groups.clear()
        logger.debug("registry reset")
        self._notify()

    # -- dashboard groups -----------------------------------------------------

    def is_group_expanded(self, group_id: str) -> bool:
        return group_id in self._expanded_groups

    def toggle_group(self, group_id: str) -> bool:
        """Flip a dashboard group open/closed.  Returns the new state."""
        if group_id in self._expanded_groups:
            self._expanded_groups.remove(group_id)
            expanded = False
        else:
            self._expanded_groups.append(group_id)
            expanded = True
        self._notify()
        return expanded

    def set_expanded_groups(self, group_ids: Iterable[str]) -> None:
        self._expanded_groups = list(dict.fromkeys(group_ids))
        self._notify()

    def clear_expanded_groups(self) -> None:
        self._expanded_groups.clear()
        self._notify()
