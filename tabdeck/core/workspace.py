"""Workspace facade: registry + ephemeral tab state + history sync."""

from __future__ import annotations

from enum import Enum
from typing import Callable

from ..constants import FALLBACK_TAB_ID, MAX_CLOSED_TABS
from ..log import logger
from .history import HistoryProvider, HistorySynchronizer
from .registry import TabRegistry
from .tab import Tab, TabDescriptor, now_millis
from .tab_state import TabStateHandle, TabStateStore


class PurgePolicy(str, Enum):
    """Which ephemeral state buckets a single-tab close removes."""

    ALL = "all"  # every bucket, on every close (legacy behavior)
    TAB = "tab"  # only the closed tab's bucket


class Workspace:
    """The tab workspace as seen by a host application.

    Mutations go through here so that the purge policy is applied
    consistently.  ``close_all`` and ``reset`` always purge every bucket.
    """

    def __init__(
        self,
        *,
        purge_policy: PurgePolicy = PurgePolicy.ALL,
        closed_history_limit: int = MAX_CLOSED_TABS,
        fallback_tab_id: str = FALLBACK_TAB_ID,
        clock: Callable[[], int] = now_millis,
    ) -> None:
        self.registry = TabRegistry(closed_history_limit=closed_history_limit, clock=clock)
        self.state = TabStateStore()
        self.purge_policy = PurgePolicy(purge_policy)
        self.fallback_tab_id = fallback_tab_id
        self.history: HistorySynchronizer | None = None

    # -- registry passthrough -------------------------------------------------

    @property
    def tabs(self) -> tuple[Tab, ...]:
        return self.registry.tabs

    @property
    def active_tab_id(self) -> str | None:
        return self.registry.active_tab_id

    @property
    def active_tab(self) -> Tab | None:
        return self.registry.active_tab

    @property
    def closed_tab_history(self) -> tuple[Tab, ...]:
        return self.registry.closed_tab_history

    def open_or_activate(self, descriptor: TabDescriptor) -> Tab:
        return self.registry.open_or_activate(descriptor)

    def activate(self, tab_id: str) -> None:
        self.registry.activate(tab_id)

    def close(self, tab_id: str) -> Tab | None:
        """Close *tab_id* and purge ephemeral state per the purge policy.

        State is purged before the registry changes, so registry listeners
        never see state belonging to the closed tab.
        """
        if tab_id not in self.registry:
            return None
        if self.purge_policy is PurgePolicy.ALL:
            self.state.purge_all()
        else:
            self.state.purge(tab_id)
        return self.registry.close(tab_id)

    def close_all(self) -> None:
        self.state.purge_all()
        self.registry.close_all()

    def clear_closed_history(self) -> None:
        self.registry.clear_closed_history()

    def reopen_last_closed(self) -> Tab | None:
        return self.registry.reopen_last_closed()

    def reset(self) -> None:
        """Forget everything: open tabs, closed history, groups, tab state."""
        self.state.purge_all()
        self.registry.reset()

    # -- tab state ------------------------------------------------------------

    def tab_state(self, tab_id: str) -> TabStateHandle:
        return self.state.handle(tab_id)

    # -- history --------------------------------------------------------------

    def attach_history(
        self, provider: HistoryProvider, *, base_path: str | None = None
    ) -> HistorySynchronizer:
        """Start mirroring the active tab into *provider*.

        Call after opening any tabs the initial location should be able to
        re-point at; startup never opens tabs.
        """
        self.detach_history()
        self.history = HistorySynchronizer(
            self.registry,
            provider,
            fallback_tab_id=self.fallback_tab_id,
            base_path=base_path,
        )
        self.history.start()
        logger.debug("history synchronizer attached at %s", provider.read())
        return self.history

    def detach_history(self) -> None:
        if self.history is not None:
            self.history.stop()
            self.history = None
