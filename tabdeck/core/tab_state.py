"""Ephemeral per-tab UI state (scroll offsets, unsent form edits, ...)."""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from ..log import logger


class TabStateStore:
    """Side table mapping ``tab_id -> {key -> value}``.

    Values are opaque.  Buckets are created on first write and removed by
    :meth:`purge` / :meth:`purge_all`; which of the two fires when a tab
    closes is decided by the workspace's purge policy, not by the store.
    """

    def __init__(self) -> None:
        self._buckets: dict[str, dict[str, Any]] = {}

    def write(self, tab_id: str, key: str, value: Any) -> None:
        self._buckets.setdefault(tab_id, {})[key] = value

    def write_many(self, tab_id: str, values: Mapping[str, Any]) -> None:
        """Merge *values* into the tab's bucket in one step."""
        bucket = dict(self._buckets.get(tab_id, {}))
        bucket.update(values)
        self._buckets[tab_id] = bucket

    def read(self, tab_id: str) -> dict[str, Any]:
        """Copy of the tab's bucket (empty if the tab has no state)."""
        return dict(self._buckets.get(tab_id, {}))

    def value(self, tab_id: str, key: str, default: Any = None) -> Any:
        return self._buckets.get(tab_id, {}).get(key, default)

    def purge(self, tab_id: str) -> None:
        if self._buckets.pop(tab_id, None) is not None:
            logger.debug("purged tab state for %s", tab_id)

    def purge_all(self) -> None:
        if self._buckets:
            logger.debug("purged tab state for %d tab(s)", len(self._buckets))
        self._buckets.clear()

    @property
    def tab_ids(self) -> list[str]:
        return list(self._buckets)

    def __contains__(self, tab_id: object) -> bool:
        return tab_id in self._buckets

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._buckets))

    def __len__(self) -> int:
        return len(self._buckets)

    def handle(self, tab_id: str) -> TabStateHandle:
        return TabStateHandle(self, tab_id)


class TabStateHandle:
    """A store view bound to one tab id, handed to tab content."""

    def __init__(self, store: TabStateStore, tab_id: str) -> None:
        self._store = store
        self.tab_id = tab_id

    @property
    def state(self) -> dict[str, Any]:
        return self._store.read(self.tab_id)

    def get(self, key: str, default: Any = None) -> Any:
        return self._store.value(self.tab_id, key, default)

    def set(self, key: str, value: Any) -> None:
        self._store.write(self.tab_id, key, value)

    def set_many(self, values: Mapping[str, Any]) -> None:
        self._store.write_many(self.tab_id, values)

    def reset(self) -> None:
        self._store.purge(self.tab_id)
