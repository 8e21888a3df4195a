"""Workspace core: tab registry, ephemeral tab state, history sync."""

from .history import (
    HistoryProvider,
    HistorySynchronizer,
    NavigationEvent,
    NavigationStack,
)
from .location import Location, tab_id_from_fragment
from .registry import TabRegistry
from .tab import InvalidTabDescriptor, Tab
from .tab_state import TabStateHandle, TabStateStore
from .workspace import PurgePolicy, Workspace

__all__ = [
    "HistoryProvider",
    "HistorySynchronizer",
    "InvalidTabDescriptor",
    "Location",
    "NavigationEvent",
    "NavigationStack",
    "PurgePolicy",
    "Tab",
    "TabRegistry",
    "TabStateHandle",
    "TabStateStore",
    "Workspace",
    "tab_id_from_fragment",
]
