"""Textual widgets for the tabdeck terminal host."""

from .content import DashboardContent, EmptyContent, TabContent
from .screens import ClosedTabsScreen, OpenTabsScreen, ShortcutOverlay
from .tabs import TabBar, TabButton, TabCloseButton

__all__ = [
    "ClosedTabsScreen",
    "DashboardContent",
    "EmptyContent",
    "OpenTabsScreen",
    "ShortcutOverlay",
    "TabBar",
    "TabButton",
    "TabCloseButton",
    "TabContent",
]
