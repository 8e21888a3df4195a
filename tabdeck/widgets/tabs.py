"""Tab strip widgets for tabdeck."""

from __future__ import annotations

from rich.markup import escape
from textual.containers import Horizontal
from textual.widgets import Static

from ..core.tab import Tab


class TabButton(Static):
    """A clickable tab label in the tab bar."""

    def __init__(self, label: str, tab_id: str, **kwargs) -> None:
        super().__init__(label, **kwargs)
        self.tab_id = tab_id

    def on_click(self) -> None:
        self.app.workspace.activate(self.tab_id)


class TabCloseButton(Static):
    """The small close marker rendered after a closable tab."""

    def __init__(self, tab_id: str, **kwargs) -> None:
        super().__init__("×", **kwargs)
        self.tab_id = tab_id

    def on_click(self, event) -> None:
        event.stop()
        self.app.workspace.close(self.tab_id)


def tab_label(tab: Tab) -> str:
    return f"{tab.menu_icon} {tab.title}" if tab.menu_icon else tab.title


class TabBar(Horizontal):
    """Horizontal tab bar showing the open workspace tabs."""

    def update_tabs(self, tabs: tuple[Tab, ...], active_id: str | None) -> None:
        """Rebuild the tab bar buttons."""
        self.remove_children()
        for tab in tabs:
            cls = "tab-btn tab-active" if tab.id == active_id else "tab-btn tab-inactive"
            self.mount(TabButton(f" {escape(tab_label(tab))} ", tab_id=tab.id, classes=cls))
            if tab.closable:
                self.mount(TabCloseButton(tab.id, classes="tab-close"))
        if not tabs:
            self.add_class("no-tabs")
        else:
            self.remove_class("no-tabs")
