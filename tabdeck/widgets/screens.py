"""Modal screen widgets for tabdeck."""

from __future__ import annotations

from datetime import datetime

from rich.markup import escape
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import ScrollableContainer, Vertical
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from ..core.tab import Tab

SHORTCUTS_TEXT = """\
                   Keyboard Shortcuts
────────────────────────────────────────────

 TABS ──────────────────────────────────────
  Ctrl+W           Close active tab
  F4               Close all tabs
  Ctrl+PgUp/Dn     Previous/next tab
  Ctrl+O           Reopen last closed tab
  F2               Open tabs list
  F3               Recently closed tabs

 HISTORY ───────────────────────────────────
  Alt+Left         Back
  Alt+Right        Forward

 OTHER ─────────────────────────────────────
  F1               This help
  Ctrl+Q           Quit

           Press F1 or Esc to close\
"""


def _format_millis(millis: int | None) -> str:
    if millis is None:
        return "--:--"
    return datetime.fromtimestamp(millis / 1000).strftime("%H:%M:%S")


class ShortcutOverlay(ModalScreen):
    """Modal overlay showing all keyboard shortcuts."""

    BINDINGS = [
        Binding("escape", "dismiss_overlay", show=False),
        Binding("f1", "dismiss_overlay", show=False),
    ]

    def compose(self) -> ComposeResult:
        with ScrollableContainer(id="shortcut-modal"):
            yield Static(SHORTCUTS_TEXT, id="shortcut-content")

    def action_dismiss_overlay(self) -> None:
        self.app.pop_screen()


class ClosedTabsScreen(ModalScreen[str]):
    """Recently closed tabs, newest first.  Dismisses with the chosen tab id."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("delete", "clear_history", "Clear", show=True),
    ]

    def __init__(self, history: tuple[Tab, ...]) -> None:
        super().__init__()
        self._closed_tabs = history

    def compose(self) -> ComposeResult:
        with Vertical(id="closed-tabs-modal"):
            yield Static(
                "Recently Closed  [dim](Enter reopens, Del clears, Esc closes)[/]",
                id="closed-tabs-title",
            )
            yield OptionList(id="closed-tabs-list")

    def on_mount(self) -> None:
        option_list = self.query_one("#closed-tabs-list", OptionList)
        for tab in self._closed_tabs:
            label = (
                f"{escape(tab.title)}  [dim]{escape(tab.component)} · opened "
                f"{_format_millis(tab.opened_at)} · closed {_format_millis(tab.closed_at)}[/dim]"
            )
            option_list.add_option(Option(label, id=tab.id))
        if self._closed_tabs:
            option_list.highlighted = 0
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is not None:
            self.dismiss(event.option.id)

    def action_clear_history(self) -> None:
        self.app.workspace.clear_closed_history()
        self.query_one("#closed-tabs-list", OptionList).clear_options()
        self._closed_tabs = ()

    def action_cancel(self) -> None:
        self.dismiss("")


class OpenTabsScreen(ModalScreen[str]):
    """List of open tabs in render order.  Dismisses with the chosen tab id."""

    BINDINGS = [
        Binding("escape", "cancel", show=False),
        Binding("f2", "cancel", show=False),
    ]

    def __init__(self, tabs: tuple[Tab, ...], active_id: str | None) -> None:
        super().__init__()
        self._open_tabs = tabs
        self._current_id = active_id

    def compose(self) -> ComposeResult:
        with Vertical(id="open-tabs-modal"):
            yield Static(
                "Open Tabs  [dim](Enter switches, Esc closes)[/]",
                id="open-tabs-title",
            )
            yield OptionList(id="open-tabs-list")

    def on_mount(self) -> None:
        option_list = self.query_one("#open-tabs-list", OptionList)
        highlighted = 0
        for i, tab in enumerate(self._open_tabs):
            marker = "●" if tab.id == self._current_id else " "
            label = f"{marker} {escape(tab.title)}  [dim]{escape(tab.component)}[/dim]"
            option_list.add_option(Option(label, id=tab.id))
            if tab.id == self._current_id:
                highlighted = i
        if self._open_tabs:
            option_list.highlighted = highlighted
        option_list.focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option.id is not None:
            self.dismiss(event.option.id)

    def action_cancel(self) -> None:
        self.dismiss("")
