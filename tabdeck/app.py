"""tabdeck terminal host: a Textual app driving the tab workspace."""

from __future__ import annotations

from typing import Callable, Iterable

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from .core.history import NavigationStack
from .core.registry import TabRegistry
from .core.tab import Tab
from .core.workspace import Workspace
from .log import logger
from .preferences import Preferences, load_preferences
from .theme import TEXTUAL_THEMES, resolve_theme
from .widgets import (
    ClosedTabsScreen,
    DashboardContent,
    EmptyContent,
    OpenTabsScreen,
    ShortcutOverlay,
    TabBar,
    TabContent,
)

DASHBOARD_COMPONENT = "Dashboard"


class TabDeckApp(App):
    """Multi-tab workspace with back/forward history."""

    CSS_PATH = "styles.tcss"
    TITLE = "tabdeck"

    BINDINGS = [
        Binding("ctrl+w", "close_tab", "Close", show=True, priority=True),
        Binding("f4", "close_all_tabs", "Close all", show=False),
        Binding("ctrl+pageup", "prev_tab", "Prev tab", show=False),
        Binding("ctrl+pagedown", "next_tab", "Next tab", show=False),
        Binding("ctrl+o", "reopen_tab", "Reopen", show=True),
        Binding("f2", "show_open_tabs", "Tabs", show=True),
        Binding("f3", "show_closed_tabs", "Closed", show=True),
        Binding("alt+left", "history_back", "Back", show=True, priority=True),
        Binding("alt+right", "history_forward", "Forward", show=True, priority=True),
        Binding("f1", "show_shortcuts", "Help", show=False),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        *,
        initial_location: str = "/",
        initial_tabs: Iterable[str] = (),
        prefs: Preferences | None = None,
    ) -> None:
        super().__init__()
        self.prefs = prefs or load_preferences()
        wprefs = self.prefs.workspace
        self.workspace = Workspace(
            purge_policy=wprefs.purge_on_close,
            closed_history_limit=wprefs.closed_history_limit,
            fallback_tab_id=wprefs.fallback_tab_id,
        )
        self.navigation = NavigationStack(initial_location)
        self.initial_tabs = list(initial_tabs)
        self._content_pane: Widget | None = None
        self._shown_tab: tuple[str | None, Tab | None] | None = None
        self._workspace_unsubscribe: Callable[[], None] | None = None

    # ── Layout ──────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Horizontal(id="main-container"):
            with Vertical(id="menu-sidebar"):
                yield Static(" Menu", id="menu-title")
                yield OptionList(
                    *[Option(self._menu_label(e.title, e.icon), id=e.id) for e in self.prefs.menu],
                    id="menu-list",
                )
            with Vertical(id="workspace-area"):
                yield TabBar(id="tab-bar")
                yield Container(id="tab-content")
                with Horizontal(id="status-bar"):
                    yield Static("", id="status-location")
                    yield Static("", id="status-tabs")

    @staticmethod
    def _menu_label(title: str, icon: str | None) -> str:
        label = f"{icon} {title}" if icon else title
        return escape(label)

    def on_mount(self) -> None:
        for theme in TEXTUAL_THEMES.values():
            self.register_theme(theme)
        self.theme = resolve_theme(self.prefs.display.theme).name

        # Tabs named on the command line are opened before history sync
        # starts, so the initial location can re-point at one of them.
        for entry_id in self.initial_tabs:
            entry = self.prefs.menu_entry(entry_id)
            if entry is None:
                logger.debug("no menu entry named %s, not opening", entry_id)
                continue
            self.workspace.open_or_activate(entry.descriptor())

        self.workspace.attach_history(
            self.navigation, base_path=self.prefs.workspace.base_path or None
        )
        # Subscribed after the synchronizer so its location write lands first
        self._workspace_unsubscribe = self.workspace.registry.subscribe(self._on_workspace_change)
        self._render_workspace()
        self.query_one("#menu-list", OptionList).focus()

    def on_unmount(self) -> None:
        if self._workspace_unsubscribe is not None:
            self._workspace_unsubscribe()
            self._workspace_unsubscribe = None
        self.workspace.detach_history()

    # ── Rendering ───────────────────────────────────────────────

    def _on_workspace_change(self, _registry: TabRegistry) -> None:
        self._render_workspace()

    def _render_workspace(self) -> None:
        registry = self.workspace.registry
        self.query_one("#tab-bar", TabBar).update_tabs(registry.tabs, registry.active_tab_id)

        shown = (registry.active_tab_id, registry.active_tab)
        if shown != self._shown_tab:
            self._swap_content(*shown)
            self._shown_tab = shown

        self.query_one("#status-location", Static).update(self.navigation.read())
        self.query_one("#status-tabs", Static).update(
            f"{len(registry)} open · {len(registry.closed_tab_history)} closed "
        )

    def _swap_content(self, active_id: str | None, active: Tab | None) -> None:
        container = self.query_one("#tab-content", Container)
        previous = self._content_pane
        if previous is not None:
            if isinstance(previous, TabContent) and previous.tab.id in self.workspace.registry:
                previous.save_state()
            previous.remove()

        pane: Widget
        if active is None:
            # Dangling or empty: show nothing rather than guess
            pane = EmptyContent(active_id)
        else:
            pane = self._content_for(active)
        container.mount(pane)
        self._content_pane = pane

    def _content_for(self, tab: Tab) -> TabContent:
        display = self.prefs.display
        kwargs = {
            "restore_scroll": display.restore_scroll,
            "restore_delay": display.scroll_restore_delay,
        }
        state = self.workspace.tab_state(tab.id)
        if tab.component == DASHBOARD_COMPONENT:
            return DashboardContent(tab, state, self.prefs.menu, **kwargs)
        return TabContent(tab, state, **kwargs)

    # ── Menu ────────────────────────────────────────────────────

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option_list.id != "menu-list" or event.option.id is None:
            return
        entry = self.prefs.menu_entry(event.option.id)
        if entry is not None:
            self.workspace.open_or_activate(entry.descriptor())

    # ── Actions ─────────────────────────────────────────────────

    def action_close_tab(self) -> None:
        tab = self.workspace.active_tab
        if tab is None:
            return
        if not tab.closable:
            self.notify(f"{escape(tab.title)} can't be closed.", severity="warning")
            return
        self.workspace.close(tab.id)

    def action_close_all_tabs(self) -> None:
        self.workspace.close_all()

    def _step_tab(self, step: int) -> None:
        registry = self.workspace.registry
        tabs = registry.tabs
        if not tabs:
            return
        index = registry.index_of(registry.active_tab_id or "")
        if index == -1:
            self.workspace.activate(tabs[0].id)
            return
        self.workspace.activate(tabs[(index + step) % len(tabs)].id)

    def action_prev_tab(self) -> None:
        self._step_tab(-1)

    def action_next_tab(self) -> None:
        self._step_tab(1)

    def action_reopen_tab(self) -> None:
        if self.workspace.reopen_last_closed() is None:
            self.notify("No recently closed tabs.", severity="warning")

    def action_show_closed_tabs(self) -> None:
        self.push_screen(
            ClosedTabsScreen(self.workspace.closed_tab_history),
            self._on_closed_tab_chosen,
        )

    def _on_closed_tab_chosen(self, tab_id: str | None) -> None:
        if not tab_id:
            return
        for tab in self.workspace.closed_tab_history:
            if tab.id == tab_id:
                self.workspace.open_or_activate(tab)
                return

    def action_show_open_tabs(self) -> None:
        self.push_screen(
            OpenTabsScreen(self.workspace.tabs, self.workspace.active_tab_id),
            self._on_open_tab_chosen,
        )

    def _on_open_tab_chosen(self, tab_id: str | None) -> None:
        if tab_id and tab_id in self.workspace.registry:
            self.workspace.activate(tab_id)

    def action_history_back(self) -> None:
        self.navigation.back()

    def action_history_forward(self) -> None:
        self.navigation.forward()

    def action_show_shortcuts(self) -> None:
        self.push_screen(ShortcutOverlay())


def run_app(
    *,
    initial_location: str = "/",
    initial_tabs: Iterable[str] = (),
    prefs: Preferences | None = None,
) -> None:
    """Run the tabdeck terminal host."""
    app = TabDeckApp(
        initial_location=initial_location,
        initial_tabs=initial_tabs,
        prefs=prefs,
    )
    app.run()
