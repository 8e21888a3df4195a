"""Tab content widgets.

Real screens (forms, grids) are mounted by the host application; these are
the stand-ins the terminal host renders for a tab's ``component``.  Each one
keeps its UI state in the ephemeral tab-state store rather than on the
widget, so it survives being unmounted while another tab is active.
"""

from __future__ import annotations

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Input, Static, Tree

from ..constants import SCROLL_STATE_KEY
from ..core.tab import Tab
from ..core.tab_state import TabStateHandle
from ..log import logger
from ..preferences import MenuEntry

DRAFT_STATE_KEY = "draft"
FILLER_ROWS = 60


class TabContent(VerticalScroll):
    """Generic content pane for one tab."""

    def __init__(
        self,
        tab: Tab,
        state: TabStateHandle,
        *,
        restore_scroll: bool = True,
        restore_delay: float = 0.05,
    ) -> None:
        super().__init__(classes="tab-content")
        self.tab = tab
        self.state = state
        self._restore_scroll_enabled = restore_scroll
        self._restore_delay = restore_delay

    def compose(self) -> ComposeResult:
        tab = self.tab
        yield Static(
            f"[b]{escape(tab.title)}[/b]  "
            f"[dim]{escape(tab.component)} · {escape(tab.url or '-')}[/dim]",
            classes="tab-content-header",
        )
        yield Input(
            value=self.state.get(DRAFT_STATE_KEY, ""),
            placeholder="Notes for this screen…",
            classes="tab-draft",
        )
        yield from self.compose_body()

    def compose_body(self) -> ComposeResult:
        for i in range(FILLER_ROWS):
            yield Static(f"{self.tab.component} · row {i + 1}", classes="tab-row")

    def on_mount(self) -> None:
        if self._restore_scroll_enabled and self.state.get(SCROLL_STATE_KEY):
            # Fire-and-forget: layout must settle before the offset is valid
            self.set_timer(self._restore_delay, self._restore_scroll)

    def _restore_scroll(self) -> None:
        try:
            self.scroll_to(y=self.state.get(SCROLL_STATE_KEY, 0), animate=False)
        except Exception:
            logger.debug("scroll restore failed for %s", self.tab.id, exc_info=True)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        if event.value != self.state.get(DRAFT_STATE_KEY, ""):
            self.state.set(DRAFT_STATE_KEY, event.value)

    def save_state(self) -> None:
        """Record the scroll offset before this pane is unmounted."""
        self.state.set(SCROLL_STATE_KEY, self.scroll_y)


class DashboardContent(TabContent):
    """Dashboard pane: the menu grouped into expandable sections.

    Which groups are expanded lives on the registry, so it survives the
    dashboard being closed and reopened.
    """

    def __init__(self, tab: Tab, state: TabStateHandle, menu: list[MenuEntry], **kwargs) -> None:
        super().__init__(tab, state, **kwargs)
        self.menu = menu

    def compose_body(self) -> ComposeResult:
        registry = self.app.workspace.registry
        tree: Tree[str | MenuEntry] = Tree("Menu", classes="dashboard-tree")
        tree.show_root = False
        groups: dict[str, list[MenuEntry]] = {}
        for entry in self.menu:
            if entry.id == self.tab.id:
                continue
            groups.setdefault(entry.group or "general", []).append(entry)
        for group, entries in groups.items():
            node = tree.root.add(group, data=group, expand=registry.is_group_expanded(group))
            for entry in entries:
                node.add_leaf(entry.title, data=entry)
        tree.root.expand()
        yield tree

    def on_tree_node_expanded(self, event: Tree.NodeExpanded) -> None:
        event.stop()
        group = event.node.data
        registry = self.app.workspace.registry
        if isinstance(group, str) and not registry.is_group_expanded(group):
            registry.toggle_group(group)

    def on_tree_node_collapsed(self, event: Tree.NodeCollapsed) -> None:
        event.stop()
        group = event.node.data
        registry = self.app.workspace.registry
        if isinstance(group, str) and registry.is_group_expanded(group):
            registry.toggle_group(group)

    def on_tree_node_selected(self, event: Tree.NodeSelected) -> None:
        event.stop()
        entry = event.node.data
        if isinstance(entry, MenuEntry):
            self.app.workspace.open_or_activate(entry.descriptor())


class EmptyContent(Static):
    """Shown when no tab is active or the active id names no open tab."""

    def __init__(self, active_id: str | None) -> None:
        text = (
            "No tab open. Pick a screen from the menu."
            if active_id is None
            else f"[dim]Nothing to show for '{escape(active_id)}'.[/dim]"
        )
        super().__init__(text, classes="tab-empty")
