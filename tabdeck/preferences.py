"""User preferences for tabdeck.

Loads workspace, display and menu settings from ~/.tabdeck/preferences.yaml.
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import FALLBACK_TAB_ID, MAX_CLOSED_TABS, PREFS_PATH
from .core.workspace import PurgePolicy
from .log import logger

_DEFAULT_YAML = """\
# tabdeck Preferences
# Delete this file to reset to defaults.

workspace:
  closed_history_limit: 20       # recently closed tabs kept (oldest dropped)
  fallback_tab_id: "dashboard"   # activated when back/forward hits a closed tab
  purge_on_close: all            # all = closing any tab clears every tab's state
                                 # tab = closing a tab clears only its own state
  base_path: ""                  # location path (empty = keep the current path)

display:
  restore_scroll: true           # restore a tab's scroll offset on activation
  scroll_restore_delay: 0.05     # seconds to wait before restoring
  theme: dark                    # dark | light

# Menu entries offered in the sidebar.  Omit to use the built-in menu.
# menu:
#   - id: orders
#     title: Orders
#     component: OrderList
#     url: /orders
#     group: sales
"""


@dataclass
class MenuEntry:
    """One selectable entry in the sidebar menu (a tab-opening request)."""

    id: str
    title: str
    component: str
    url: str | None = None
    group: str = ""
    icon: str | None = None
    closable: bool = True

    def descriptor(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "component": self.component,
            "url": self.url,
            "closable": self.closable,
            "menuIcon": self.icon,
        }


DEFAULT_MENU: tuple[MenuEntry, ...] = (
    MenuEntry(
        FALLBACK_TAB_ID, "Dashboard", "Dashboard", "/dashboard", icon="⌂", closable=False
    ),
    MenuEntry("orders", "Orders", "OrderList", "/orders", group="sales"),
    MenuEntry("order-entry", "Order Entry", "OrderRegistration", "/orders/new", group="sales"),
    MenuEntry("customers", "Customers", "CustomerList", "/customers", group="crm"),
    MenuEntry("segments", "Customer Segments", "CustomerSegmentStatus", "/crm/segments", group="crm"),
    MenuEntry("inventory", "Store Inventory", "StoreInventoryStatus", "/inventory", group="stock"),
    MenuEntry("products", "Products", "ProductRegistration", "/products", group="stock"),
    MenuEntry("users", "Users", "UserManagement", "/admin/users", group="admin"),
)


@dataclass
class WorkspacePreferences:
    """Settings for the tab registry and history sync."""

    closed_history_limit: int = MAX_CLOSED_TABS
    fallback_tab_id: str = FALLBACK_TAB_ID
    purge_on_close: PurgePolicy = PurgePolicy.ALL
    base_path: str = ""  # Empty means reuse the current location's path


@dataclass
class DisplayPreferences:
    """Settings for the terminal host."""

    restore_scroll: bool = True
    scroll_restore_delay: float = 0.05
    theme: str = "dark"


@dataclass
class Preferences:
    """Top-level tabdeck preferences."""

    workspace: WorkspacePreferences = field(default_factory=WorkspacePreferences)
    display: DisplayPreferences = field(default_factory=DisplayPreferences)
    menu: list[MenuEntry] = field(default_factory=lambda: list(DEFAULT_MENU))

    def menu_entry(self, entry_id: str) -> MenuEntry | None:
        for entry in self.menu:
            if entry.id == entry_id:
                return entry
        return None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["workspace"]["purge_on_close"] = self.workspace.purge_on_close.value
        return data


def _parse_menu(items: list) -> list[MenuEntry]:
    entries: list[MenuEntry] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        if not all(item.get(k) for k in ("id", "title", "component")):
            logger.debug("skipping incomplete menu entry %r", item)
            continue
        entries.append(
            MenuEntry(
                id=str(item["id"]),
                title=str(item["title"]),
                component=str(item["component"]),
                url=str(item["url"]) if item.get("url") else None,
                group=str(item.get("group") or ""),
                icon=str(item["icon"]) if item.get("icon") else None,
                closable=bool(item.get("closable", True)),
            )
        )
    return entries


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or PREFS_PATH
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if isinstance(data.get("workspace"), dict):
                wdata = data["workspace"]
                if "closed_history_limit" in wdata:
                    prefs.workspace.closed_history_limit = max(
                        0, int(wdata["closed_history_limit"])
                    )
                if wdata.get("fallback_tab_id"):
                    prefs.workspace.fallback_tab_id = str(wdata["fallback_tab_id"])
                if "purge_on_close" in wdata:
                    prefs.workspace.purge_on_close = PurgePolicy(
                        str(wdata["purge_on_close"]).lower()
                    )
                if "base_path" in wdata:
                    prefs.workspace.base_path = str(wdata["base_path"] or "")
            if isinstance(data.get("display"), dict):
                ddata = data["display"]
                if "restore_scroll" in ddata:
                    prefs.display.restore_scroll = bool(ddata["restore_scroll"])
                if "scroll_restore_delay" in ddata:
                    prefs.display.scroll_restore_delay = float(
                        ddata["scroll_restore_delay"]
                    )
                if ddata.get("theme"):
                    prefs.display.theme = str(ddata["theme"])
            if isinstance(data.get("menu"), list):
                menu = _parse_menu(data["menu"])
                if menu:
                    prefs.menu = menu
        except Exception:
            logger.debug("failed to load preferences from %s", path, exc_info=True)
            return Preferences()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("could not write default preferences to %s", path)

    return prefs
