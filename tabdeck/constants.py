"""Module-level constants for tabdeck."""

from __future__ import annotations

from pathlib import Path

# Closed-tab history keeps at most this many entries (newest first)
MAX_CLOSED_TABS = 20

# Reserved tab id activated when back/forward lands on an unknown tab
FALLBACK_TAB_ID = "dashboard"

# Location fragment marker: "<path>#tab=<tabId>"
TAB_FRAGMENT_KEY = "tab"

# Key in the navigation state payload that carries the tab id
STATE_TAB_ID_KEY = "tabId"

# Ephemeral tab-state key used by the terminal host for scroll offsets
SCROLL_STATE_KEY = "scroll_y"

TABDECK_HOME = Path.home() / ".tabdeck"
PREFS_PATH = TABDECK_HOME / "preferences.yaml"
