"""Textual themes for tabdeck, selected by ``display.theme`` in preferences.

The active tab is drawn with ``$primary``; sidebar, tab strip and status bar
sit on ``$surface``.
"""

from textual.theme import Theme

from .log import logger

TEXTUAL_THEMES: dict[str, Theme] = {
    "dark": Theme(
        name="tabdeck-dark",
        primary="#3b8eea",
        secondary="#7aa874",
        accent="#2d3b4e",
        background="#0f1419",
        surface="#1a2028",
        panel="#3a4452",
        success="#7aa874",
        warning="#d7a94b",
        error="#e0605a",
        dark=True,
    ),
    "light": Theme(
        name="tabdeck-light",
        primary="#1f6fc5",
        secondary="#4f8a4a",
        accent="#c9d6e6",
        background="#ffffff",
        surface="#eef2f6",
        panel="#b8c2cf",
        success="#4f8a4a",
        warning="#a67c1c",
        error="#c23b35",
        dark=False,
    ),
}

DEFAULT_THEME = TEXTUAL_THEMES["dark"]


def resolve_theme(name: str) -> Theme:
    """Theme for a preference value; unknown names fall back to dark."""
    theme = TEXTUAL_THEMES.get(name.strip().lower())
    if theme is None:
        logger.debug("unknown theme %r, using %s", name, DEFAULT_THEME.name)
        return DEFAULT_THEME
    return theme
