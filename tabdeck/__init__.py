"""tabdeck - a multi-tab workspace with history-synchronized navigation."""

__version__ = "0.1.0"
