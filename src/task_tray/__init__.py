"""task-tray: a personal, ordered work queue driven from a tray-style menu."""

__version__ = "0.1.0"
