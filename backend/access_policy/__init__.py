"""Access policy engine for the inventory dashboard."""

__version__ = "0.1.0"
