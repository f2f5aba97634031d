"""Version information for InboxSage."""

__version__ = "0.4.0"
