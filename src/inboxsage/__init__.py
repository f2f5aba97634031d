"""InboxSage: per-user feed aggregation, AI summaries and email digests."""

from inboxsage.__version__ import __version__

__all__ = ["__version__"]
