"""Content collectors for different source types."""

from typing import Optional

import httpx

from inboxsage.core.enums import SourceType
from inboxsage.core.source import Source
from inboxsage.pipeline.collectors.base import BaseCollector
from inboxsage.pipeline.collectors.rss import RSSCollector
from inboxsage.pipeline.collectors.unsupported import UnsupportedCollector

__all__ = [
    "BaseCollector",
    "RSSCollector",
    "UnsupportedCollector",
    "create_collector",
]

# Medium publishes standard RSS
_RSS_TYPES = {SourceType.RSS, SourceType.MEDIUM}


def create_collector(
    source: Source,
    timeout: int = 30,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> BaseCollector:
    """Factory function to create the collector for a source's type.

    Args:
        source: Source to fetch.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (used by tests).

    Returns:
        Collector instance for the source type.
    """
    if source.type in _RSS_TYPES:
        return RSSCollector(source, timeout=timeout, transport=transport)

    return UnsupportedCollector(source)
