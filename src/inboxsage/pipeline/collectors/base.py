"""Base collector interface."""

from abc import ABC, abstractmethod
from typing import List

from inboxsage.core.source import FeedEntry, Source


class BaseCollector(ABC):
    """Abstract base class for source collectors."""

    def __init__(self, source: Source):
        """Initialize collector with the source to fetch.

        Args:
            source: Source with URL and type.
        """
        self.source = source

    @abstractmethod
    async def collect(self) -> List[FeedEntry]:
        """Fetch and normalize the source's current entries.

        Returns:
            Normalized feed entries.

        Raises:
            CollectorError: If the source cannot be fetched or parsed.
        """
        pass
