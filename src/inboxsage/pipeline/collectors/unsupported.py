"""Collector for source types that have no fetch integration."""

from typing import List

from inboxsage.core.source import FeedEntry
from inboxsage.pipeline.collectors.base import BaseCollector
from inboxsage.utils.logging import get_logger

logger = get_logger(__name__)


class UnsupportedCollector(BaseCollector):
    """Accepts NEWSLETTER, TWITTER and CUSTOM_URL sources and yields nothing."""

    async def collect(self) -> List[FeedEntry]:
        logger.info(
            "source_type_not_supported",
            source_id=self.source.id,
            source_type=self.source.type.value,
        )
        return []
