# in-memory state container for the relay
# groups the session ledger, topic tally and knowledge source; lives for the process lifetime

import logging
from typing import Optional

from hotelchat.config import settings
from hotelchat.services.knowledge import KnowledgeHolder
from hotelchat.services.ledger import SessionLedger
from hotelchat.services.topics import TopicTally

logger = logging.getLogger(__name__)


class ConciergeStore:
    """process-wide state manager. nothing here is persisted."""

    def __init__(self, recent_cap: Optional[int] = None, count_default_topic: Optional[bool] = None):
        self.recent_cap = recent_cap or settings.RECENT_SESSIONS_CAP
        self.count_default_topic = (
            settings.COUNT_UNCATEGORIZED_TOPICS if count_default_topic is None else count_default_topic
        )
        self.ledger = SessionLedger(recent_cap=self.recent_cap)
        self.topics = TopicTally(count_default=self.count_default_topic)
        self.knowledge = KnowledgeHolder()

    def open(self):
        """start from empty state"""
        self.reset()
        logger.info(f"Session store ready (recent cap {self.recent_cap})")

    def close(self):
        """discard all state: sessions, topics and the knowledge source"""
        logger.info(
            f"Discarding {self.ledger.total_sessions} sessions and "
            f"{'a' if self.knowledge.current else 'no'} knowledge source"
        )
        self.reset()

    def reset(self):
        self.ledger = SessionLedger(recent_cap=self.recent_cap)
        self.topics = TopicTally(count_default=self.count_default_topic)
        self.knowledge.clear()


# singleton instance
store = ConciergeStore()


async def get_store() -> ConciergeStore:
    """dependency injection for relay state"""
    return store
