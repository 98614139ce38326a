# topic tally: counts the coarse topic labels the chat workflow attaches to questions

import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "Uncategorized"


@dataclass
class TopicCount:
    topic: str
    count: int
    percentage: float


def normalize_topic(topic) -> str:
    if not isinstance(topic, str) or not topic.strip():
        return DEFAULT_TOPIC
    return topic.strip()


class TopicTally:
    """topic label -> count. the default label is skipped unless count_default is set."""

    def __init__(self, count_default: bool = False):
        self.count_default = count_default
        self._counts: dict[str, int] = {}

    def increment(self, topic: Optional[str]) -> str:
        label = normalize_topic(topic)
        if label == DEFAULT_TOPIC and not self.count_default:
            return label
        self._counts[label] = self._counts.get(label, 0) + 1
        return label

    def count(self, topic: str) -> int:
        return self._counts.get(topic, 0)

    def snapshot(self) -> list[TopicCount]:
        """counts sorted by frequency (desc), ties broken by label"""
        total = sum(self._counts.values())
        ordered = sorted(self._counts.items(), key=lambda kv: (-kv[1], kv[0]))
        return [
            TopicCount(
                topic=label,
                count=count,
                percentage=round(count / total * 100, 1) if total else 0.0,
            )
            for label, count in ordered
        ]
