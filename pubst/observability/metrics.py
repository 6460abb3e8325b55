"""Counters and gauges for broker activity, overall and per topic."""

from collections import Counter
from typing import Any, Dict, Optional

PUBLISHED = "published"
DELIVERIES_SCHEDULED = "deliveries_scheduled"
DELIVERIES_SUPPRESSED = "deliveries_suppressed"
DELIVERED = "delivered"
DELIVERY_FAILED = "delivery_failed"
PENDING_DELIVERIES = "pending_deliveries"


class Metrics:
    """In-memory metrics collector. Counters given a topic are also kept per topic."""

    def __init__(self) -> None:
        self._counters: Counter = Counter()
        self._by_topic: Dict[str, Counter] = {}
        self._gauges: Dict[str, int] = {}

    def increment(self, name: str, value: int = 1, topic: Optional[str] = None) -> None:
        self._counters[name] += value
        if topic is not None:
            self._by_topic.setdefault(topic, Counter())[name] += value

    def set_gauge(self, name: str, value: int) -> None:
        self._gauges[name] = value

    def get_counter(self, name: str, topic: Optional[str] = None) -> int:
        if topic is None:
            return self._counters[name]
        return self._by_topic.get(topic, Counter())[name]

    def get_gauge(self, name: str) -> int:
        return self._gauges.get(name, 0)

    def reset(self) -> None:
        self._counters.clear()
        self._by_topic.clear()
        self._gauges.clear()

    def snapshot(self) -> Dict[str, Any]:
        """Copy of counters, gauges and per-topic counters."""
        return {
            "counters": dict(self._counters),
            "gauges": dict(self._gauges),
            "topics": {topic: dict(counts) for topic, counts in self._by_topic.items()},
        }
