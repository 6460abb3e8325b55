"""Deferred delivery: a FIFO task queue and the per-subscription delivery rules."""

import asyncio
from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

from pubst.observability import Metrics, get_logger
from pubst.observability.metrics import (
    DELIVERED,
    DELIVERIES_SCHEDULED,
    DELIVERIES_SUPPRESSED,
    DELIVERY_FAILED,
    PENDING_DELIVERIES,
)
from pubst.subscriber import Subscription
from pubst.topic import TopicConfig
from pubst.utils import value_or_default

Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class DeliveryQueue:
    """
    Ordered queue of pending delivery tasks.

    Tasks never run inside enqueue(). When an event loop is running (or an
    open one was bound), enqueue makes sure one drain turn is scheduled on
    it; that turn runs every pending task, including ones queued while no
    loop was running. Without a loop, tasks wait for drain().
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self._pending: Deque[Task] = deque()
        self._loop = loop
        self._turn_loop: Optional[asyncio.AbstractEventLoop] = None
        self._metrics = metrics or Metrics()
        self._logger = get_logger("pubst.scheduler")

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _delivery_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        if self._loop is not None and not self._loop.is_closed():
            return self._loop
        return _running_loop()

    def enqueue(self, callback: Callable[..., Any], *args: Any) -> None:
        self._pending.append((callback, args))
        self._metrics.set_gauge(PENDING_DELIVERIES, len(self._pending))
        loop = self._delivery_loop()
        if loop is None:
            return
        # a turn scheduled on a loop that has since closed will never run
        if self._turn_loop is loop and not loop.is_closed():
            return
        self._turn_loop = loop
        loop.call_soon(self._drain_turn)

    def _drain_turn(self) -> None:
        self._turn_loop = None
        self.drain()

    def _run_next(self) -> bool:
        if not self._pending:
            return False
        callback, args = self._pending.popleft()
        self._metrics.set_gauge(PENDING_DELIVERIES, len(self._pending))
        try:
            callback(*args)
        except Exception as e:
            self._metrics.increment(DELIVERY_FAILED)
            self._logger.exception(
                "delivery_failed",
                extra={"callback": getattr(callback, "__qualname__", repr(callback)), "error": str(e)},
            )
        return True

    def drain(self) -> int:
        """Run pending tasks in order, including ones queued while draining."""
        count = 0
        while self._run_next():
            count += 1
        return count

    async def join(self) -> int:
        """Give the loop one turn, then run whatever is still pending."""
        await asyncio.sleep(0)
        return self.drain()

    def __len__(self) -> int:
        return len(self._pending)


class DeliveryScheduler:
    """Decides whether a subscription gets a value and queues the handler call."""

    def __init__(self, queue: DeliveryQueue, metrics: Optional[Metrics] = None) -> None:
        self._queue = queue
        self._metrics = metrics or Metrics()

    @property
    def queue(self) -> DeliveryQueue:
        return self._queue

    def schedule(self, subscription: Subscription, raw_value: Any, topic: TopicConfig) -> bool:
        """
        Queue one delivery of raw_value on topic to subscription.
        Returns False when the delivery is suppressed as a repeat.
        """
        event_only = subscription.resolve_event_only(topic)
        allow_repeats = subscription.resolve_allow_repeats(topic)
        if event_only:
            value = topic.name
        else:
            value = value_or_default(raw_value, subscription.resolve_default(topic))

        if not (
            event_only
            or allow_repeats
            or _differs(value, subscription.last_value)
            or topic.name != subscription.last_topic
        ):
            self._metrics.increment(DELIVERIES_SUPPRESSED, topic=topic.name)
            return False

        self._metrics.increment(DELIVERIES_SCHEDULED, topic=topic.name)
        self._queue.enqueue(self._deliver, subscription, value, topic.name)
        return True

    def _deliver(self, subscription: Subscription, value: Any, topic_name: str) -> None:
        subscription.handler(value, topic_name)
        subscription.record_delivery(value, topic_name)
        self._metrics.increment(DELIVERED, topic=topic_name)


def _differs(value: Any, last: Any) -> bool:
    if value is last:
        return False
    return bool(value != last)
