"""Broker facade: topics, publish, subscribe and current values for one process."""

import asyncio
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from pubst.errors import ConfigurationError, ValidationError
from pubst.index import SubscriptionIndex
from pubst.observability import Metrics, get_logger, warning_sink
from pubst.observability.metrics import PUBLISHED
from pubst.registry import TopicConfigLike, TopicRegistry
from pubst.scheduler import DeliveryQueue, DeliveryScheduler
from pubst.settings import show_warnings_from_env
from pubst.store import ValueStore
from pubst.subscriber import (
    ExactMatcher,
    Handler,
    SubscriptionConfig,
    TopicMatcher,
    build_subscription,
)
from pubst.topic import TopicConfig
from pubst.utils import is_set, value_or_default
from pubst.validation import build_validation_error_message, normalize_result

Unsubscribe = Callable[[], None]


class BrokerOptions(BaseModel):
    """Options accepted by Broker.configure(); unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    show_warnings: Optional[bool] = Field(default=None, alias="showWarnings")
    topics: Optional[List[Any]] = None


class Broker:
    """
    In-memory value broker. Keeps the last payload per topic and delivers
    updates to subscribers through a deferred FIFO queue.

    Handlers are never called from inside publish() or subscribe(). Inside a
    running asyncio loop they run on later loop turns; otherwise call flush().
    """

    def __init__(
        self,
        options: Optional[Union[BrokerOptions, Mapping]] = None,
        *,
        warn: Optional[Callable[[str], None]] = None,
        metrics: Optional[Metrics] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        **kwargs: Any,
    ) -> None:
        self._logger = get_logger("pubst.broker")
        self._sink = warn or warning_sink("pubst.broker")
        self._show_warnings = show_warnings_from_env()
        self._metrics = metrics or Metrics()
        self._topics = TopicRegistry(self._warn)
        self._store = ValueStore()
        self._index = SubscriptionIndex(self._warn)
        self._queue = DeliveryQueue(loop=loop, metrics=self._metrics)
        self._scheduler = DeliveryScheduler(self._queue, metrics=self._metrics)
        if options is not None or kwargs:
            self.configure(options, **kwargs)

    # ---- Warnings ----

    def _warn(self, message: str) -> None:
        if self._show_warnings:
            self._sink(message)

    @property
    def show_warnings(self) -> bool:
        return self._show_warnings

    @property
    def metrics(self) -> Metrics:
        return self._metrics

    # ---- Configuration ----

    def configure(self, options: Optional[Union[BrokerOptions, Mapping]] = None, **kwargs: Any) -> None:
        """Apply show_warnings and register any topics. Unknown keys are ignored."""
        if isinstance(options, BrokerOptions):
            parsed = options
        else:
            data = dict(options or {})
            data.update(kwargs)
            try:
                parsed = BrokerOptions.model_validate(data)
            except pydantic.ValidationError as e:
                raise ConfigurationError(f"Invalid broker options: {e}") from e

        if parsed.show_warnings is not None:
            self._show_warnings = parsed.show_warnings
        if parsed.topics:
            self.add_topics(parsed.topics)

    def add_topic(self, config: TopicConfigLike) -> TopicConfig:
        return self._topics.add_topic(config)

    def add_topics(self, configs: List[TopicConfigLike]) -> List[TopicConfig]:
        return self._topics.add_topics(configs)

    # ---- Publish / subscribe ----

    def publish(self, topic: str, payload: Any = None) -> None:
        """
        Store payload as the topic's current value and queue deliveries.
        Raises ValidationError, before changing anything, if the topic's
        validator rejects the payload. Event-only topics skip validation.
        """
        if not self._topics.is_configured(topic):
            self._warn(f"Received a publish for {topic} but that topic has not been configured.")

        config = self._topics.get_effective_config(topic)

        if not config.event_only:
            valid, messages = normalize_result(config.validator(payload))
            if not valid:
                raise ValidationError(
                    build_validation_error_message(topic, messages, payload),
                    topic=topic,
                    messages=messages,
                    payload=payload,
                )

        self._store.set(topic, payload)
        self._metrics.increment(PUBLISHED, topic=topic)
        self._logger.debug("published", extra={"topic": topic})

        subscriptions = self._index.matching(topic)
        if not subscriptions:
            self._warn(f"There are no subscribers that match '{topic}'!")
            return
        value = self._store.get(topic)
        for subscription in subscriptions:
            self._scheduler.schedule(subscription, value, config)

    def subscribe(
        self,
        topic: TopicMatcher,
        handler: Union[Handler, SubscriptionConfig, Mapping],
        default: Any = None,
    ) -> Unsubscribe:
        """
        Subscribe handler(value, topic) to a topic name or compiled pattern.

        handler may also be a SubscriptionConfig (or mapping) carrying handler
        plus default/do_prime/allow_repeats/event_only overrides. When priming
        applies, the current value is queued for delivery right away; a pattern
        subscriber is primed once per stored topic it matches.

        Returns a function that removes the subscription. Deliveries already
        queued for it still run.
        """
        subscription = build_subscription(topic, handler, default)
        self._index.add(subscription, self._topics.names())
        self._logger.debug("subscribed", extra={"matcher": repr(subscription.matcher)})

        if isinstance(subscription.matcher, ExactMatcher):
            targets = [subscription.matcher.name]
        else:
            targets = [name for name in self._store.topics() if subscription.matcher.matches(name)]

        for name in targets:
            config = self._topics.get_effective_config(name)
            if not subscription.resolve_do_prime(config):
                continue
            value = self.current_val(name, subscription.default)
            if config.event_only or is_set(value):
                self._scheduler.schedule(subscription, value, config)

        def unsubscribe() -> None:
            self._index.remove(subscription)
            self._logger.debug("unsubscribed", extra={"matcher": repr(subscription.matcher)})

        return unsubscribe

    # ---- Values ----

    def current_val(self, topic: str, default: Any = None) -> Any:
        """Stored value, else default, else the topic's configured default."""
        if default is None:
            default = self._topics.get_effective_config(topic).default
        return value_or_default(self._store.get(topic), default)

    def clear(self, topic: str) -> None:
        """Publish None to a topic that has been published before; otherwise do nothing."""
        if self._store.has(topic):
            self.publish(topic, None)

    def clear_all(self) -> None:
        for topic in self._store.topics():
            self.clear(topic)

    # ---- Delivery ----

    def flush(self) -> int:
        """Run every queued delivery now; returns how many ran."""
        return self._queue.drain()

    async def settle(self) -> int:
        """Let the event loop run queued deliveries, then flush the rest."""
        return await self._queue.join()

    @property
    def pending(self) -> int:
        return self._queue.pending

    def stats(self) -> Dict[str, Any]:
        """Counts of topics, stored values, subscriptions and pending deliveries."""
        return {
            "topics": len(self._topics),
            "stored_topics": len(self._store),
            "subscriptions": len(self._index),
            "pending_deliveries": self._queue.pending,
            "metrics": self._metrics.snapshot(),
        }

    def __repr__(self) -> str:
        return (
            f"Broker(topics={len(self._topics)}, stored={len(self._store)}, "
            f"subscriptions={len(self._index)})"
        )
