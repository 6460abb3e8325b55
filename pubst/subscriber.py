"""Subscriptions: topic matchers, per-subscription overrides and delivery state."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from pubst.errors import InvalidSubscriptionError
from pubst.topic import TopicConfig
from pubst.utils import UNSET

Handler = Callable[[Any, str], Any]


@dataclass(frozen=True)
class ExactMatcher:
    """Matches one topic name exactly."""

    name: str

    def matches(self, topic: str) -> bool:
        return topic == self.name


@dataclass(frozen=True)
class PatternMatcher:
    """Matches every topic name the compiled pattern finds a match in (unanchored)."""

    pattern: "re.Pattern[str]"

    def matches(self, topic: str) -> bool:
        return self.pattern.search(topic) is not None


Matcher = Union[ExactMatcher, PatternMatcher]
TopicMatcher = Union[str, "re.Pattern[str]", ExactMatcher, PatternMatcher]


def make_matcher(topic: Any) -> Matcher:
    """Turn a topic name or compiled pattern into a matcher."""
    if isinstance(topic, (ExactMatcher, PatternMatcher)):
        return topic
    if isinstance(topic, str):
        return ExactMatcher(topic)
    if isinstance(topic, re.Pattern):
        return PatternMatcher(topic)
    raise InvalidSubscriptionError(
        "Unable to add subscriber.  Topic is not a string or a compiled pattern "
        f"(got {type(topic).__name__})"
    )


class SubscriptionConfig(BaseModel):
    """Handler plus optional overrides; keys other than these are dropped."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    handler: Callable[..., Any]
    default: Any = None
    do_prime: Optional[bool] = Field(default=None, alias="doPrime")
    allow_repeats: Optional[bool] = Field(default=None, alias="allowRepeats")
    event_only: Optional[bool] = Field(default=None, alias="eventOnly")


@dataclass(eq=False)
class Subscription:
    """
    One registration made by subscribe(). Compared by identity.
    Override fields left as None fall back to the topic's configuration.
    last_value/last_topic are written by the scheduler after each delivery.
    """

    matcher: Matcher
    handler: Handler
    default: Any = None
    do_prime: Optional[bool] = None
    allow_repeats: Optional[bool] = None
    event_only: Optional[bool] = None
    last_value: Any = field(default=UNSET, repr=False)
    last_topic: Any = field(default=UNSET, repr=False)

    def resolve_default(self, topic: TopicConfig) -> Any:
        return topic.default if self.default is None else self.default

    def resolve_event_only(self, topic: TopicConfig) -> bool:
        return topic.event_only if self.event_only is None else self.event_only

    def resolve_allow_repeats(self, topic: TopicConfig) -> bool:
        return topic.allow_repeats if self.allow_repeats is None else self.allow_repeats

    def resolve_do_prime(self, topic: TopicConfig) -> bool:
        return topic.do_prime if self.do_prime is None else self.do_prime

    def record_delivery(self, value: Any, topic: str) -> None:
        self.last_value = value
        self.last_topic = topic


def build_subscription(
    topic: TopicMatcher,
    handler: Union[Handler, SubscriptionConfig, Mapping],
    default: Any = None,
) -> Subscription:
    """
    Normalize subscribe() arguments into a Subscription.
    handler may be a callable, a SubscriptionConfig, or a mapping with a
    callable "handler" key. A config's own default wins over the default argument.
    """
    matcher = make_matcher(topic)

    if isinstance(handler, SubscriptionConfig):
        config = handler
    elif isinstance(handler, Mapping):
        try:
            config = SubscriptionConfig.model_validate(dict(handler))
        except pydantic.ValidationError as e:
            raise InvalidSubscriptionError(f"Invalid subscription configuration: {e}") from e
    elif callable(handler):
        return Subscription(matcher=matcher, handler=handler, default=default)
    else:
        raise InvalidSubscriptionError(
            f"Handler must be callable or a subscription config, got {type(handler).__name__}"
        )

    return Subscription(
        matcher=matcher,
        handler=config.handler,
        default=default if config.default is None else config.default,
        do_prime=config.do_prime,
        allow_repeats=config.allow_repeats,
        event_only=config.event_only,
    )
