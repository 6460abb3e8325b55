"""In-memory publish/subscribe value broker with priming, repeat suppression and validation."""

from typing import Any, List, Optional

from pubst.broker import Broker, BrokerOptions, Unsubscribe
from pubst.errors import (
    ConfigurationError,
    InvalidSubscriptionError,
    PubstError,
    ValidationError,
)
from pubst.subscriber import SubscriptionConfig
from pubst.topic import TopicConfig
from pubst.validation import ValidationResult, always_valid

__all__ = [
    "Broker",
    "BrokerOptions",
    "TopicConfig",
    "SubscriptionConfig",
    "ValidationResult",
    "always_valid",
    "PubstError",
    "ConfigurationError",
    "InvalidSubscriptionError",
    "ValidationError",
    "Unsubscribe",
    "get_default_broker",
    "reset_default_broker",
    "configure",
    "add_topic",
    "add_topics",
    "publish",
    "subscribe",
    "current_val",
    "clear",
    "clear_all",
    "flush",
]

_default_broker: Optional[Broker] = None


def get_default_broker() -> Broker:
    """The shared broker behind the module-level functions (created on first use)."""
    global _default_broker
    if _default_broker is None:
        _default_broker = Broker()
    return _default_broker


def reset_default_broker() -> Broker:
    """Replace the shared broker with a fresh one and return it."""
    global _default_broker
    _default_broker = Broker()
    return _default_broker


def configure(options: Any = None, **kwargs: Any) -> None:
    get_default_broker().configure(options, **kwargs)


def add_topic(config: Any) -> TopicConfig:
    return get_default_broker().add_topic(config)


def add_topics(configs: List[Any]) -> List[TopicConfig]:
    return get_default_broker().add_topics(configs)


def publish(topic: str, payload: Any = None) -> None:
    get_default_broker().publish(topic, payload)


def subscribe(topic: Any, handler: Any, default: Any = None) -> Unsubscribe:
    return get_default_broker().subscribe(topic, handler, default)


def current_val(topic: str, default: Any = None) -> Any:
    return get_default_broker().current_val(topic, default)


def clear(topic: str) -> None:
    get_default_broker().clear(topic)


def clear_all() -> None:
    get_default_broker().clear_all()


def flush() -> int:
    return get_default_broker().flush()
