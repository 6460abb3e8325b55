"""Exceptions raised by the broker."""

from typing import Any, List, Optional


class PubstError(Exception):
    """Base class for broker errors."""


class ConfigurationError(PubstError):
    """A topic or subscription was configured incorrectly."""


class InvalidSubscriptionError(ConfigurationError):
    """The topic matcher or handler given to subscribe() cannot be used."""


class ValidationError(PubstError):
    """A published payload was rejected by its topic's validator."""

    def __init__(
        self,
        message: str,
        topic: str,
        messages: Optional[List[str]] = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.topic = topic
        self.messages = list(messages or [])
        self.payload = payload
