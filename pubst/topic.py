"""Topic configuration (defaults, delivery flags and validator per topic name)."""

from collections.abc import Mapping
from typing import Any, Callable, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from pubst.errors import ConfigurationError
from pubst.validation import always_valid


class TopicConfig(BaseModel):
    """Resolved configuration for one topic. Unknown keys are ignored."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    name: str = ""
    default: Any = None
    event_only: bool = Field(default=False, alias="eventOnly")
    do_prime: bool = Field(default=True, alias="doPrime")
    allow_repeats: bool = Field(default=False, alias="allowRepeats")
    validator: Callable[[Any], Any] = always_valid

    @classmethod
    def for_name(cls, name: str) -> "TopicConfig":
        """All-default config for a topic that was never registered."""
        return cls(name=name)

    @classmethod
    def parse(cls, config: Union["TopicConfig", Mapping]) -> "TopicConfig":
        """Build a config from a TopicConfig or a plain mapping; name is required."""
        if isinstance(config, TopicConfig):
            topic = config
        elif isinstance(config, Mapping):
            try:
                topic = cls.model_validate(dict(config))
            except pydantic.ValidationError as e:
                raise ConfigurationError(f"Invalid topic configuration: {e}") from e
        else:
            raise ConfigurationError(
                f"Topic configuration must be a mapping or TopicConfig, got {type(config).__name__}"
            )
        if not topic.name:
            raise ConfigurationError("Topics must have a name.")
        return topic

    def __repr__(self) -> str:
        return (
            f"TopicConfig(name={self.name!r}, default={self.default!r}, "
            f"event_only={self.event_only}, do_prime={self.do_prime}, "
            f"allow_repeats={self.allow_repeats})"
        )
