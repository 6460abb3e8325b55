"""In-memory registry of topic configurations."""

from collections.abc import Mapping
from typing import Callable, Dict, Iterable, List, Union

from pubst.topic import TopicConfig
from pubst.utils import is_set
from pubst.validation import build_validation_error_message, normalize_result

TopicConfigLike = Union[TopicConfig, Mapping]


class TopicRegistry:
    """Maps topic names to their configuration. Entries are overwritten, never removed."""

    def __init__(self, warn: Callable[[str], None]) -> None:
        self._topics: Dict[str, TopicConfig] = {}
        self._warn = warn

    def add_topic(self, config: TopicConfigLike) -> TopicConfig:
        """
        Register a topic. Raises ConfigurationError if the config has no name.
        Overwriting an existing topic, or a default that fails the topic's own
        validator, only warns.
        """
        topic = TopicConfig.parse(config)

        if topic.name in self._topics:
            self._warn(
                f"The '{topic.name}' topic has already been configured.  "
                "The previous configuration will be overwritten."
            )

        if is_set(topic.default):
            valid, messages = normalize_result(topic.validator(topic.default))
            if not valid:
                self._warn(
                    f"'{topic.name}' has been configured with a default value that does not pass validation.\n"
                    "Complete message:\n"
                    + build_validation_error_message(topic.name, messages, topic.default)
                )

        self._topics[topic.name] = topic
        return topic

    def add_topics(self, configs: Iterable[TopicConfigLike]) -> List[TopicConfig]:
        """Register each config in order; the first failure stops the rest."""
        return [self.add_topic(config) for config in configs]

    def get_effective_config(self, name: str) -> TopicConfig:
        """Return the registered config, or an unstored all-default one."""
        topic = self._topics.get(name)
        if topic is None:
            return TopicConfig.for_name(name)
        return topic

    def is_configured(self, name: str) -> bool:
        return name in self._topics

    def names(self) -> List[str]:
        """Configured topic names in registration order."""
        return list(self._topics)

    def __contains__(self, name: object) -> bool:
        return name in self._topics

    def __len__(self) -> int:
        return len(self._topics)

    def __repr__(self) -> str:
        return f"TopicRegistry(topics={len(self._topics)})"
