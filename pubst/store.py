"""Last published payload per topic."""

from typing import Any, Dict, Iterator, List


class ValueStore:
    """Maps topic name to its latest payload. None marks a cleared topic."""

    def __init__(self) -> None:
        self._values: Dict[str, Any] = {}

    def set(self, topic: str, payload: Any) -> None:
        self._values[topic] = payload

    def get(self, topic: str) -> Any:
        return self._values.get(topic)

    def has(self, topic: str) -> bool:
        """True if the topic was ever published, even if it now holds None."""
        return topic in self._values

    def topics(self) -> List[str]:
        """Stored topic names in first-publish order."""
        return list(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.topics())

    def __contains__(self, topic: object) -> bool:
        return topic in self._values

    def __len__(self) -> int:
        return len(self._values)
