"""Subscription index: exact-name and pattern subscriptions, looked up by topic name."""

from typing import Callable, Dict, Iterable, List

from pubst.errors import InvalidSubscriptionError
from pubst.subscriber import ExactMatcher, PatternMatcher, Subscription


class SubscriptionIndex:
    """Holds subscriptions in insertion order; exact matches come before pattern matches."""

    def __init__(self, warn: Callable[[str], None]) -> None:
        self._exact: Dict[str, List[Subscription]] = {}
        self._patterns: List[Subscription] = []
        self._warn = warn

    def add(self, subscription: Subscription, configured_topics: Iterable[str]) -> None:
        """
        Store a subscription. configured_topics is used only for the
        unconfigured-topic warnings. Raises InvalidSubscriptionError for an
        unknown matcher kind.
        """
        matcher = subscription.matcher
        if isinstance(matcher, ExactMatcher):
            if matcher.name not in set(configured_topics):
                self._warn(f"Adding a subscriber to non-configured topic '{matcher.name}'")
            self._exact.setdefault(matcher.name, []).append(subscription)
        elif isinstance(matcher, PatternMatcher):
            if not any(matcher.matches(name) for name in configured_topics):
                self._warn("Adding a pattern subscriber that matches no configured topics.")
            self._patterns.append(subscription)
        else:
            raise InvalidSubscriptionError(
                "Unable to add subscriber.  Topic is not a string or a compiled pattern"
            )

    def remove(self, subscription: Subscription) -> None:
        """Remove a subscription; removing twice or removing an unknown one is a no-op."""
        matcher = subscription.matcher
        if isinstance(matcher, ExactMatcher):
            subs = self._exact.get(matcher.name)
            if subs is None:
                return
            remaining = [s for s in subs if s is not subscription]
            if remaining:
                self._exact[matcher.name] = remaining
            else:
                del self._exact[matcher.name]
        elif isinstance(matcher, PatternMatcher):
            self._patterns = [s for s in self._patterns if s is not subscription]

    def matching(self, topic: str) -> List[Subscription]:
        """Exact subscriptions for topic, then pattern subscriptions that match it."""
        exact = list(self._exact.get(topic, []))
        return exact + [s for s in self._patterns if s.matcher.matches(topic)]

    def __contains__(self, subscription: object) -> bool:
        if not isinstance(subscription, Subscription):
            return False
        if any(s is subscription for s in self._patterns):
            return True
        return any(
            s is subscription for subs in self._exact.values() for s in subs
        )

    def __len__(self) -> int:
        return sum(len(subs) for subs in self._exact.values()) + len(self._patterns)

    def __repr__(self) -> str:
        return f"SubscriptionIndex(exact={sum(len(s) for s in self._exact.values())}, patterns={len(self._patterns)})"
