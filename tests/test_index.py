import re

import pytest

from pubst.errors import ConfigurationError, InvalidSubscriptionError
from pubst.index import SubscriptionIndex
from pubst.subscriber import ExactMatcher, PatternMatcher, Subscription


def handler(value, topic):
    pass


def exact(name):
    return Subscription(matcher=ExactMatcher(name), handler=handler)


def pattern(regex):
    return Subscription(matcher=PatternMatcher(re.compile(regex)), handler=handler)


@pytest.fixture
def index(warnings):
    return SubscriptionIndex(warnings.append)


def test_exact_subscriptions_keep_insertion_order(index):
    first, second = exact("a"), exact("a")
    index.add(first, ["a"])
    index.add(second, ["a"])
    assert index.matching("a") == [first, second]
    assert index.matching("b") == []


def test_exact_matches_come_before_patterns(index):
    pat = pattern(r"^a")
    ex = exact("abc")
    index.add(pat, ["abc"])
    index.add(ex, ["abc"])
    assert index.matching("abc") == [ex, pat]


def test_pattern_matching_is_unanchored(index):
    sub = pattern(r"topic")
    index.add(sub, ["test.topic.one"])
    assert index.matching("test.topic.one") == [sub]
    assert index.matching("other") == []


def test_warns_for_unconfigured_exact_topic(index, warnings):
    index.add(exact("missing"), [])
    assert warnings == ["Adding a subscriber to non-configured topic 'missing'"]


def test_warns_for_pattern_matching_nothing(index, warnings):
    index.add(pattern(r"^zzz"), ["abc"])
    assert warnings == ["Adding a pattern subscriber that matches no configured topics."]
    warnings.clear()
    index.add(pattern(r"^a"), ["abc"])
    assert warnings == []


def test_rejects_unknown_matcher(index):
    bogus = Subscription(matcher=42, handler=handler)
    with pytest.raises(InvalidSubscriptionError):
        index.add(bogus, [])
    assert issubclass(InvalidSubscriptionError, ConfigurationError)


def test_remove_is_idempotent(index):
    ex, pat = exact("a"), pattern(r"a")
    index.add(ex, ["a"])
    index.add(pat, ["a"])
    assert len(index) == 2

    index.remove(ex)
    index.remove(ex)
    index.remove(pat)
    index.remove(pat)
    index.remove(exact("never.added"))

    assert index.matching("a") == []
    assert len(index) == 0


def test_remove_only_drops_that_subscription(index):
    first, second = exact("a"), exact("a")
    index.add(first, ["a"])
    index.add(second, ["a"])
    index.remove(first)
    assert index.matching("a") == [second]
    assert first not in index
    assert second in index
