"""Shared fixtures: a broker with captured warnings and a recording handler."""

from typing import Any, List, Tuple

import pytest

from pubst import Broker


class Recorder:
    """Handler that remembers every (value, topic) call."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Any, str]] = []

    def __call__(self, value: Any, topic: str) -> None:
        self.calls.append((value, topic))

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def reset(self) -> None:
        self.calls.clear()


@pytest.fixture
def warnings() -> List[str]:
    return []


@pytest.fixture
def broker(warnings: List[str]) -> Broker:
    return Broker(show_warnings=True, warn=warnings.append)


@pytest.fixture
def quiet_broker() -> Broker:
    return Broker(show_warnings=False)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_recorder():
    return Recorder
