"""Helpers for telling set values from unset ones."""

from typing import Any


class _Unset:
    """Marker for delivery state that has never been written."""

    _instance = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


def is_not_set(value: Any) -> bool:
    return value is None or value is UNSET


def is_set(value: Any) -> bool:
    return not is_not_set(value)


def value_or_default(value: Any, default: Any = None) -> Any:
    """Return value, or default when value is not set and a default was given."""
    if is_not_set(value) and default is not None:
        return default
    return value
