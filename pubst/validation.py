"""Validator contract: result shape, the default validator and error messages."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, List, Tuple


@dataclass(frozen=True)
class ValidationResult:
    """What a topic validator returns for a payload."""

    valid: bool
    messages: List[str] = field(default_factory=list)


VALIDATION_SUCCESS = ValidationResult(valid=True)


def always_valid(payload: Any) -> ValidationResult:
    return VALIDATION_SUCCESS


def normalize_result(result: Any) -> Tuple[bool, List[str]]:
    """
    Reduce a validator return value to (valid, messages).
    Accepts a ValidationResult, a mapping with valid/messages, or any object with
    those attributes. A falsy result counts as invalid.
    """
    if not result:
        return False, []
    if isinstance(result, Mapping):
        valid = result.get("valid", False)
        messages = result.get("messages")
    else:
        valid = getattr(result, "valid", False)
        messages = getattr(result, "messages", None)
    if isinstance(messages, str):
        messages = [messages]
    return bool(valid), list(messages or [])


def _payload_to_json(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2, default=repr)
    except (TypeError, ValueError):
        return repr(payload)


def build_validation_error_message(topic: str, messages: List[str], payload: Any) -> str:
    """Human-readable description of a rejected payload."""
    listed = ""
    if messages:
        s = "" if len(messages) == 1 else "s"
        listed = f"Message{s}:\n  " + "\n  ".join(str(m) for m in messages)
    payload_string = "Received Payload:\n  " + _payload_to_json(payload)
    return f"Validation failed for topic '{topic}'.\n {listed}\n {payload_string}"
