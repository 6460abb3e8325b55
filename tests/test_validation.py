from types import SimpleNamespace

from pubst.validation import (
    ValidationResult,
    always_valid,
    build_validation_error_message,
    normalize_result,
)


def test_always_valid():
    assert normalize_result(always_valid("anything")) == (True, [])


def test_normalize_dict_result():
    assert normalize_result({"valid": False, "messages": ["m1", "m2"]}) == (False, ["m1", "m2"])
    assert normalize_result({"valid": True}) == (True, [])


def test_normalize_object_result():
    result = SimpleNamespace(valid=False, messages=("bad",))
    assert normalize_result(result) == (False, ["bad"])
    assert normalize_result(ValidationResult(valid=False, messages=["x"])) == (False, ["x"])


def test_falsy_result_is_invalid():
    assert normalize_result(None) == (False, [])
    assert normalize_result({}) == (False, [])
    assert normalize_result(False) == (False, [])


def test_single_message_string_is_wrapped():
    assert normalize_result({"valid": False, "messages": "oops"}) == (False, ["oops"])


def test_error_message_lists_messages_and_payload():
    message = build_validation_error_message("cart.count", ["m1", "m2"], {"count": -1})
    assert message.startswith("Validation failed for topic 'cart.count'.")
    assert "Messages:\n  m1\n  m2" in message
    assert "Received Payload:" in message
    assert '"count": -1' in message


def test_error_message_singular_and_empty():
    assert "Message:\n  only" in build_validation_error_message("t", ["only"], 1)
    assert "Message" not in build_validation_error_message("t", [], 1).split("Received")[0]


def test_error_message_handles_unserializable_payload():
    payload = object()
    message = build_validation_error_message("t", [], payload)
    assert repr(payload) in message
