from app.core.logging import REDACTED, redact_secrets


def test_secret_keys_are_masked():
    event = {
        "event": "validation_error",
        "api_key": "k",
        "Authorization": "Bearer k",
        "body": {"amount": 10, "razorpay_signature": "abc", "nested": [{"secret": "x"}]},
    }
    out = redact_secrets(None, "warning", event)
    assert out["event"] == "validation_error"
    assert out["api_key"] == REDACTED
    assert out["Authorization"] == REDACTED
    assert out["body"]["amount"] == 10
    assert out["body"]["razorpay_signature"] == REDACTED
    assert out["body"]["nested"][0]["secret"] == REDACTED


def test_plain_fields_untouched():
    event = {"event": "razorpay_order_create", "receipt": "receipt_1", "amount": 10050}
    assert redact_secrets(None, "info", event) == event
