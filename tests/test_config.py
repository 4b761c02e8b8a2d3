import inspect

import pytest
from pydantic import ValidationError

from app.core.config import ConfigurationError, Settings, _parse_cors_origins
from app.services.payments import create_order
from app.services.razorpay import RazorpayGateway


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("", ["http://localhost:3000"]),
        (None, ["http://localhost:3000"]),
        ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
        ('["https://a.example"]', ["https://a.example"]),
        ("[not json", ["http://localhost:3000"]),
    ],
)
def test_parse_cors_origins(raw, expected):
    assert _parse_cors_origins(raw) == expected


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "env-key")
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_live_x")
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", "s3cret")
    monkeypatch.setenv("RAZORPAY_TIMEOUT_SECONDS", "12.5")
    settings = Settings(_env_file=None)
    assert settings.api_key == "env-key"
    assert settings.razorpay_key_id == "rzp_live_x"
    assert settings.razorpay_timeout_seconds == 12.5
    assert settings.gateway_configured is True


def test_settings_have_no_default_credentials(monkeypatch):
    for name in ("API_KEY", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.api_key == ""
    assert settings.gateway_configured is False
    with pytest.raises(ConfigurationError) as exc:
        settings.require_gateway_credentials()
    assert "RAZORPAY_KEY_ID" in str(exc.value)
    assert "RAZORPAY_KEY_SECRET" in str(exc.value)


def test_default_timeout_is_thirty_seconds(settings):
    assert settings.razorpay_timeout_seconds == 30.0


def test_settings_are_immutable(settings):
    with pytest.raises(ValidationError):
        settings.api_key = "changed"


def test_service_defaults_come_from_settings(settings):
    assert inspect.signature(create_order).parameters["description"].default == settings.order_description
    assert inspect.signature(RazorpayGateway).parameters["timeout"].default == settings.razorpay_timeout_seconds
