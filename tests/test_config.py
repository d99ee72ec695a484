import pytest
from pydantic import ValidationError

from midtrans_service.config import DEFAULT_ENABLED_PAYMENTS, DEFAULT_STATUS_MAP, Settings

ENV_NAMES = (
    "MIDTRANS_SERVER_KEY", "MIDTRANS_IS_PRODUCTION", "MIDTRANS_ENABLED_PAYMENTS",
    "MIDTRANS_TIMEOUT", "MIDTRANS_STATUS_MAP", "DATABASE_URL", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.server_key == ""
    assert settings.enabled_payments == DEFAULT_ENABLED_PAYMENTS
    assert settings.status_map == DEFAULT_STATUS_MAP
    assert settings.timeout == 30.0
    assert settings.database_url == "sqlite:///./payments.db"
    assert settings.snap_base_url == "https://app.sandbox.midtrans.com"
    assert settings.api_base_url == "https://api.sandbox.midtrans.com"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("MIDTRANS_SERVER_KEY", "Mid-server-live")
    monkeypatch.setenv("MIDTRANS_IS_PRODUCTION", "true")
    monkeypatch.setenv("MIDTRANS_ENABLED_PAYMENTS", "gopay, qris")
    monkeypatch.setenv("MIDTRANS_TIMEOUT", "5")
    monkeypatch.setenv("DATABASE_URL", "postgresql://payments@db/payments")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings(_env_file=None)

    assert settings.server_key == "Mid-server-live"
    assert settings.is_production is True
    assert settings.enabled_payments == ["gopay", "qris"]
    assert settings.timeout == 5.0
    assert settings.database_url == "postgresql://payments@db/payments"
    assert settings.log_level == "debug"
    assert settings.snap_base_url == "https://app.midtrans.com"
    assert settings.api_base_url == "https://api.midtrans.com"


def test_status_map_from_environment(monkeypatch):
    monkeypatch.setenv("MIDTRANS_STATUS_MAP", '{"settlement": "settlement", "refund": "cancel"}')

    settings = Settings(_env_file=None)

    assert settings.status_map == {"settlement": "settlement", "refund": "cancel"}


@pytest.mark.parametrize("name, value", [
    ("MIDTRANS_TIMEOUT", "soon"),
    ("MIDTRANS_IS_PRODUCTION", "maybe"),
])
def test_rejects_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_are_frozen():
    settings = Settings(_env_file=None, server_key="SB-Mid-server-test")

    with pytest.raises(ValidationError):
        settings.server_key = "other"
