"""Unit tests for settings loading."""

import os

import pytest

from vaxremind.config import Settings
from vaxremind.errors import ConfigError

ENV_VARS = [
    "LOG_LEVEL", "DATA_DIR", "SENT_LOG_PATH", "MAX_CONCURRENT_CHILDREN",
    "REMINDER_TIMEZONE_OFFSET", "DAILY_RUN_TIME",
    "AT_USERNAME", "AT_API_KEY", "AT_SENDER_ID", "SMS_TIMEOUT_SECONDS",
    "SMTP_HOST", "SMTP_PORT", "SMTP_USER", "SMTP_PASSWORD", "SMTP_FROM", "SMTP_USE_TLS",
    "EMAIL_TIMEOUT_SECONDS", "TELEGRAM_BOT_TOKEN", "OPERATOR_CHAT_IDS",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Isolate os.environ, clear reminder variables and return a path to a missing .env file."""
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return tmp_path / "missing.env"


# TC-CONFIG-001: Defaults
def test_defaults(clean_env):
    settings = Settings(env_file=clean_env)

    assert settings.reminder_timezone_offset == "+03:00"
    assert settings.daily_run_time == "08:00"
    assert settings.max_concurrent_children == 5
    assert not settings.sms.configured
    assert not settings.email.configured
    assert settings.telegram_bot_token is None
    assert settings.operator_chat_ids == []


# TC-CONFIG-002: Channel credentials
def test_channels_configured(clean_env, monkeypatch):
    monkeypatch.setenv("AT_USERNAME", "sandbox")
    monkeypatch.setenv("AT_API_KEY", "key")
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "465")
    monkeypatch.setenv("SMTP_USER", "reminders@example.com")
    monkeypatch.setenv("SMTP_PASSWORD", "secret")
    monkeypatch.setenv("SMTP_USE_TLS", "false")
    monkeypatch.setenv("OPERATOR_CHAT_IDS", "123, -456")

    settings = Settings(env_file=clean_env)

    assert settings.sms.configured
    assert settings.email.configured
    assert settings.email.port == 465
    assert settings.email.use_tls is False
    assert settings.operator_chat_ids == [123, -456]


def test_repr_hides_secrets(clean_env, monkeypatch):
    monkeypatch.setenv("AT_API_KEY", "super-secret-key")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")

    text = repr(Settings(env_file=clean_env))

    assert "super-secret-key" not in text
    assert "123:abc" not in text


# TC-CONFIG-003: Invalid values
@pytest.mark.parametrize("name,value", [
    ("MAX_CONCURRENT_CHILDREN", "many"),
    ("MAX_CONCURRENT_CHILDREN", "0"),
    ("SMTP_PORT", "smtp"),
    ("REMINDER_TIMEZONE_OFFSET", "Africa/Nairobi"),
    ("DAILY_RUN_TIME", "eight"),
    ("OPERATOR_CHAT_IDS", "123,abc"),
])
def test_invalid_values_raise_config_error(clean_env, monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        Settings(env_file=clean_env)


def test_env_file_is_loaded(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DAILY_RUN_TIME=07:30\nAT_USERNAME=clinic\n", encoding="utf-8")

    settings = Settings(env_file=env_file)

    assert settings.daily_run_time == "07:30"
    assert settings.sms.username == "clinic"
