"""Configuration settings for the vaccination reminder service."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from vaxremind.errors import ConfigError


@dataclass
class SmsSettings:
    """Credentials and limits for the SMS channel (Africa's Talking).

    Attributes:
        username: Africa's Talking application username ("sandbox" for tests)
        api_key: Africa's Talking API key
        sender_id: Optional alphanumeric sender ID or short code
        timeout: Request timeout in seconds
    """

    username: Optional[str] = None
    api_key: Optional[str] = None
    sender_id: Optional[str] = None
    timeout: float = 15.0

    @property
    def configured(self) -> bool:
        return bool(self.username and self.api_key)


@dataclass
class EmailSettings:
    """SMTP settings for the email channel.

    Attributes:
        host: SMTP server host
        port: SMTP server port
        user: SMTP login
        password: SMTP password
        sender: From header for outgoing mail
        use_tls: Whether to upgrade the connection with STARTTLS
        timeout: Connection timeout in seconds
    """

    host: Optional[str] = None
    port: int = 587
    user: Optional[str] = None
    password: Optional[str] = None
    sender: str = '"Vaccine System" <no-reply@example.com>'
    use_tls: bool = True
    timeout: float = 20.0

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password)


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self, env_file: Optional[Path] = None):
        """Initialize settings by loading from .env file and environment variables.

        Args:
            env_file: Path to .env file (default: project_root/.env)

        Raises:
            ConfigError: If a variable has an invalid value
        """
        env_path = env_file or Path(__file__).parent.parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        # Application Configuration
        self.log_level: str = self._get_env("LOG_LEVEL", "INFO")
        self.logs_dir: Path = Path(self._get_env("LOGS_DIR", "logs"))
        self.data_dir: Path = Path(self._get_env("DATA_DIR", "data"))
        self.sent_log_path: Path = Path(
            self._get_env("SENT_LOG_PATH", "data/sent_markers.db")
        )
        self.max_concurrent_children: int = self._get_int("MAX_CONCURRENT_CHILDREN", 5)

        # Schedule Configuration (East Africa Time, no DST)
        self.reminder_timezone_offset: str = self._get_env(
            "REMINDER_TIMEZONE_OFFSET", "+03:00"
        )
        self.daily_run_time: str = self._get_env("DAILY_RUN_TIME", "08:00")

        # SMS Channel
        self.sms = SmsSettings(
            username=self._get_env("AT_USERNAME") or None,
            api_key=self._get_env("AT_API_KEY") or None,
            sender_id=self._get_env("AT_SENDER_ID") or None,
            timeout=float(self._get_int("SMS_TIMEOUT_SECONDS", 15)),
        )

        # Email Channel
        self.email = EmailSettings(
            host=self._get_env("SMTP_HOST") or None,
            port=self._get_int("SMTP_PORT", 587),
            user=self._get_env("SMTP_USER") or None,
            password=self._get_env("SMTP_PASSWORD") or None,
            sender=self._get_env("SMTP_FROM", '"Vaccine System" <no-reply@example.com>'),
            use_tls=self._get_env("SMTP_USE_TLS", "true").lower() in ("1", "true", "yes"),
            timeout=float(self._get_int("EMAIL_TIMEOUT_SECONDS", 20)),
        )

        # Operator Bot
        self.telegram_bot_token: Optional[str] = self._get_env("TELEGRAM_BOT_TOKEN") or None
        self.operator_chat_ids: list[int] = self._get_int_list("OPERATOR_CHAT_IDS")

        self._validate()

    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable with optional default value.

        Args:
            key: Environment variable name
            default: Default value if variable is not set

        Returns:
            Environment variable value or default
        """
        return os.getenv(key, default)

    def _get_int(self, key: str, default: int) -> int:
        """Get integer environment variable.

        Raises:
            ConfigError: If the value is not an integer
        """
        value = os.getenv(key)
        if value is None or value.strip() == "":
            return default
        try:
            return int(value)
        except ValueError as e:
            raise ConfigError(f"Environment variable '{key}' must be an integer, got '{value}'") from e

    def _get_int_list(self, key: str) -> list[int]:
        """Get comma separated list of integers (e.g. Telegram chat IDs)."""
        value = os.getenv(key, "")
        result = []
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            try:
                result.append(int(item))
            except ValueError as e:
                raise ConfigError(f"Invalid entry '{item}' in {key}") from e
        return result

    def _validate(self) -> None:
        # Imported here to keep utils -> config dependency one-way
        from vaxremind.utils.timezone import parse_daily_time, parse_timezone_offset

        try:
            parse_timezone_offset(self.reminder_timezone_offset)
            parse_daily_time(self.daily_run_time)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        if self.max_concurrent_children < 1:
            raise ConfigError("MAX_CONCURRENT_CHILDREN must be at least 1")

    def __repr__(self) -> str:
        """Return string representation of settings (without sensitive data)."""
        return (
            f"Settings("
            f"log_level={self.log_level}, "
            f"data_dir={self.data_dir}, "
            f"sent_log_path={self.sent_log_path}, "
            f"reminder_timezone_offset={self.reminder_timezone_offset}, "
            f"daily_run_time={self.daily_run_time}, "
            f"max_concurrent_children={self.max_concurrent_children}, "
            f"sms_configured={self.sms.configured}, "
            f"email_configured={self.email.configured}, "
            f"telegram_bot_token={'*' * 8 if self.telegram_bot_token else None}"
            f")"
        )
