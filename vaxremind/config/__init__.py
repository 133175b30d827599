"""Configuration module for the vaccination reminder service."""

from pathlib import Path
from typing import Optional

from .settings import EmailSettings, Settings, SmsSettings


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Build the settings object once at process start.

    Args:
        env_file: Optional path to a .env file

    Returns:
        Settings instance to pass to the service constructors
    """
    return Settings(env_file=env_file)


__all__ = ["load_settings", "Settings", "SmsSettings", "EmailSettings"]
