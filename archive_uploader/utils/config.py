"""Configuration management for environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

from archive_uploader.common.constants import (
    CHUNK_SIZE,
    DEFAULT_API_PATH,
    DEFAULT_COMMONS_HOST,
    DEFAULT_SOURCES_HOST,
    DEFAULT_USER_AGENT,
    UPLOAD_TIMEOUT_SECONDS,
)
from archive_uploader.utils.exceptions import ConfigurationError


class Config:
    """Application configuration loaded from environment variables.

    Credentials are optional here: an empty username or password is reported
    by the credentials store, not by configuration loading.
    """

    def __init__(self, env_file: str | Path = ".env") -> None:
        """Load configuration from .env file and environment.

        Args:
            env_file: Path to an optional dotenv file
        """
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)

        self.username = os.getenv("WIKI_USERNAME", "").strip()
        self.password = os.getenv("WIKI_PASSWORD", "").strip()

        self.sources_host = os.getenv("SOURCES_HOST", DEFAULT_SOURCES_HOST)
        self.commons_host = os.getenv("COMMONS_HOST", DEFAULT_COMMONS_HOST)
        self.api_path = os.getenv("WIKI_API_PATH", DEFAULT_API_PATH)
        self.user_agent = os.getenv("WIKI_USER_AGENT", DEFAULT_USER_AGENT)

        self.chunk_size = self._get_positive_int("UPLOAD_CHUNK_SIZE", CHUNK_SIZE)
        self.upload_timeout = self._get_positive_int("UPLOAD_TIMEOUT_SECONDS", UPLOAD_TIMEOUT_SECONDS)

        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def _get_positive_int(self, key: str, default: int) -> int:
        """Get a positive integer environment variable.

        Args:
            key: Environment variable name
            default: Value used when the variable is unset

        Returns:
            Parsed integer value

        Raises:
            ConfigurationError: If the value is not a positive integer
        """
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as e:
            raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e
        if value <= 0:
            raise ConfigurationError(f"{key} must be positive, got {value}")
        return value
