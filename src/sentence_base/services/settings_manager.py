"""Settings Manager - Handles signing secret, token lifetimes and queue limits."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from sentence_base.core import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ACCESS_TOKEN_TTL_SECONDS = 3600
DEFAULT_REFRESH_TOKEN_TTL_SECONDS = 43800
DEFAULT_MAX_PENDING_SENTENCES = 250
DEFAULT_DATABASE_FILENAME = "sentence_base.db"


class SettingsManager:
    """
    Manages process-wide settings.

    Reads a .env file from the project root once, then answers every query
    from the environment so that integer knobs can be changed between calls.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = Path(project_root) / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = Path(project_root)

    def get_token_signing_secret(self) -> str:
        """Get the HMAC secret used to sign tokens.

        Raises:
            ConfigurationError: If TOKEN_SIGNING_SECRET is missing or blank.
        """
        secret = os.getenv("TOKEN_SIGNING_SECRET")
        if not secret or not secret.strip():
            raise ConfigurationError("TOKEN_SIGNING_SECRET must be set")
        return secret

    def get_access_token_ttl(self) -> int:
        return self._get_int("ACCESS_TOKEN_TTL_SECONDS", DEFAULT_ACCESS_TOKEN_TTL_SECONDS)

    def get_refresh_token_ttl(self) -> int:
        return self._get_int("REFRESH_TOKEN_TTL_SECONDS", DEFAULT_REFRESH_TOKEN_TTL_SECONDS)

    def get_max_pending_sentences(self) -> int:
        return self._get_int("MAX_PENDING_SENTENCES", DEFAULT_MAX_PENDING_SENTENCES)

    def get_database_path(self) -> Path:
        value = os.getenv("DATABASE_PATH")
        if value and value.strip():
            return Path(value.strip())
        return self._project_root / DEFAULT_DATABASE_FILENAME

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)

    @staticmethod
    def _get_int(name: str, default: int) -> int:
        raw = os.getenv(name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError:
            logger.warning("Ignoring non-integer %s=%r, using %d", name, raw, default)
            return default
        if value < 0:
            logger.warning("Ignoring negative %s=%r, using %d", name, raw, default)
            return default
        return value
