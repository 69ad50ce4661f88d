"""Runtime settings read from the process environment."""

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, SecretStr

from nounproject_mcp.errors import ConfigurationError

# ─── Configuration ───────────────────────────────────────────────────────────

BASE_URL = "https://api.thenounproject.com"
REQUEST_TIMEOUT = 30.0

API_KEY_ENV = "NOUN_PROJECT_API_KEY"
API_SECRET_ENV = "NOUN_PROJECT_API_SECRET"
BASE_URL_ENV = "NOUN_PROJECT_BASE_URL"
TIMEOUT_ENV = "NOUN_PROJECT_TIMEOUT"
LOG_LEVEL_ENV = "NOUN_PROJECT_LOG_LEVEL"
LOG_JSON_ENV = "NOUN_PROJECT_LOG_JSON"

_TRUTHY = {"1", "true", "yes", "on"}


class Credentials(BaseModel):
    """OAuth consumer key and secret for The Noun Project API."""
    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    api_secret: SecretStr


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    credentials: Credentials
    base_url: str = BASE_URL
    timeout: float = REQUEST_TIMEOUT
    log_level: int = logging.WARNING
    log_json: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to ``os.environ``.

        Raises:
            ConfigurationError: If the API key or secret is missing, or an
                optional setting cannot be parsed.
        """
        env = os.environ if environ is None else environ

        api_key = env.get(API_KEY_ENV, "").strip()
        api_secret = env.get(API_SECRET_ENV, "").strip()
        if not api_key or not api_secret:
            raise ConfigurationError(f"{API_KEY_ENV} and {API_SECRET_ENV} must be set")

        raw_timeout = env.get(TIMEOUT_ENV, "").strip()
        try:
            timeout = float(raw_timeout) if raw_timeout else REQUEST_TIMEOUT
        except ValueError:
            raise ConfigurationError(f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ConfigurationError(f"{TIMEOUT_ENV} must be positive, got {raw_timeout!r}")

        level_name = env.get(LOG_LEVEL_ENV, "").strip().upper() or "WARNING"
        log_level = logging.getLevelName(level_name)
        if not isinstance(log_level, int):
            raise ConfigurationError(f"{LOG_LEVEL_ENV} is not a logging level: {level_name!r}")

        return cls(
            credentials=Credentials(api_key=api_key, api_secret=api_secret),
            base_url=env.get(BASE_URL_ENV, "").strip().rstrip("/") or BASE_URL,
            timeout=timeout,
            log_level=log_level,
            log_json=env.get(LOG_JSON_ENV, "").strip().lower() in _TRUTHY,
        )
