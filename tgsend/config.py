"""Bot credential loading and application settings."""

from __future__ import annotations

import logging
import os
import re
from collections.abc import MutableMapping
from pathlib import Path

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

TOKEN_ENV_VAR = "TELEGRAM_BOT_TOKEN"
LOCAL_ENV_FILE = "conf.env"
DEFAULT_API_BASE = "https://api.telegram.org"

_TOKEN_LINE = re.compile(rf"{TOKEN_ENV_VAR}=(.+)")


class ConfigurationError(RuntimeError):
    """Raised when the bot token cannot be resolved."""


def _read_local_env(
    env_file: Path, environ: MutableMapping[str, str],
) -> str | None:
    """Merge conf.env into environ and return the token if it now resolves.

    Falls back to a raw regex scan of the file when the parsed values do
    not yield a token. A missing or unreadable file is only a warning.
    """
    try:
        for key, value in dotenv_values(env_file).items():
            if value is not None:
                environ.setdefault(key, value)
        token = environ.get(TOKEN_ENV_VAR)
        if token:
            return token

        match = _TOKEN_LINE.search(env_file.read_text(encoding="utf-8"))
        if match:
            return match.group(1).strip() or None
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not load %s: %s", env_file, exc)
    return None


def load_bot_token(
    environ: MutableMapping[str, str] | None = None,
    base_dir: str | Path | None = None,
) -> str:
    """Resolve the bot token from the environment, then from conf.env."""
    if environ is None:
        environ = os.environ

    token = environ.get(TOKEN_ENV_VAR)
    if token:
        return token

    env_file = Path(base_dir) if base_dir is not None else Path.cwd()
    token = _read_local_env(env_file / LOCAL_ENV_FILE, environ)

    if not token:
        raise ConfigurationError(f"{TOKEN_ENV_VAR} not found in environment variables")
    environ[TOKEN_ENV_VAR] = token
    return token


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    bot_token: str = Field(min_length=1, repr=False)
    api_base: str = DEFAULT_API_BASE
    environment: str | None = None
    request_timeout: float | None = None

    @property
    def development(self) -> bool:
        return self.environment == "development"

    @classmethod
    def from_env(
        cls,
        environ: MutableMapping[str, str] | None = None,
        base_dir: str | Path | None = None,
    ) -> Settings:
        """Build settings once at startup. Raises ConfigurationError without a token."""
        if environ is None:
            environ = os.environ
        bot_token = load_bot_token(environ, base_dir)
        timeout = environ.get("TELEGRAM_TIMEOUT")
        return cls(
            bot_token=bot_token,
            api_base=environ.get("TELEGRAM_API_BASE") or DEFAULT_API_BASE,
            environment=environ.get("NODE_ENV") or None,
            request_timeout=float(timeout) if timeout else None,
        )
