"""Central configuration for WabbaBot.

All settings are loaded from environment variables (with ``.env`` file support
via *python-dotenv*).  Validation and type coercion are handled by
``pydantic-settings``.

Usage::

    from wabbabot.config import get_settings

    settings = get_settings()
    print(settings.COMMAND_PREFIX)

The :func:`get_settings` helper creates the :class:`WabbaBotSettings`
singleton lazily so that importing this module never triggers validation
before the caller has had a chance to load a ``.env`` file or populate the
environment.
"""

from __future__ import annotations

import functools
import logging
import os
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from wabbabot.metadata.source import DEFAULT_MODLISTS_URL

logger = logging.getLogger(__name__)

# Canonical .env locations (checked in order of priority).
ENV_PATHS: list[str] = ["config/.env", ".env"]

# ---------------------------------------------------------------------------
# Settings model
# ---------------------------------------------------------------------------


class WabbaBotSettings(BaseSettings):
    """Validated configuration for the bot.

    Required fields (no defaults):
        ``DISCORD_TOKEN``

    Every other setting carries a default so the bot can start with just the
    token.
    """

    model_config = SettingsConfigDict(
        # .env loading is handled by load_dotenv() in __main__.py so that
        # ADMINS can be preprocessed before pydantic-settings JSON-parses it.
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Discord
    # ------------------------------------------------------------------
    DISCORD_TOKEN: str = Field(
        ...,
        description="Discord bot token from the Developer Portal.",
    )
    DISCORD_CLIENT_ID: int | None = Field(
        default=None,
        description="Application id; used for the invite URL and to refuse the bot as a modlist author.",
    )
    COMMAND_PREFIX: str = Field(
        default="!",
        min_length=1,
        description="Prefix for bot commands.",
    )
    ADMINS: list[int] = Field(
        default_factory=list,
        description="Comma-separated Discord user ids of bot administrators.",
    )

    # ------------------------------------------------------------------
    # Storage and metadata
    # ------------------------------------------------------------------
    DATA_DIR: str = Field(
        default="db",
        description="Directory holding modlists.json and servers.json.",
    )
    MODLISTS_URL: str = Field(
        default=DEFAULT_MODLISTS_URL,
        description="URL of the JSON modlist index used to refresh metadata.",
    )
    METADATA_TIMEOUT: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before a metadata download is abandoned.",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Root log level.",
    )
    PRODUCTION: bool = Field(
        default=False,
        description="Production mode additionally writes the log to LOG_FILE.",
    )
    LOG_FILE: str = Field(
        default="db/logfile",
        description="Log file used in production mode.",
    )

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @field_validator("ADMINS", mode="before")
    @classmethod
    def _split_comma_separated_admins(cls, value: Any) -> list[int]:
        """Accept a comma-separated string of user ids from the environment.

        A list (e.g. when constructed from Python code or from a JSON array)
        is returned unchanged for pydantic to coerce.
        """
        if isinstance(value, str):
            return [int(v.strip()) for v in value.split(",") if v.strip()]
        if isinstance(value, int):
            return [value]
        if isinstance(value, list):
            return value
        raise TypeError(
            f"ADMINS must be a comma-separated string or list, got {type(value).__name__}"
        )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _normalise_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {value}")
        return level

    # ------------------------------------------------------------------
    # Repr safety -- redact secrets in logs / debug output
    # ------------------------------------------------------------------

    _SENSITIVE_FIELDS: ClassVar[set[str]] = {"DISCORD_TOKEN"}

    def __repr__(self) -> str:
        fields = []
        for name in type(self).model_fields:
            val = getattr(self, name)
            if name in self._SENSITIVE_FIELDS:
                val = "***" if val else None
            fields.append(f"{name}={val!r}")
        return f"WabbaBotSettings({', '.join(fields)})"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def find_env_file() -> Path | None:
    """Return the first existing ``.env`` file from :data:`ENV_PATHS`."""
    for candidate in ENV_PATHS:
        p = Path(candidate)
        if p.is_file():
            return p
    return None


def has_config() -> bool:
    """Return ``True`` if a Discord token is available."""
    if os.environ.get("DISCORD_TOKEN"):
        return True
    env_file = find_env_file()
    if env_file is None:
        return False
    text = env_file.read_text(encoding="utf-8", errors="replace")
    return any(
        line.strip().startswith("DISCORD_TOKEN=") and len(line.split("=", 1)[1].strip()) > 0
        for line in text.splitlines()
    )


# ---------------------------------------------------------------------------
# Lazy singleton accessor
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=1)
def get_settings() -> WabbaBotSettings:
    """Return the global :class:`WabbaBotSettings` singleton.

    Raises:
        pydantic.ValidationError: If ``DISCORD_TOKEN`` is missing or any
            value fails validation.
    """
    logger.debug("Initialising WabbaBotSettings from environment.")
    return WabbaBotSettings()  # type: ignore[call-arg]
