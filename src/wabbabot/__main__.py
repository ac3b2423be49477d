"""Entry point for `python -m wabbabot`."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _preprocess_env() -> None:
    """Convert comma-separated env values to JSON arrays.

    pydantic-settings tries ``json.loads()`` on environment values for
    ``list`` fields, so ``ADMINS=123,456`` must become ``[123, 456]`` first.
    """
    for key in ("ADMINS",):
        val = os.environ.get(key, "")
        if val and not val.startswith("["):
            os.environ[key] = json.dumps(
                [int(v.strip()) for v in val.split(",") if v.strip()]
            )


def _configure_logging(level: str, production: bool, log_file: str) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if production:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))
    logging.basicConfig(
        level=level,
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
        handlers=handlers,
        force=True,
    )


def main() -> None:
    # Load .env from canonical locations before anything else.
    load_dotenv("config/.env")
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format=_LOG_FORMAT,
        datefmt=_DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    log = logging.getLogger("wabbabot")

    # Validate config early
    try:
        _preprocess_env()
        from wabbabot.config import get_settings, has_config

        if not has_config():
            log.error("No configuration found (missing DISCORD_TOKEN).")
            log.error("Copy config/.env.example to config/.env and set DISCORD_TOKEN.")
            sys.exit(1)

        settings = get_settings()
    except Exception as e:
        log.error("Configuration error: %s", e)
        log.error("")
        log.error("  How to fix:")
        log.error("  1. Edit config/.env (or set environment variables)")
        log.error("  2. Ensure DISCORD_TOKEN is set")
        log.error("  3. ADMINS should be comma-separated Discord user ids")
        log.error("     e.g. ADMINS=185807760590372874,717201910364635147")
        sys.exit(1)

    _configure_logging(settings.LOG_LEVEL, settings.PRODUCTION, settings.LOG_FILE)

    log.info("Starting WabbaBot...")
    log.info("Command prefix: %s", settings.COMMAND_PREFIX)
    log.info("Data directory: %s", settings.DATA_DIR)

    from wabbabot.bot import WabbaBot
    from wabbabot.storage import StateStoreError

    bot = WabbaBot(settings)
    try:
        bot.run(settings.DISCORD_TOKEN, log_handler=None)
    except StateStoreError as e:
        log.error("Could not load saved state: %s", e)
        log.error("Fix or remove the files in %s and restart.", settings.DATA_DIR)
        sys.exit(1)


if __name__ == "__main__":
    main()
