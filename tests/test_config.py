"""Tests for config validation and repr redaction."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from wabbabot.config import WabbaBotSettings, has_config
from wabbabot.metadata.source import DEFAULT_MODLISTS_URL


def test_admins_from_json_list():
    with patch.dict(os.environ, {
        "DISCORD_TOKEN": "test-token",
        "ADMINS": "[1, 2]",
    }, clear=True):
        settings = WabbaBotSettings()
        assert settings.ADMINS == [1, 2]


def test_admins_from_comma_separated_kwarg():
    with patch.dict(os.environ, {"DISCORD_TOKEN": "test-token"}, clear=True):
        settings = WabbaBotSettings(ADMINS="185807760590372874, 42")
        assert settings.ADMINS == [185807760590372874, 42]


def test_missing_token_raises():
    with patch.dict(os.environ, {}, clear=True):
        with pytest.raises(ValidationError):
            WabbaBotSettings()


def test_defaults(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "test-token")
    settings = WabbaBotSettings()
    assert settings.COMMAND_PREFIX == "!"
    assert settings.DATA_DIR == "db"
    assert settings.MODLISTS_URL == DEFAULT_MODLISTS_URL
    assert settings.PRODUCTION is False
    assert settings.LOG_LEVEL == "INFO"


def test_log_level_is_validated(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "test-token")
    assert WabbaBotSettings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        WabbaBotSettings(LOG_LEVEL="chatty")


def test_token_redacted_in_repr():
    with patch.dict(os.environ, {"DISCORD_TOKEN": "secret-token-value"}, clear=True):
        r = repr(WabbaBotSettings())
        assert "secret-token-value" not in r
        assert "DISCORD_TOKEN='***'" in r


def test_has_config_from_environment(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DISCORD_TOKEN", raising=False)
    assert has_config() is False

    (tmp_path / ".env").write_text("DISCORD_TOKEN=abc\n", encoding="utf-8")
    assert has_config() is True
