import logging

import pytest

from dbpane.core.config import DEFAULT_PREVIEW_ROWS, Settings
from dbpane.core.errors import UsageError

_VARS = (
    "DBPANE_URL",
    "DBPANE_PROFILE",
    "DBPANE_WAREHOUSE_ID",
    "DBPANE_PREVIEW_ROWS",
    "DBPANE_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_when_env_is_empty():
    settings = Settings.from_env()

    assert settings == Settings()
    assert settings.preview_rows == DEFAULT_PREVIEW_ROWS
    assert settings.log_level_value == logging.WARNING


def test_reads_values_from_env(monkeypatch):
    monkeypatch.setenv("DBPANE_URL", "sqlite:///app.db")
    monkeypatch.setenv("DBPANE_PROFILE", " dev ")
    monkeypatch.setenv("DBPANE_WAREHOUSE_ID", "abc123")
    monkeypatch.setenv("DBPANE_PREVIEW_ROWS", "25")
    monkeypatch.setenv("DBPANE_LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.url == "sqlite:///app.db"
    assert settings.profile == "dev"
    assert settings.warehouse_id == "abc123"
    assert settings.preview_rows == 25
    assert settings.log_level == "DEBUG"
    assert settings.log_level_value == logging.DEBUG


@pytest.mark.parametrize("raw", ["many", "-3", "1.5"])
def test_bad_preview_rows_fall_back_to_default(monkeypatch, raw: str):
    monkeypatch.setenv("DBPANE_PREVIEW_ROWS", raw)

    assert Settings.from_env().preview_rows == DEFAULT_PREVIEW_ROWS


def test_unknown_log_level_falls_back(monkeypatch):
    monkeypatch.setenv("DBPANE_LOG_LEVEL", "chatty")

    assert Settings.from_env().log_level == "WARNING"


def test_blank_values_are_treated_as_unset(monkeypatch):
    monkeypatch.setenv("DBPANE_URL", "   ")

    assert Settings.from_env().url is None


def test_with_log_level_overrides_env(monkeypatch):
    monkeypatch.setenv("DBPANE_LOG_LEVEL", "ERROR")

    settings = Settings.from_env().with_log_level(" info ")

    assert settings.log_level == "INFO"
    assert settings.log_level_value == logging.INFO
    assert Settings.from_env().with_log_level(None).log_level == "ERROR"


def test_with_log_level_rejects_unknown_names():
    with pytest.raises(UsageError, match="Unknown log level"):
        Settings().with_log_level("BASIC_FORMAT")


def test_log_level_value_ignores_non_level_names():
    assert Settings(log_level="BASIC_FORMAT").log_level_value == logging.WARNING
