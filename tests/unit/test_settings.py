"""Settings loading from flat and nested environment variables."""

from pathlib import Path

import pytest

from bookforge.config import Settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "DATABASE_URL",
        "DATABASE_ECHO",
        "DATABASE__URL",
        "CONSOLE_LOG_LEVEL",
        "LOG_FILE",
        "BOOKFORGE_LOCALE",
        "BOOKFORGE_BASE_PATH",
        "APP__PORT",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    config = Settings(_env_file=None)

    assert config.database.url == "sqlite+aiosqlite:///data/db/bookforge.db"
    assert config.database.echo is False
    assert config.logging.console_level == "INFO"
    assert config.app.locale == "en"
    assert config.app.base_path == ""
    assert config.app.port == 8000


def test_flat_env_names(clean_env):
    clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///tmp/library.db")
    clean_env.setenv("CONSOLE_LOG_LEVEL", "WARNING")
    clean_env.setenv("LOG_FILE", "logs/custom.log")
    clean_env.setenv("BOOKFORGE_LOCALE", "de")

    config = Settings(_env_file=None)

    assert config.database.url == "sqlite+aiosqlite:///tmp/library.db"
    assert config.logging.console_level == "WARNING"
    assert config.logging.log_file == Path("logs/custom.log")
    assert config.app.locale == "de"


def test_nested_env_names(clean_env):
    clean_env.setenv("DATABASE__URL", "sqlite+aiosqlite://")
    clean_env.setenv("APP__PORT", "9000")

    config = Settings(_env_file=None)

    assert config.database.url == "sqlite+aiosqlite://"
    assert config.app.port == 9000


def test_base_path_trailing_slash_removed(clean_env):
    clean_env.setenv("BOOKFORGE_BASE_PATH", "/library/")
    assert Settings(_env_file=None).app.base_path == "/library"

