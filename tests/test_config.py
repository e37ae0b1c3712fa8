"""
Test settings validation and database URL handling.
"""

import pytest
from pydantic import ValidationError

from govindexer.core.config import DatabaseConfig, Settings, VoteConflictPolicy
from govindexer.core.database import get_upsert_insert
from govindexer.core.exceptions import ConfigurationError


@pytest.mark.parametrize("url, expected", [
    ("postgresql://u:p@db:5432/gov", "postgresql+asyncpg://u:p@db:5432/gov"),
    ("sqlite:///gov.db", "sqlite+aiosqlite:///gov.db"),
    ("postgresql+asyncpg://u:p@db:5432/gov", "postgresql+asyncpg://u:p@db:5432/gov"),
])
def test_async_driver_urls(url, expected):
    assert DatabaseConfig.get_database_url(url, async_driver=True) == expected


def test_sync_driver_urls():
    assert DatabaseConfig.get_database_url(
        "postgresql+asyncpg://u:p@db/gov", async_driver=False
    ) == "postgresql://u:p@db/gov"
    assert DatabaseConfig.get_database_url(
        "sqlite+aiosqlite:///gov.db", async_driver=False
    ) == "sqlite:///gov.db"


def test_engine_config_depends_on_backend():
    postgres = Settings(database_url="postgresql://u:p@db/gov", database_pool_size=3)
    sqlite = Settings(database_url="sqlite:///gov.db")

    assert DatabaseConfig.get_engine_config(postgres)["pool_size"] == 3
    assert DatabaseConfig.get_engine_config(sqlite) == {}


def test_vote_conflict_policy_from_environment(monkeypatch):
    monkeypatch.setenv("GOVINDEXER_VOTE_CONFLICT_POLICY", "last_vote_wins")

    assert Settings().vote_conflict_policy is VoteConflictPolicy.LAST_VOTE_WINS


def test_defaults(monkeypatch):
    monkeypatch.delenv("GOVINDEXER_VOTE_CONFLICT_POLICY", raising=False)
    monkeypatch.delenv("GOVINDEXER_ENVIRONMENT", raising=False)
    config = Settings()

    assert config.vote_conflict_policy is VoteConflictPolicy.IGNORE
    assert config.is_development


def test_log_settings_are_normalized():
    config = Settings(log_level="debug", log_format="CONSOLE")

    assert config.log_level == "DEBUG"
    assert config.log_format == "console"


@pytest.mark.parametrize("field, value", [
    ("environment", "qa"),
    ("log_level", "LOUD"),
    ("log_format", "xml"),
    ("vote_conflict_policy", "first_vote_wins"),
])
def test_invalid_settings(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_unsupported_dialect():
    with pytest.raises(ConfigurationError) as exc_info:
        get_upsert_insert("mysql")

    assert exc_info.value.details["supported"] == ["postgresql", "sqlite"]
