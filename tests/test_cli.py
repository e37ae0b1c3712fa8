"""
Test the database management commands against a temporary SQLite file.
"""

import logging

import pytest
import structlog
from typer.testing import CliRunner

from govindexer.cli import app


runner = CliRunner()


@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    monkeypatch.setenv("GOVINDEXER_LOG_LEVEL", "WARNING")
    yield
    logging.getLogger().handlers.clear()
    structlog.reset_defaults()


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'cli.db'}"


def test_init_then_params(database_url):
    result = runner.invoke(app, ["init", "--database-url", database_url])
    assert result.exit_code == 0, result.output
    assert "initialized" in result.output

    result = runner.invoke(app, ["params", "--database-url", database_url])
    assert result.exit_code == 0, result.output
    for category in ("gov", "interchain_staking", "emoney_gas_prices"):
        assert category in result.output


def test_health(database_url):
    result = runner.invoke(app, ["health", "--database-url", database_url])

    assert result.exit_code == 0, result.output
    assert "passed" in result.output


def test_health_fails_for_unreachable_database(tmp_path):
    url = f"sqlite:///{tmp_path / 'missing' / 'cli.db'}"

    result = runner.invoke(app, ["health", "--database-url", url])

    assert result.exit_code == 1
    assert "failed" in result.output


def test_drop_requires_confirmation(database_url):
    runner.invoke(app, ["init", "--database-url", database_url])

    aborted = runner.invoke(app, ["drop", "--database-url", database_url], input="n\n")
    assert aborted.exit_code == 1

    dropped = runner.invoke(app, ["drop", "--database-url", database_url, "--yes"])
    assert dropped.exit_code == 0, dropped.output
