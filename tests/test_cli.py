"""
Tests for the command line interface.
"""

import pytest
from typer.testing import CliRunner

from flightdesk.cli import app
import flightdesk.utils.config as app_config_module
from flightdesk.database.config import get_database_config, reset_database_config
from flightdesk.utils.config import AppConfig, reset_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_database(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.chdir(tmp_path)
    reset_config()
    reset_database_config()
    yield
    reset_database_config()
    reset_config()


def test_init_db():
    result = runner.invoke(app, ["init-db"])

    assert result.exit_code == 0
    assert "Tables ready" in result.output


def test_database_uses_configured_lock_timeout(tmp_path, monkeypatch):
    monkeypatch.delenv("DB_LOCK_TIMEOUT", raising=False)
    monkeypatch.setattr(app_config_module, "_config", AppConfig(
        database_url=f"sqlite:///{tmp_path / 'cli.db'}", db_lock_timeout=3,
    ))

    assert runner.invoke(app, ["init-db"]).exit_code == 0
    assert get_database_config().lock_timeout == 3


def test_seed_and_reports():
    assert runner.invoke(app, ["seed", "--tickets", "1", "--days", "1"]).exit_code == 0

    general = runner.invoke(app, ["report", "general"])
    assert general.exit_code == 0
    assert "General Report" in general.output

    sales = runner.invoke(app, ["report", "sales", "2000-01-01", "2100-12-31"])
    assert sales.exit_code == 0
    assert "By Counter" in sales.output


def test_seed_twice_is_noop():
    runner.invoke(app, ["seed"])
    result = runner.invoke(app, ["seed"])

    assert result.exit_code == 0
    assert "nothing to do" in result.output


def test_sales_report_bad_date():
    result = runner.invoke(app, ["report", "sales", "yesterday", "2026-10-19"])
    assert result.exit_code != 0


def test_sales_report_inverted_range():
    result = runner.invoke(app, ["report", "sales", "2026-10-20", "2026-10-19"])
    assert result.exit_code == 1


def test_simulate():
    runner.invoke(app, ["seed", "--tickets", "0"])

    result = runner.invoke(app, ["simulate", "SU610", "--attempts", "40", "--workers", "4"])

    assert result.exit_code == 0
    assert "Inventory consistent" in result.output


def test_simulate_unknown_flight():
    runner.invoke(app, ["init-db"])

    result = runner.invoke(app, ["simulate", "XX000", "--attempts", "2"])
    assert result.exit_code == 1
