"""Tests for CosmoPort CLI commands."""
from __future__ import annotations

from datetime import date
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

from app.cli import app
from app.models.base import ShipTypeEnum
from app.modules.ship_errors import ShipValidationError
from app.modules.ship_query import ShipOrder


runner = CliRunner()


def _ship(**overrides):
    base = dict(
        id=1, name="Eagle", planet="Earth", ship_type=ShipTypeEnum.TRANSPORT,
        prod_date=date(2989, 1, 1), is_used=False, speed=0.79, crew_size=4527, rating=2.04,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


# ---------------------------------------------------------------------------
# init-db / serve
# ---------------------------------------------------------------------------


@patch("app.database.init_db")
def test_init_db(mock_init):
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 0
    assert "Database ready" in result.output
    mock_init.assert_called_once()


@patch("app.database.init_db", side_effect=Exception("database locked"))
def test_init_db_failure(mock_init):
    result = runner.invoke(app, ["init-db"])
    assert result.exit_code == 1
    assert "database locked" in result.output


@patch("uvicorn.run")
@patch("app.database.init_db")
def test_serve_creates_tables_and_runs(mock_init, mock_run):
    result = runner.invoke(app, ["serve", "--port", "9000"])
    assert result.exit_code == 0
    mock_init.assert_called_once()
    mock_run.assert_called_once_with("app.main:app", host="127.0.0.1", port=9000)


# ---------------------------------------------------------------------------
# seed
# ---------------------------------------------------------------------------


@patch("app.modules.sample_ships.seed_sample_ships", return_value={"inserted": 14, "skipped": 0})
@patch("app.database.SessionLocal")
@patch("app.database.init_db")
def test_seed_inserts(mock_init, mock_sl, mock_seed):
    mock_db = MagicMock()
    mock_sl.return_value = mock_db
    result = runner.invoke(app, ["seed"])
    assert result.exit_code == 0
    assert "Inserted 14 ships" in result.output
    mock_seed.assert_called_once_with(mock_db, path=None, force=False)
    mock_db.close.assert_called_once()


@patch("app.modules.sample_ships.seed_sample_ships", return_value={"inserted": 0, "skipped": 6})
@patch("app.database.SessionLocal")
@patch("app.database.init_db")
def test_seed_skips_populated_db(mock_init, mock_sl, mock_seed):
    result = runner.invoke(app, ["seed"])
    assert result.exit_code == 0
    assert "already present" in result.output


@patch("app.modules.sample_ships.seed_sample_ships", side_effect=FileNotFoundError("Sample ships file not found: x.yaml"))
@patch("app.database.SessionLocal")
@patch("app.database.init_db")
def test_seed_missing_file(mock_init, mock_sl, mock_seed):
    result = runner.invoke(app, ["seed", "--file", "x.yaml"])
    assert result.exit_code == 1
    assert "not found" in result.output


@patch("app.modules.sample_ships.seed_sample_ships", side_effect=ShipValidationError(["speed must be between 0.01 and 0.99"]))
@patch("app.database.SessionLocal")
@patch("app.database.init_db")
def test_seed_invalid_ship(mock_init, mock_sl, mock_seed):
    mock_db = MagicMock()
    mock_sl.return_value = mock_db
    result = runner.invoke(app, ["seed", "--force"])
    assert result.exit_code == 1
    assert "Invalid sample ship" in result.output
    mock_db.rollback.assert_called_once()


# ---------------------------------------------------------------------------
# list / count
# ---------------------------------------------------------------------------


@patch("app.modules.ship_query.list_ships")
@patch("app.database.SessionLocal")
def test_list_renders_table(mock_sl, mock_list):
    mock_list.return_value = [_ship()]
    result = runner.invoke(app, ["list", "--planet", "Ear", "--used-only", "--order", "rating"])
    assert result.exit_code == 0
    assert "Eagle" in result.output

    args, kwargs = mock_list.call_args
    params = args[1]
    assert params.planet == "Ear"
    assert params.is_used is True
    assert params.name is None
    assert kwargs["order"] is ShipOrder.RATING
    assert kwargs["page_size"] == 20


@patch("app.modules.ship_query.list_ships", return_value=[])
@patch("app.database.SessionLocal")
def test_list_no_ships(mock_sl, mock_list):
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0
    assert "No ships found" in result.output
    assert mock_list.call_args[0][1].is_used is None


@patch("app.modules.ship_query.count_ships", return_value=7)
@patch("app.database.SessionLocal")
def test_count_years_become_epoch_ms(mock_sl, mock_count):
    result = runner.invoke(app, ["count", "--after", "3000", "--before", "3010", "--new-only"])
    assert result.exit_code == 0
    assert "7" in result.output

    params = mock_count.call_args[0][1]
    assert params.is_used is False
    assert params.after == 32503680000000  # 3000-01-01T00:00:00Z
    assert params.before is not None and params.before > params.after


def test_used_and_new_are_exclusive():
    result = runner.invoke(app, ["count", "--used-only", "--new-only"])
    assert result.exit_code != 0
