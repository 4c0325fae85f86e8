"""Tests for the click command line interface."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests
from click.testing import CliRunner

from foliodash.cli.main import cli


def _mock_response(payload, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def run(config_file):
    """Invoke the CLI against the temp config."""
    runner = CliRunner()

    def _run(*args):
        return runner.invoke(cli, ["--config", str(config_file), *args])

    return _run


class TestConfigCommands:
    def test_validate(self, run):
        result = run("config", "validate")
        assert result.exit_code == 0
        assert "Config is valid." in result.output

    def test_show_masks_token(self, run):
        result = run("config", "show")
        assert result.exit_code == 0
        assert "***" in result.output
        assert '"tok"' not in result.output

    def test_validate_rejects_bad_config(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("api:\n  timeout: -5\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "config", "validate"])
        assert result.exit_code == 1
        assert "Config validation failed" in result.output


class TestInit:
    def test_creates_database_and_config(self, run, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        result = run("init")
        assert result.exit_code == 0, result.output
        assert "Schema version: 1" in result.output
        assert (tmp_path / "test.db").exists()
        assert (tmp_path / ".foliodash" / "config.yaml").exists()


class TestSelectCommands:
    def test_show_defaults(self, run):
        result = run("select", "show")
        assert result.exit_code == 0
        assert "Asset types: all" in result.output
        assert "Portfolios:  none" in result.output

    def test_asset_toggle_persists(self, run):
        result = run("select", "asset", "stocks")
        assert result.exit_code == 0
        assert "Asset types: mutual-funds, crypto, gold, property, fixed-income" in result.output

        result = run("select", "show")
        assert "stocks" not in result.output.split("Asset types:")[1].splitlines()[0]

    def test_unknown_asset(self, run):
        result = run("select", "asset", "bonds")
        assert result.exit_code == 1
        assert "Unknown asset type 'bonds'" in result.output

    def test_query_overrides_store(self, run):
        run("select", "portfolio", "9")
        result = run("--query", "portfolios=2,1", "select", "show")
        assert "Portfolios:  1, 2" in result.output

    def test_portfolio_toggle_and_only(self, run):
        run("select", "portfolio", "3")
        run("select", "portfolio", "5")
        result = run("select", "only", "5")
        assert "Portfolios:  5" in result.output
        assert "portfolios=5" in result.output

    def test_clear_portfolios(self, run):
        run("select", "portfolio", "3")
        result = run("select", "clear-portfolios")
        assert "Portfolios:  none" in result.output

    def test_all_assets(self, run):
        run("select", "asset", "gold")
        result = run("select", "all-assets")
        assert "Asset types: all" in result.output

    def test_sync_drops_stale(self, run):
        run("--query", "portfolios=1,2,3", "select", "show")
        listing = _mock_response([{"id": 1, "portfolioName": "A"}, {"id": 3, "portfolioName": "B"}])
        with patch("requests.get", return_value=listing):
            result = run("select", "sync")
        assert result.exit_code == 0
        assert "stale portfolio IDs removed" in result.output
        assert "Portfolios:  1, 3 (all)" in result.output

    def test_sync_api_failure(self, run):
        with patch("requests.get", side_effect=requests.ConnectionError("down")):
            result = run("select", "sync")
        assert result.exit_code == 1

    def test_all_portfolios(self, run):
        listing = _mock_response([{"id": 4}, {"id": 6}])
        with patch("requests.get", return_value=listing):
            result = run("select", "all-portfolios")
        assert "Portfolios:  4, 6 (all)" in result.output


class TestHoldingsCommand:
    def test_from_file(self, run, summary_file):
        result = run("holdings", "--file", str(summary_file))
        assert result.exit_code == 0, result.output
        assert "Mutual funds (2)" in result.output
        assert "Stocks (1)" in result.output
        assert "INF000A" in result.output
        assert "150.00" in result.output

    def test_kind_filter(self, run, summary_file):
        result = run("holdings", "--file", str(summary_file), "--kind", "stocks")
        assert "Stocks (1)" in result.output
        assert "Mutual funds" not in result.output

    def test_follows_asset_selection(self, run, summary_file):
        result = run("--query", "assets=stocks", "holdings", "--file", str(summary_file))
        assert "Stocks (1)" in result.output
        assert "Mutual funds" not in result.output

    def test_expand(self, run, summary_file):
        result = run("holdings", "--file", str(summary_file), "--kind", "funds", "--expand")
        assert "across 2 portfolios" in result.output

    def test_no_portfolios_selected(self, run):
        with patch("requests.get") as mock_get:
            result = run("holdings")
        assert result.exit_code == 0
        assert "No portfolios selected" in result.output
        mock_get.assert_not_called()

    def test_bad_file(self, run, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("[1, 2]")
        result = run("holdings", "--file", str(bad))
        assert result.exit_code == 1


class TestSummaryCommand:
    def test_from_file(self, run, summary_file):
        result = run("--query", "assets=mutual-funds", "summary", "--file", str(summary_file))
        assert result.exit_code == 0, result.output
        assert "Investor: Test Investor" in result.output
        assert "125,000.00" in result.output
        assert "(25.00%)" in result.output
        assert "XIRR:            --" in result.output

    def test_from_api_then_cache(self, run, summary_payload):
        def fake_get(url, **kwargs):
            if url.endswith("/xirr/consolidated"):
                return _mock_response({"xirr": 11.5})
            return _mock_response(summary_payload)

        with patch("requests.get", side_effect=fake_get):
            result = run("--query", "portfolios=1,2", "summary")
        assert result.exit_code == 0, result.output
        assert "137,000.00" in result.output
        assert "11.50%" in result.output

        with patch("requests.get", side_effect=requests.ConnectionError("down")):
            result = run("summary")
        assert result.exit_code == 0, result.output
        assert "last cached summary" in result.output
        assert "137,000.00" in result.output

    def test_api_failure_without_cache(self, run):
        with patch("requests.get", side_effect=requests.ConnectionError("down")):
            result = run("--query", "portfolios=1", "summary")
        assert result.exit_code == 1
