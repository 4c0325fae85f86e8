"""Tests for summary parsing and derived totals."""

from __future__ import annotations

import pytest

from foliodash.portfolio.summary import (
    AssetBreakdown,
    PortfolioSummary,
    parse_breakdown,
    parse_portfolio_list,
    parse_summary,
)
from foliodash.portfolio.totals import DerivedTotals, compute_totals, totals_for_selection

MF_ONLY = {
    "MUTUAL_FUND": {
        "total_invested": 100000,
        "current_value": 125000,
        "total_gains": 25000,
        "one_day_profit_loss": 1000,
    },
}


class TestComputeTotals:
    def test_end_to_end_example(self):
        totals = compute_totals(MF_ONLY, ["MUTUAL_FUND"])
        assert totals.total_value == 125000
        assert totals.total_invested == 100000
        assert totals.total_gain == 25000
        assert totals.total_gain_percent == pytest.approx(25.0)
        assert totals.day_profit_loss == 1000
        # against previous value 124000
        assert totals.day_profit_loss_percent == pytest.approx(1000 / 124000 * 100)
        assert round(totals.day_profit_loss_percent, 3) == 0.806

    def test_unselected_keys_ignored(self, summary_payload):
        breakdown = summary_payload["breakdown_by_asset_type"]
        totals = compute_totals(breakdown, ["EQUITY_STOCK"])
        assert totals.total_value == 12000
        assert totals.day_profit_loss == -200

    def test_none_selects_everything(self, summary_payload):
        totals = compute_totals(summary_payload["breakdown_by_asset_type"])
        assert totals.total_value == 137000
        assert totals.total_invested == 110000
        assert totals.day_profit_loss == 800
        assert totals.day_profit_loss_percent == pytest.approx(800 / (137000 - 800) * 100)

    def test_missing_key_contributes_nothing(self):
        assert compute_totals(MF_ONLY, ["CRYPTO"]) == DerivedTotals()

    def test_empty_selection(self):
        assert compute_totals(MF_ONLY, []) == DerivedTotals()

    def test_zero_invested_percent_is_zero(self):
        totals = compute_totals({"CRYPTO": {"current_value": 500, "total_gains": 500}})
        assert totals.total_gain_percent == 0.0

    def test_zero_previous_value_percent_is_zero(self):
        """Everything bought today: previous value is zero."""
        totals = compute_totals({"STOCK": {"current_value": 100, "one_day_profit_loss": 100}})
        assert totals.day_profit_loss_percent == 0.0

    def test_missing_day_change_is_zero(self):
        totals = compute_totals({"MUTUAL_FUND": {"total_invested": 10, "current_value": 12}})
        assert totals.day_profit_loss == 0.0
        assert totals.day_profit_loss_percent == 0.0

    def test_accepts_parsed_breakdown(self):
        parsed = parse_breakdown(MF_ONLY)
        assert isinstance(parsed["MUTUAL_FUND"], AssetBreakdown)
        assert compute_totals(parsed, ["MUTUAL_FUND"]) == compute_totals(MF_ONLY, ["MUTUAL_FUND"])


class TestTotalsForSelection:
    def test_maps_tags_to_breakdown_keys(self, summary_payload):
        totals = totals_for_selection(summary_payload["breakdown_by_asset_type"], ["mutual-funds"])
        assert totals.total_value == 125000

    def test_multiple_tags(self, summary_payload):
        totals = totals_for_selection(
            summary_payload["breakdown_by_asset_type"], ["stocks", "mutual-funds"],
        )
        assert totals.total_value == 137000

    def test_custom_mapping(self):
        totals = totals_for_selection(MF_ONLY, ["funds"], {"funds": "MUTUAL_FUND"})
        assert totals.total_invested == 100000

    def test_unmapped_tag_ignored(self):
        assert totals_for_selection(MF_ONLY, ["unknown"]) == DerivedTotals()


class TestParseSummary:
    def test_multi_portfolio_shape(self, summary_payload):
        summary = parse_summary(summary_payload)
        assert summary.investor_name == "Test Investor"
        assert summary.portfolio_ids == (1, 2)
        assert summary.is_multi_portfolio
        assert summary.overview.current_value == 137000
        assert set(summary.breakdown) == {"MUTUAL_FUND", "EQUITY_STOCK"}
        assert len(summary.holdings.mutual_funds) == 3
        assert len(summary.holdings.stocks) == 1

    def test_single_portfolio_shape(self):
        summary = parse_summary({
            "portfolio_id": 4,
            "overview": {"total_invested": 50, "current_value": 60},
        })
        assert summary.portfolio_ids == (4,)
        assert not summary.is_multi_portfolio
        assert summary.overview.total_invested == 50
        assert summary.holdings.is_empty

    def test_empty_payload(self):
        summary = parse_summary({})
        assert summary.portfolio_ids == ()
        assert summary.breakdown == {}

    def test_scalar_portfolio_ids(self):
        """A non-list ``portfolio_ids`` reads as no portfolios."""
        summary = parse_summary({"portfolio_ids": 5, "breakdown_by_asset_type": {}})
        assert summary.portfolio_ids == ()

    @pytest.mark.parametrize("payload", [
        {"portfolio_ids": 5},
        {"portfolio_ids": "1,2"},
        {"portfolio_ids": {"a": 1}},
        {"portfolio_ids": None, "aggregate_overview": None},
        {"portfolio_ids": [1, "x", None, {"id": 2}], "holdings": [1, 2]},
        {"portfolio_ids": [1], "aggregate_overview": [3]},
        {"portfolio_ids": [1], "holdings": {"mutual_funds": {"isin": "INF1"}, "stocks": 7}},
        {"portfolio_id": {"x": 1}, "overview": "bad"},
        {"holdings": "x", "breakdown_by_asset_type": [1]},
    ])
    def test_malformed_shapes_do_not_raise(self, payload):
        summary = parse_summary(payload)
        assert isinstance(summary, PortfolioSummary)
        assert summary.holdings.is_empty
        assert summary.breakdown == {}

    def test_breakdown_skips_non_objects(self):
        assert set(parse_breakdown({"A": {}, "B": 3, "C": None})) == {"A"}

    def test_previous_value(self):
        entry = AssetBreakdown.from_payload({"current_value": 125000, "one_day_profit_loss": 1000})
        assert entry.previous_value == 124000


class TestParsePortfolioList:
    def test_names_from_either_field(self):
        refs = parse_portfolio_list([
            {"id": 1, "portfolioName": "Retirement"},
            {"id": 2, "name": "Trading"},
        ])
        assert [(r.id, r.name) for r in refs] == [(1, "Retirement"), (2, "Trading")]

    def test_skips_entries_without_int_id(self):
        refs = parse_portfolio_list([{"id": "3"}, {"id": True}, {"name": "x"}, "junk", {"id": 5}])
        assert [r.id for r in refs] == [5]

    def test_non_list(self):
        assert parse_portfolio_list({"id": 1}) == []
