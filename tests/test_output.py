"""Tests for holdings tables and the totals panel."""

from __future__ import annotations

import math

from foliodash.output.tables import (
    HOLDINGS_COLUMNS,
    LOTS_COLUMNS,
    holdings_frame,
    lots_frame,
    render_frame,
    totals_lines,
)
from foliodash.portfolio.holdings import StockLot, aggregate_holdings, aggregate_lots, parse_holdings
from foliodash.portfolio.totals import DerivedTotals, compute_totals
from payloads import stock_payload


class TestHoldingsFrame:
    def test_one_row_per_aggregate(self, summary_payload):
        aggs = aggregate_holdings(parse_holdings(summary_payload["holdings"]))["mutual_funds"]
        df = holdings_frame(aggs)
        assert list(df.columns) == HOLDINGS_COLUMNS
        assert list(df["key"]) == ["INF000A", "INF000B"]
        assert df.loc[0, "portfolios"] == 2
        assert df.loc[0, "average_cost"] == 150.0

    def test_undefined_cost_stays_missing(self):
        lots = [
            StockLot.from_payload(stock_payload("X", portfolio_id=1, quantity=5)),
            StockLot.from_payload(stock_payload("X", portfolio_id=2, quantity=-5)),
        ]
        df = holdings_frame(aggregate_lots(lots))
        assert math.isnan(df.loc[0, "average_cost"])

    def test_empty(self):
        df = holdings_frame([])
        assert df.empty
        assert list(df.columns) == HOLDINGS_COLUMNS


class TestLotsFrame:
    def test_children_in_encounter_order(self, summary_payload):
        aggs = aggregate_holdings(parse_holdings(summary_payload["holdings"]))["mutual_funds"]
        df = lots_frame(aggs[0])
        assert list(df.columns) == LOTS_COLUMNS
        assert list(df["portfolio_id"]) == [1, 2]
        assert list(df["unit_cost"]) == [100.0, 200.0]


class TestRenderFrame:
    def test_placeholder_for_missing(self):
        lots = [
            StockLot.from_payload(stock_payload("X", portfolio_id=1, quantity=5)),
            StockLot.from_payload(stock_payload("X", portfolio_id=2, quantity=-5)),
        ]
        text = render_frame(holdings_frame(aggregate_lots(lots)), placeholder="n/a")
        assert "n/a" in text
        assert "nan" not in text.lower()

    def test_empty_frame(self):
        assert render_frame(holdings_frame([])) == "(no holdings)"


class TestTotalsLines:
    def test_values_rounded(self):
        totals = compute_totals(
            {"MUTUAL_FUND": {"total_invested": 100000, "current_value": 125000,
                             "total_gains": 25000, "one_day_profit_loss": 1000}},
        )
        text = "\n".join(totals_lines(totals, xirr=14.256))
        assert "125,000.00" in text
        assert "(25.00%)" in text
        assert "(0.81%)" in text
        assert "14.26%" in text

    def test_missing_xirr_placeholder(self):
        lines = totals_lines(DerivedTotals(), placeholder="--")
        assert lines[-1].startswith("XIRR:")
        assert lines[-1].endswith("--")
        assert len(lines) == 5
