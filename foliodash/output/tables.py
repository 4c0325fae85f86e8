"""Tabular rendering of aggregated holdings and derived totals.

Builds pandas DataFrames for the holdings views and plain text lines for
the totals panel. Values the aggregator left undefined (e.g. an average
cost over zero units) stay missing in the frame and are printed with a
placeholder, never filled with a computed number.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import pandas as pd

from foliodash.portfolio.holdings import AggregatedInstrument, HoldingLot
from foliodash.portfolio.totals import DerivedTotals

HOLDINGS_COLUMNS = [
    "key",
    "name",
    "portfolios",
    "quantity",
    "average_cost",
    "total_invested",
    "current_value",
    "total_profit_loss",
    "total_profit_loss_percentage",
]

LOTS_COLUMNS = [
    "portfolio_id",
    "portfolio_name",
    "quantity",
    "unit_cost",
    "total_invested",
    "current_value",
    "total_profit_loss",
    "total_profit_loss_percentage",
]


def _missing(value: float | None) -> float:
    return math.nan if value is None else value


def holdings_frame(aggregates: Iterable[AggregatedInstrument]) -> pd.DataFrame:
    """One row per aggregated instrument, in aggregation order."""
    rows = [
        {
            "key": agg.key,
            "name": agg.name,
            "portfolios": agg.n_portfolios,
            "quantity": agg.quantity,
            "average_cost": _missing(agg.average_cost),
            "total_invested": agg.total_invested,
            "current_value": agg.current_value,
            "total_profit_loss": agg.total_profit_loss,
            "total_profit_loss_percentage": _missing(agg.total_profit_loss_percentage),
        }
        for agg in aggregates
    ]
    return pd.DataFrame(rows, columns=HOLDINGS_COLUMNS)


def lots_frame(aggregate: AggregatedInstrument) -> pd.DataFrame:
    """Per-portfolio child rows for an expanded instrument."""
    lots: tuple[HoldingLot, ...] = aggregate.lots
    rows = [
        {
            "portfolio_id": lot.portfolio_id,
            "portfolio_name": lot.portfolio_name,
            "quantity": lot.units,
            "unit_cost": _missing(lot.unit_cost),
            "total_invested": lot.total_invested,
            "current_value": lot.current_value,
            "total_profit_loss": lot.total_profit_loss,
            "total_profit_loss_percentage": _missing(lot.total_profit_loss_percentage),
        }
        for lot in lots
    ]
    return pd.DataFrame(rows, columns=LOTS_COLUMNS)


def render_frame(df: pd.DataFrame, decimals: int = 2, placeholder: str = "--") -> str:
    """Fixed-width text for a frame, with missing cells shown as *placeholder*."""
    if df.empty:
        return "(no holdings)"
    return df.to_string(
        index=False,
        na_rep=placeholder,
        float_format=lambda v: f"{v:,.{decimals}f}",
    )


def _fmt(value: float | None, decimals: int, placeholder: str) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return placeholder
    return f"{value:,.{decimals}f}"


def totals_lines(
    totals: DerivedTotals,
    xirr: float | None = None,
    decimals: int = 2,
    placeholder: str = "--",
) -> list[str]:
    """Summary panel as ``label: value`` lines.

    XIRR comes from the API and is shown as-is; without it the line
    carries the placeholder.
    """
    lines = [
        f"Current value:   {_fmt(totals.total_value, decimals, placeholder)}",
        f"Invested:        {_fmt(totals.total_invested, decimals, placeholder)}",
        f"Total gain:      {_fmt(totals.total_gain, decimals, placeholder)} "
        f"({_fmt(totals.total_gain_percent, decimals, placeholder)}%)",
        f"Day P&L:         {_fmt(totals.day_profit_loss, decimals, placeholder)} "
        f"({_fmt(totals.day_profit_loss_percent, decimals, placeholder)}%)",
    ]
    suffix = "%" if xirr is not None else ""
    lines.append(f"XIRR:            {_fmt(xirr, decimals, placeholder)}{suffix}")
    return lines
