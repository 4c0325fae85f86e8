"""Portfolio data: holdings aggregation, summary schema, derived totals.

Public API:
  parse_summary       - Summary payload -> PortfolioSummary
  aggregate_holdings  - Merge lots across portfolios, per instrument class
  aggregate_lots      - Merge lots of one instrument class
  compute_totals      - Breakdown -> DerivedTotals for selected keys
  totals_for_selection - Same, keyed by asset-type filter tags
"""

from foliodash.portfolio.holdings import (
    AggregatedInstrument,
    FundLot,
    HoldingsData,
    MetalLot,
    StockLot,
    aggregate_holdings,
    aggregate_lots,
)
from foliodash.portfolio.summary import PortfolioRef, PortfolioSummary, parse_summary
from foliodash.portfolio.totals import DerivedTotals, compute_totals, totals_for_selection

__all__ = [
    "AggregatedInstrument",
    "DerivedTotals",
    "FundLot",
    "HoldingsData",
    "MetalLot",
    "PortfolioRef",
    "PortfolioSummary",
    "StockLot",
    "aggregate_holdings",
    "aggregate_lots",
    "compute_totals",
    "parse_summary",
    "totals_for_selection",
]
