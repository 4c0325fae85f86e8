"""Portfolio summary response schema.

Maps the API's single- and multi-portfolio summary payloads onto one
explicit shape. Missing monetary fields default to zero at this boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from foliodash.portfolio.holdings import (
    HoldingsData,
    optional_float,
    parse_holdings,
    safe_float,
    safe_int,
    safe_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetBreakdown:
    """Per-asset-type totals from ``breakdown_by_asset_type``."""

    total_invested: float = 0.0
    current_value: float = 0.0
    unrealized_gains: float = 0.0
    realized_gains: float = 0.0
    total_gains: float = 0.0
    returns_percentage: float = 0.0
    holding_count: int = 0
    one_day_profit_loss: float = 0.0
    one_day_profit_loss_percentage: float | None = None

    @property
    def previous_value(self) -> float:
        """Yesterday's value, reconstructed as current value minus today's change."""
        return self.current_value - self.one_day_profit_loss

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> AssetBreakdown:
        return cls(
            total_invested=safe_float(payload.get("total_invested")),
            current_value=safe_float(payload.get("current_value")),
            unrealized_gains=safe_float(payload.get("unrealized_gains")),
            realized_gains=safe_float(payload.get("realized_gains")),
            total_gains=safe_float(payload.get("total_gains")),
            returns_percentage=safe_float(payload.get("returns_percentage")),
            holding_count=safe_int(payload.get("holding_count")),
            one_day_profit_loss=safe_float(payload.get("one_day_profit_loss")),
            one_day_profit_loss_percentage=optional_float(
                payload.get("one_day_profit_loss_percentage")
            ),
        )


@dataclass(frozen=True)
class Overview:
    total_invested: float = 0.0
    current_value: float = 0.0
    realized_profit_loss: float = 0.0
    unrealized_profit_loss: float = 0.0
    total_profit_loss: float = 0.0
    total_profit_loss_percentage: float = 0.0
    unrealized_profit_loss_percentage: float = 0.0
    realized_profit_loss_percentage: float = 0.0

    @classmethod
    def from_payload(cls, payload: Any) -> Overview:
        if not isinstance(payload, dict):
            return cls()
        return cls(**{name: safe_float(payload.get(name)) for name in cls.__dataclass_fields__})


@dataclass(frozen=True)
class PortfolioRef:
    """A valid portfolio identifier with its display name."""

    id: int
    name: str = ""


@dataclass(frozen=True)
class PortfolioSummary:
    investor_name: str = ""
    portfolio_ids: tuple[int, ...] = ()
    overview: Overview = field(default_factory=Overview)
    breakdown: dict[str, AssetBreakdown] = field(default_factory=dict)
    holdings: HoldingsData = field(default_factory=HoldingsData)

    @property
    def is_multi_portfolio(self) -> bool:
        return len(self.portfolio_ids) > 1


def parse_breakdown(payload: Any) -> dict[str, AssetBreakdown]:
    """Parse ``breakdown_by_asset_type``; non-object entries are skipped."""
    if not isinstance(payload, dict):
        return {}
    return {
        str(key): AssetBreakdown.from_payload(value)
        for key, value in payload.items()
        if isinstance(value, dict)
    }


def parse_summary(payload: dict[str, Any]) -> PortfolioSummary:
    """Parse a single- or multi-portfolio summary response.

    Single responses carry ``portfolio_id`` and ``overview``; multi
    responses carry ``portfolio_ids`` and ``aggregate_overview``.
    """
    if "portfolio_ids" in payload:
        raw_ids = payload.get("portfolio_ids")
        if not isinstance(raw_ids, list):
            raw_ids = []
        ids = tuple(safe_int(i) for i in raw_ids if safe_str(i).lstrip("-").isdigit())
        overview = Overview.from_payload(payload.get("aggregate_overview"))
    else:
        single = payload.get("portfolio_id")
        ids = (safe_int(single),) if single is not None else ()
        overview = Overview.from_payload(payload.get("overview"))

    return PortfolioSummary(
        investor_name=safe_str(payload.get("investor_name")),
        portfolio_ids=ids,
        overview=overview,
        breakdown=parse_breakdown(payload.get("breakdown_by_asset_type")),
        holdings=parse_holdings(payload.get("holdings")),
    )


def parse_portfolio_list(payload: Any) -> list[PortfolioRef]:
    """Parse the portfolio list into refs, skipping entries without an integer id."""
    if not isinstance(payload, list):
        return []
    refs: list[PortfolioRef] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        raw_id = entry.get("id")
        if isinstance(raw_id, bool) or not isinstance(raw_id, int):
            logger.debug("Skipping portfolio without integer id: %r", entry)
            continue
        name = entry.get("portfolioName") or entry.get("name") or ""
        refs.append(PortfolioRef(id=raw_id, name=str(name)))
    return refs
