"""Holding lots and cross-portfolio aggregation.

Consolidates per-portfolio lots of the same instrument into one row with
summed amounts, total units, and a quantity-weighted average cost. The
contributing lots are kept (in encounter order) so a dashboard can expand
an aggregate into its per-portfolio rows.

Instrument identity:
  - mutual funds  -> ISIN
  - stocks        -> ticker symbol
  - metals        -> scheme code (e.g. GOLD_24K)

API payloads are loosely typed. Every lot is mapped to an explicit schema
at the boundary (``from_payload``) so the aggregation itself never has to
ask whether a field is present.
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Iterable

logger = logging.getLogger(__name__)

SUMMED_FIELDS = (
    "total_invested",
    "current_value",
    "realized_profit_loss",
    "unrealized_profit_loss",
    "total_profit_loss",
)

# Summed unit counts closer to zero than this are treated as zero.
_ZERO_UNITS = 1e-9


def safe_float(val: Any) -> float:
    """Convert a value to float, returning 0.0 on failure.

    Non-finite values (NaN, inf) are also mapped to 0.0 so they can never
    leak into a sum.
    """
    try:
        result = float(val or 0)
    except (ValueError, TypeError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def optional_float(val: Any) -> float | None:
    """Like :func:`safe_float` but missing/unparsable values become None."""
    if val is None or val == "":
        return None
    try:
        result = float(val)
    except (ValueError, TypeError):
        return None
    return result if math.isfinite(result) else None


def safe_int(val: Any) -> int:
    try:
        return int(val)
    except (ValueError, TypeError):
        return 0


def safe_str(val: Any) -> str:
    return "" if val is None else str(val).strip()


# ---------------------------------------------------------------------------
# Lots
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class HoldingLot(ABC):
    """One portfolio's position in one instrument."""

    portfolio_id: int = 0
    portfolio_name: str = ""
    total_invested: float = 0.0
    current_value: float = 0.0
    realized_profit_loss: float = 0.0
    unrealized_profit_loss: float = 0.0
    total_profit_loss: float = 0.0
    total_profit_loss_percentage: float | None = None

    kind: ClassVar[str] = "lot"

    @property
    @abstractmethod
    def key(self) -> str:
        """Instrument identity used for grouping."""

    @property
    @abstractmethod
    def units(self) -> float:
        """Units held in this portfolio."""

    @property
    @abstractmethod
    def unit_cost(self) -> float | None:
        """Average cost per unit, or None if the payload had none."""

    @property
    def name(self) -> str:
        return self.key

    @staticmethod
    def _common_fields(payload: dict[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "portfolio_id": safe_int(payload.get("portfolio_id")),
            "portfolio_name": safe_str(payload.get("portfolio_name")),
            "total_profit_loss_percentage": optional_float(
                payload.get("total_profit_loss_percentage")
            ),
        }
        for name in SUMMED_FIELDS:
            fields[name] = safe_float(payload.get(name))
        return fields


@dataclass(frozen=True)
class FundLot(HoldingLot):
    """A mutual fund folio in one portfolio."""

    isin: str = ""
    scheme_id: int = 0
    scheme_name: str = ""
    amc: str = ""
    scheme_type: str = ""
    folio_number: str = ""
    current_units: float = 0.0
    average_nav: float | None = None
    current_nav: float | None = None

    kind: ClassVar[str] = "fund"

    @property
    def key(self) -> str:
        return self.isin

    @property
    def units(self) -> float:
        return self.current_units

    @property
    def unit_cost(self) -> float | None:
        return self.average_nav

    @property
    def name(self) -> str:
        return self.scheme_name or self.isin

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> FundLot:
        return cls(
            **cls._common_fields(payload),
            isin=safe_str(payload.get("isin")),
            scheme_id=safe_int(payload.get("scheme_id")),
            scheme_name=safe_str(payload.get("scheme_name")),
            amc=safe_str(payload.get("amc")),
            scheme_type=safe_str(payload.get("scheme_type")),
            folio_number=safe_str(payload.get("folio_number")),
            current_units=safe_float(payload.get("current_units")),
            average_nav=optional_float(payload.get("average_nav")),
            current_nav=optional_float(payload.get("current_nav")),
        )


@dataclass(frozen=True)
class StockLot(HoldingLot):
    """An equity position in one portfolio."""

    symbol: str = ""
    company_name: str = ""
    exchange: str = ""
    isin: str | None = None
    sector: str | None = None
    quantity: float = 0.0
    average_price: float | None = None
    current_price: float | None = None

    kind: ClassVar[str] = "stock"

    @property
    def key(self) -> str:
        return self.symbol

    @property
    def units(self) -> float:
        return self.quantity

    @property
    def unit_cost(self) -> float | None:
        return self.average_price

    @property
    def name(self) -> str:
        return self.company_name or self.symbol

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> StockLot:
        return cls(
            **cls._common_fields(payload),
            symbol=safe_str(payload.get("symbol")),
            company_name=safe_str(payload.get("company_name")),
            exchange=safe_str(payload.get("exchange")),
            isin=safe_str(payload.get("isin")) or None,
            sector=safe_str(payload.get("sector")) or None,
            quantity=safe_float(payload.get("quantity")),
            average_price=optional_float(payload.get("average_price")),
            current_price=optional_float(payload.get("current_price")),
        )


@dataclass(frozen=True)
class MetalLot(HoldingLot):
    """A precious-metal holding (grams) in one portfolio."""

    scheme_code: str = ""
    scheme_name: str = ""
    metal_type: str = ""
    purity: str = ""
    folio_number: str = ""
    current_quantity: float = 0.0
    average_price: float | None = None
    current_price: float | None = None

    kind: ClassVar[str] = "metal"

    @property
    def key(self) -> str:
        return self.scheme_code

    @property
    def units(self) -> float:
        return self.current_quantity

    @property
    def unit_cost(self) -> float | None:
        return self.average_price

    @property
    def name(self) -> str:
        return self.scheme_name or self.scheme_code

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> MetalLot:
        # Older responses only carry the UI alias ``quantity``.
        grams = payload.get("current_quantity")
        if grams is None:
            grams = payload.get("quantity")
        return cls(
            **cls._common_fields(payload),
            scheme_code=safe_str(payload.get("scheme_code")),
            scheme_name=safe_str(payload.get("scheme_name")),
            metal_type=safe_str(payload.get("metal_type")),
            purity=safe_str(payload.get("purity")),
            folio_number=safe_str(payload.get("folio_number")),
            current_quantity=safe_float(grams),
            average_price=optional_float(payload.get("average_price")),
            current_price=optional_float(payload.get("current_price")),
        )


@dataclass(frozen=True)
class HoldingsData:
    """Lots from one fetch, split by instrument class."""

    mutual_funds: tuple[FundLot, ...] = ()
    stocks: tuple[StockLot, ...] = ()
    metals: tuple[MetalLot, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.mutual_funds or self.stocks or self.metals)


def _parse_lots(entries: Any, lot_cls: type[HoldingLot]) -> tuple:
    if not isinstance(entries, list):
        return ()
    lots = []
    for entry in entries:
        if not isinstance(entry, dict):
            logger.debug("Skipping non-object %s entry: %r", lot_cls.kind, entry)
            continue
        lots.append(lot_cls.from_payload(entry))  # type: ignore[attr-defined]
    return tuple(lots)


def parse_holdings(payload: dict[str, Any] | None) -> HoldingsData:
    """Build :class:`HoldingsData` from a holdings container.

    Any of ``mutual_funds``, ``stocks``, ``metals`` may be absent.
    """
    if not isinstance(payload, dict):
        return HoldingsData()
    return HoldingsData(
        mutual_funds=_parse_lots(payload.get("mutual_funds"), FundLot),
        stocks=_parse_lots(payload.get("stocks"), StockLot),
        metals=_parse_lots(payload.get("metals"), MetalLot),
    )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AggregatedInstrument:
    """One instrument consolidated across every portfolio that holds it."""

    key: str
    lead: HoldingLot
    """First-encountered lot; display metadata comes from here."""
    total_invested: float
    current_value: float
    realized_profit_loss: float
    unrealized_profit_loss: float
    total_profit_loss: float
    quantity: float
    average_cost: float | None
    """Quantity-weighted average cost. None when total quantity is zero."""
    total_profit_loss_percentage: float | None
    lots: tuple[HoldingLot, ...]

    @property
    def kind(self) -> str:
        return self.lead.kind

    @property
    def name(self) -> str:
        return self.lead.name

    @property
    def portfolio_ids(self) -> tuple[int, ...]:
        """Distinct contributing portfolio IDs, in encounter order."""
        return tuple(dict.fromkeys(lot.portfolio_id for lot in self.lots))

    @property
    def n_portfolios(self) -> int:
        return len(self.portfolio_ids)

    @property
    def is_multi_portfolio(self) -> bool:
        return self.n_portfolios > 1

    @property
    def has_multiple_lots(self) -> bool:
        return len(self.lots) > 1


def _weighted_average_cost(lots: list[HoldingLot], quantity: float) -> float | None:
    """Σ(units × unit_cost) / Σ units over every retained lot."""
    if abs(quantity) < _ZERO_UNITS:
        return None
    if all(lot.unit_cost is None for lot in lots):
        return None
    if len(lots) == 1:
        return lots[0].unit_cost
    total_cost = sum(lot.units * (lot.unit_cost or 0.0) for lot in lots)
    average = total_cost / quantity
    return average if math.isfinite(average) else None


class _Accumulator:
    """Mutable build state for one instrument; frozen once input is consumed."""

    def __init__(self, lot: HoldingLot) -> None:
        self.lots: list[HoldingLot] = []
        self.sums = dict.fromkeys(SUMMED_FIELDS, 0.0)
        self.quantity = 0.0
        self.average_cost: float | None = None
        self.percentage = lot.total_profit_loss_percentage
        self.add(lot)

    def add(self, lot: HoldingLot) -> None:
        self.lots.append(lot)
        for name in SUMMED_FIELDS:
            self.sums[name] += getattr(lot, name)
        self.quantity += lot.units

        # Recompute from the full lot list, never from the previous average
        self.average_cost = _weighted_average_cost(self.lots, self.quantity)

        invested = self.sums["total_invested"]
        if invested > 0:
            pct = self.sums["total_profit_loss"] / invested * 100
            if math.isfinite(pct):
                self.percentage = pct

    def freeze(self) -> AggregatedInstrument:
        lead = self.lots[0]
        return AggregatedInstrument(
            key=lead.key,
            lead=lead,
            quantity=self.quantity,
            average_cost=self.average_cost,
            total_profit_loss_percentage=self.percentage,
            lots=tuple(self.lots),
            **self.sums,
        )


def aggregate_lots(lots: Iterable[HoldingLot]) -> list[AggregatedInstrument]:
    """Group lots by instrument key and consolidate each group.

    Parameters:
        lots: Lots of a single instrument class from a single fetch.

    Returns:
        One AggregatedInstrument per distinct key, in first-encountered
        order. Lots sharing a key keep the first lot's metadata; a lot with
        an empty key is grouped under "" rather than dropped.
    """
    groups: dict[str, _Accumulator] = {}
    for lot in lots:
        acc = groups.get(lot.key)
        if acc is None:
            groups[lot.key] = _Accumulator(lot)
        else:
            acc.add(lot)
    return [acc.freeze() for acc in groups.values()]


def aggregate_funds(lots: Iterable[FundLot]) -> list[AggregatedInstrument]:
    """Consolidate mutual fund folios by ISIN."""
    return aggregate_lots(lots)


def aggregate_stocks(lots: Iterable[StockLot]) -> list[AggregatedInstrument]:
    """Consolidate stock positions by ticker symbol."""
    return aggregate_lots(lots)


def aggregate_metals(lots: Iterable[MetalLot]) -> list[AggregatedInstrument]:
    """Consolidate metal holdings by scheme code."""
    return aggregate_lots(lots)


def aggregate_holdings(data: HoldingsData) -> dict[str, list[AggregatedInstrument]]:
    """Aggregate every instrument class in a fetch."""
    return {
        "mutual_funds": aggregate_funds(data.mutual_funds),
        "stocks": aggregate_stocks(data.stocks),
        "metals": aggregate_metals(data.metals),
    }
