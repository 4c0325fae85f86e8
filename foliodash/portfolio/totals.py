"""Portfolio-wide totals over the selected asset types.

Reduces the summary's per-asset-type breakdown into headline figures:

  total_value          = Σ current_value
  total_invested       = Σ total_invested
  total_gain           = Σ total_gains
  total_gain_percent   = total_gain / total_invested × 100       (0 if invested ≤ 0)
  day_profit_loss      = Σ one_day_profit_loss                   (missing → 0)
  day_profit_loss_pct  = day_profit_loss / previous_value × 100  (0 if previous ≤ 0)

``previous_value`` is not an API field. It is reconstructed per asset type
as ``current_value − one_day_profit_loss`` and then summed.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from foliodash.portfolio.summary import AssetBreakdown
from foliodash.selection.domain import breakdown_keys_for


@dataclass(frozen=True)
class DerivedTotals:
    total_value: float = 0.0
    total_invested: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0
    day_profit_loss: float = 0.0
    day_profit_loss_percent: float = 0.0


def _as_breakdown(value: AssetBreakdown | Mapping[str, Any]) -> AssetBreakdown:
    if isinstance(value, AssetBreakdown):
        return value
    return AssetBreakdown.from_payload(dict(value))


def _percent(numerator: float, denominator: float) -> float:
    """numerator / denominator × 100, or 0.0 when the denominator is not positive."""
    if denominator <= 0:
        return 0.0
    result = numerator / denominator * 100
    return result if math.isfinite(result) else 0.0


def compute_totals(
    breakdown: Mapping[str, AssetBreakdown | Mapping[str, Any]],
    selected_keys: Iterable[str] | None = None,
) -> DerivedTotals:
    """Sum the breakdown entries whose key is selected.

    Parameters:
        breakdown: breakdown key (e.g. "MUTUAL_FUND") → AssetBreakdown or raw dict.
        selected_keys: Keys to include. None includes every key; keys absent
            from the breakdown contribute nothing.

    Returns:
        DerivedTotals. Zero denominators give 0.0 percentages, never NaN.
    """
    wanted = None if selected_keys is None else set(selected_keys)

    total_value = 0.0
    total_invested = 0.0
    total_gain = 0.0
    day_pl = 0.0
    previous_value = 0.0

    for key, raw in breakdown.items():
        if wanted is not None and key not in wanted:
            continue
        entry = _as_breakdown(raw)
        total_value += entry.current_value
        total_invested += entry.total_invested
        total_gain += entry.total_gains
        day_pl += entry.one_day_profit_loss
        previous_value += entry.previous_value

    gain_pct = _percent(total_gain, total_invested)
    day_pct = _percent(day_pl, previous_value)

    return DerivedTotals(
        total_value=total_value,
        total_invested=total_invested,
        total_gain=total_gain,
        total_gain_percent=gain_pct,
        day_profit_loss=day_pl,
        day_profit_loss_percent=day_pct,
    )


def totals_for_selection(
    breakdown: Mapping[str, AssetBreakdown | Mapping[str, Any]],
    asset_tags: Iterable[str],
    mapping: Mapping[str, str] | None = None,
) -> DerivedTotals:
    """Totals restricted to filter tags such as ``mutual-funds`` or ``stocks``."""
    return compute_totals(breakdown, breakdown_keys_for(asset_tags, mapping))
