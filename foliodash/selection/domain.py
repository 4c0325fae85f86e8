"""Asset-type filter domain and its mapping onto summary breakdown keys."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum

from foliodash.config.defaults import ASSET_TYPES, BREAKDOWN_KEYS


class AssetType(str, Enum):
    MUTUAL_FUNDS = "mutual-funds"
    STOCKS = "stocks"
    CRYPTO = "crypto"
    GOLD = "gold"
    PROPERTY = "property"
    FIXED_INCOME = "fixed-income"


ALL_ASSET_TYPES: tuple[str, ...] = tuple(ASSET_TYPES)


def breakdown_keys_for(
    tags: Iterable[str],
    mapping: Mapping[str, str] | None = None,
) -> list[str]:
    """Map filter tags to breakdown keys, skipping tags with no breakdown."""
    table = BREAKDOWN_KEYS if mapping is None else mapping
    keys: list[str] = []
    for tag in tags:
        value = tag.value if isinstance(tag, AssetType) else tag
        key = table.get(value)
        if key is not None and key not in keys:
            keys.append(key)
    return keys
