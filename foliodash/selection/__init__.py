"""Portfolio and asset-type selection state.

Public API:
  SelectionState      - Both selections over one query/store pair
  AssetTypeSelection  - Non-empty set of asset-type tags
  PortfolioSelection  - Possibly empty set of portfolio IDs
  QueryString         - Shareable query-string channel
  MemoryStore, DatabaseStore - Persistent key/value stores
"""

from foliodash.selection.domain import ALL_ASSET_TYPES, AssetType
from foliodash.selection.query import QueryString
from foliodash.selection.state import AssetTypeSelection, PortfolioSelection, SelectionState
from foliodash.selection.store import DatabaseStore, KeyValueStore, MemoryStore

__all__ = [
    "ALL_ASSET_TYPES",
    "AssetType",
    "AssetTypeSelection",
    "DatabaseStore",
    "KeyValueStore",
    "MemoryStore",
    "PortfolioSelection",
    "QueryString",
    "SelectionState",
]
