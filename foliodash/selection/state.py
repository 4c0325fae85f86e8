"""Selection state for portfolios and asset types.

Two independent multi-select sets, each layered over three sources:

  query string  >  persistent store  >  default

The in-memory set is authoritative. The query string and the store are
read once by ``initialize()`` and are otherwise write-only targets: every
mutation persists the JSON array to the store, then updates the query
parameter if (and only if) its rendered value changes. Failures in either
write are logged and swallowed.

Asset types can never be empty: removing the last tag reselects the whole
domain. Portfolio selection may be empty, which means "nothing selected"
and is distinct from "all selected".

Usage::

    state = SelectionState.initialize(QueryString("assets=stocks"), store)
    state.assets.toggle("gold")
    state.portfolios.toggle(3)
    state.reconcile([1, 3])     # after the portfolio list loads
    print(state.query.render())
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from foliodash.config.defaults import QUERY_PARAMS, STORAGE_KEYS
from foliodash.config.schema import SelectionConfig
from foliodash.selection.domain import ALL_ASSET_TYPES, AssetType, breakdown_keys_for
from foliodash.selection.query import QueryString
from foliodash.selection.store import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)


class _LayeredSelection(ABC):
    """Persistence plumbing shared by both selections."""

    def __init__(
        self,
        query: QueryString | None,
        store: KeyValueStore | None,
        storage_key: str,
        param: str,
    ) -> None:
        self.query = query if query is not None else QueryString()
        self.store: KeyValueStore = store if store is not None else MemoryStore()
        self.storage_key = storage_key
        self.param = param

    def _read_store(self) -> Any:
        """Decoded JSON from the store, or None if absent or unreadable."""
        try:
            raw = self.store.get(self.storage_key)
        except Exception as e:
            logger.warning("Could not read %s from store: %s", self.storage_key, e)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring malformed %s value: %r", self.storage_key, raw)
            return None

    def _persist(self) -> None:
        try:
            self.store.set(self.storage_key, json.dumps(self._as_list()))
        except Exception as e:
            logger.warning("Could not persist %s: %s", self.storage_key, e)

        try:
            if self.query.set(self.param, self._query_value()):
                logger.debug("Query updated: %s", self.query.render())
        except Exception as e:
            logger.warning("Could not update query parameter %s: %s", self.param, e)

    @abstractmethod
    def _as_list(self) -> list:
        """The selection as stored in the JSON array."""

    @abstractmethod
    def _query_value(self) -> str | None:
        """The query parameter value, or None to remove it."""


# ---------------------------------------------------------------------------
# Asset types
# ---------------------------------------------------------------------------

class AssetTypeSelection(_LayeredSelection):
    """Selected asset-type tags. Never empty."""

    def __init__(
        self,
        query: QueryString | None = None,
        store: KeyValueStore | None = None,
        *,
        domain: Iterable[str] = ALL_ASSET_TYPES,
        storage_key: str = STORAGE_KEYS["assets"],
        param: str = QUERY_PARAMS["assets"],
    ) -> None:
        super().__init__(query, store, storage_key, param)
        self.domain: tuple[str, ...] = tuple(domain)
        self._selected: frozenset[str] = frozenset(self.domain)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def selected(self) -> frozenset[str]:
        return self._selected

    @property
    def ordered(self) -> list[str]:
        """Selected tags in domain order."""
        return [tag for tag in self.domain if tag in self._selected]

    @property
    def is_all_selected(self) -> bool:
        return len(self._selected) == len(self.domain)

    def is_selected(self, tag: str | AssetType) -> bool:
        return self._tag(tag) in self._selected

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize(self) -> AssetTypeSelection:
        """Load from query string, else store, else the full domain."""
        self._selected = self._initial_selection()
        self._persist()
        return self

    def toggle(self, tag: str | AssetType) -> frozenset[str]:
        """Flip one tag. Removing the last tag reselects the full domain."""
        tag = self._tag(tag)
        if tag not in self.domain:
            logger.debug("Ignoring unknown asset type: %s", tag)
            return self._selected

        if tag in self._selected:
            remaining = self._selected - {tag}
            self._replace(remaining or frozenset(self.domain))
        else:
            self._replace(self._selected | {tag})
        return self._selected

    def select_all(self) -> bool:
        """Select every tag. Returns False (and writes nothing) if already all."""
        if self.is_all_selected:
            return False
        self._replace(frozenset(self.domain))
        return True

    def clear_all(self) -> bool:
        """Clear the selection, which for asset types means back to all."""
        return self.select_all()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _tag(tag: str | AssetType) -> str:
        return tag.value if isinstance(tag, AssetType) else str(tag).strip()

    def _known(self, tags: Iterable[Any]) -> frozenset[str]:
        return frozenset(self._tag(t) for t in tags if isinstance(t, str)) & frozenset(self.domain)

    def _initial_selection(self) -> frozenset[str]:
        raw = self.query.get(self.param)
        if raw:
            tags = self._known(raw.split(","))
            if not tags:
                logger.debug("Query %s=%s has no known asset types", self.param, raw)
                return frozenset(self.domain)
            return tags

        stored = self._read_store()
        if isinstance(stored, list):
            tags = self._known(stored)
            if tags:
                return tags
        return frozenset(self.domain)

    def _replace(self, tags: frozenset[str]) -> None:
        self._selected = tags
        self._persist()

    def _as_list(self) -> list[str]:
        return self.ordered

    def _query_value(self) -> str | None:
        if self.is_all_selected:
            return None
        return ",".join(self.ordered)


# ---------------------------------------------------------------------------
# Portfolios
# ---------------------------------------------------------------------------

def _parse_id(token: Any) -> int | None:
    if isinstance(token, bool):
        return None
    if isinstance(token, int):
        return token
    try:
        return int(str(token).strip())
    except ValueError:
        return None


class PortfolioSelection(_LayeredSelection):
    """Selected portfolio IDs. May be empty."""

    def __init__(
        self,
        query: QueryString | None = None,
        store: KeyValueStore | None = None,
        *,
        known_ids: Iterable[int] = (),
        storage_key: str = STORAGE_KEYS["portfolios"],
        param: str = QUERY_PARAMS["portfolios"],
    ) -> None:
        super().__init__(query, store, storage_key, param)
        self.known_ids: frozenset[int] = frozenset(known_ids)
        self._selected: frozenset[int] = frozenset()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def selected(self) -> frozenset[int]:
        return self._selected

    @property
    def ordered(self) -> list[int]:
        return sorted(self._selected)

    @property
    def is_empty(self) -> bool:
        return not self._selected

    @property
    def is_all_selected(self) -> bool:
        return bool(self.known_ids) and self._selected == self.known_ids

    def is_selected(self, portfolio_id: int) -> bool:
        return portfolio_id in self._selected

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def initialize(self) -> PortfolioSelection:
        """Load from query string, else store, else empty.

        IDs from the query string are not checked against ``known_ids``;
        the valid set is usually not known yet. Call :meth:`reconcile`
        once it is.
        """
        self._selected = self._initial_selection()
        self._persist()
        return self

    def toggle(self, portfolio_id: int) -> frozenset[int]:
        if portfolio_id in self._selected:
            self._replace(self._selected - {portfolio_id})
        else:
            self._replace(self._selected | {portfolio_id})
        return self._selected

    def select_all(self, ids: Iterable[int] | None = None) -> None:
        """Select ``ids``, or every known portfolio when omitted."""
        self._replace(self.known_ids if ids is None else frozenset(ids))

    def clear_all(self) -> None:
        self._replace(frozenset())

    def select_only(self, portfolio_id: int) -> None:
        self._replace(frozenset({portfolio_id}))

    def set_explicit(self, ids: Iterable[int]) -> None:
        """Replace the selection outright."""
        self._replace(frozenset(ids))

    def reconcile(self, valid_ids: Iterable[int]) -> bool:
        """Drop selected IDs that are no longer valid.

        Also records ``valid_ids`` as the known domain. The selection is
        replaced (and re-persisted) only when the intersection is a strict
        subset of it. Returns True if the selection changed.
        """
        self.known_ids = frozenset(valid_ids)
        cleaned = self._selected & self.known_ids
        if cleaned < self._selected:
            dropped = sorted(self._selected - cleaned)
            logger.info("Dropping unknown portfolio ids from selection: %s", dropped)
            self.set_explicit(cleaned)
            return True
        return False

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _initial_selection(self) -> frozenset[int]:
        raw = self.query.get(self.param)
        if raw:
            ids = (_parse_id(token) for token in raw.split(","))
            return frozenset(i for i in ids if i is not None)

        stored = self._read_store()
        if isinstance(stored, list):
            ids = (_parse_id(item) for item in stored)
            return frozenset(i for i in ids if i is not None)
        return frozenset()

    def _replace(self, ids: frozenset[int]) -> None:
        self._selected = ids
        self._persist()

    def _as_list(self) -> list[int]:
        return self.ordered

    def _query_value(self) -> str | None:
        if not self._selected:
            return None
        return ",".join(str(i) for i in self.ordered)


# ---------------------------------------------------------------------------
# Container
# ---------------------------------------------------------------------------

@dataclass
class SelectionState:
    """Both selections plus the query channel and store they share."""

    assets: AssetTypeSelection
    portfolios: PortfolioSelection
    query: QueryString
    store: KeyValueStore
    config: SelectionConfig = field(default_factory=SelectionConfig)

    @classmethod
    def initialize(
        cls,
        query: QueryString | None = None,
        store: KeyValueStore | None = None,
        config: SelectionConfig | None = None,
    ) -> SelectionState:
        """Build both selections over one query/store pair and load them."""
        config = config or SelectionConfig()
        query = query if query is not None else QueryString()
        store = store if store is not None else MemoryStore()

        assets = AssetTypeSelection(
            query,
            store,
            domain=config.asset_types,
            storage_key=config.storage_keys["assets"],
            param=config.query_params["assets"],
        ).initialize()
        portfolios = PortfolioSelection(
            query,
            store,
            storage_key=config.storage_keys["portfolios"],
            param=config.query_params["portfolios"],
        ).initialize()

        logger.debug(
            "Selection initialized: assets=%s portfolios=%s",
            assets.ordered, portfolios.ordered,
        )
        return cls(assets=assets, portfolios=portfolios, query=query, store=store, config=config)

    def reconcile(self, valid_ids: Iterable[int]) -> bool:
        return self.portfolios.reconcile(valid_ids)

    def breakdown_keys(self) -> list[str]:
        """Summary breakdown keys for the selected asset types."""
        return breakdown_keys_for(self.assets.ordered, self.config.breakdown_keys)
