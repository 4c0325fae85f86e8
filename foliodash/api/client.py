"""Portfolio REST API client.

Thin wrapper over the endpoints the dashboard reads: the portfolio list,
the multi-portfolio summary (with holdings), and consolidated XIRR. XIRR
is computed server-side; this client only relays it.

Every call returns None on failure (network error, non-200, undecodable
body) after logging. Retries and cancellation are left to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

import requests

from foliodash.config.schema import ApiConfig
from foliodash.portfolio.summary import (
    PortfolioRef,
    PortfolioSummary,
    parse_portfolio_list,
    parse_summary,
)

logger = logging.getLogger(__name__)


def _join_ids(portfolio_ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in sorted(set(portfolio_ids)))


class PortfolioApiClient:
    """Read-only client for the portfolio API.

    Usage::

        client = PortfolioApiClient(config.api)
        portfolios = client.list_portfolios()
        summary = client.get_summary([1, 2])
    """

    def __init__(self, config: ApiConfig | None = None) -> None:
        self.config = config or ApiConfig()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.access_token:
            headers["Authorization"] = f"Bearer {self.config.access_token}"
        return headers

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.config.base_url}{path}"
        try:
            resp = requests.get(
                url,
                params=params,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.warning("Request to %s failed: %s", url, e)
            return None

        if resp.status_code != 200:
            logger.warning("API returned %d for %s", resp.status_code, url)
            return None

        try:
            return resp.json()
        except ValueError as e:
            logger.warning("Undecodable response from %s: %s", url, e)
            return None

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def list_portfolios(self) -> list[PortfolioRef] | None:
        """The user's portfolios: the valid domain for selection."""
        data = self._get(self.config.endpoints.portfolios)
        if data is None:
            return None
        refs = parse_portfolio_list(data)
        logger.debug("Fetched %d portfolios", len(refs))
        return refs

    def fetch_summary_payload(
        self,
        portfolio_ids: Iterable[int],
        asset_type: str | None = None,
        include_holdings: bool = True,
    ) -> dict[str, Any] | None:
        """Raw summary JSON for the given portfolios.

        An empty selection makes no request and returns None.
        """
        ids = _join_ids(portfolio_ids)
        if not ids:
            logger.debug("No portfolios selected, skipping summary fetch")
            return None

        params: dict[str, Any] = {
            "portfolioIds": ids,
            "includeHoldings": str(include_holdings).lower(),
        }
        if asset_type:
            params["assetType"] = asset_type

        data = self._get(self.config.endpoints.summary, params)
        if not isinstance(data, dict):
            if data is not None:
                logger.warning("Summary response is not an object")
            return None
        return data

    def get_summary(
        self,
        portfolio_ids: Iterable[int],
        asset_type: str | None = None,
        include_holdings: bool = True,
    ) -> PortfolioSummary | None:
        payload = self.fetch_summary_payload(portfolio_ids, asset_type, include_holdings)
        return parse_summary(payload) if payload is not None else None

    def get_consolidated_xirr(self, portfolio_ids: Iterable[int]) -> float | None:
        """Annualized XIRR (percent) across the portfolios, as reported by the API."""
        ids = _join_ids(portfolio_ids)
        if not ids:
            return None

        data = self._get(
            self.config.endpoints.xirr,
            {"portfolioIds": ids, "includeCurrentValue": "true"},
        )
        if not isinstance(data, dict) or data.get("xirr") is None:
            return None
        try:
            return float(data["xirr"])
        except (TypeError, ValueError):
            return None
