"""Default values for the dashboard client.

The asset-type domain and its mapping onto summary breakdown keys mirror
what the portfolio API returns. Changing a tag here changes the query
strings and stored selections users already have.
"""

# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------
API_DEFAULTS = {
    "base_url": "http://127.0.0.1:8080/api",
    "timeout": 15.0,
}

API_ENDPOINTS = {
    "portfolios": "/portfolios",
    "summary": "/portfolios/summary/v2",
    "xirr": "/portfolios/xirr/consolidated",
}

# ---------------------------------------------------------------------------
# Asset-type filter domain (order is display order)
# ---------------------------------------------------------------------------
ASSET_TYPES = (
    "mutual-funds",
    "stocks",
    "crypto",
    "gold",
    "property",
    "fixed-income",
)

# Filter tag -> key used in the summary's breakdown_by_asset_type map
BREAKDOWN_KEYS = {
    "mutual-funds": "MUTUAL_FUND",
    "stocks": "EQUITY_STOCK",
    "crypto": "CRYPTO",
    "gold": "PRECIOUS_METAL",
    "property": "REAL_ESTATE",
    "fixed-income": "FIXED_DEPOSIT",
}

# ---------------------------------------------------------------------------
# Persistence keys
# ---------------------------------------------------------------------------
STORAGE_KEYS = {
    "assets": "selected_asset_types",
    "portfolios": "selected_portfolio_ids",
}

QUERY_PARAMS = {
    "assets": "assets",
    "portfolios": "portfolios",
}

# ---------------------------------------------------------------------------
# Display
# ---------------------------------------------------------------------------
DISPLAY_DEFAULTS = {
    "decimals": 2,
    "placeholder": "--",
}
