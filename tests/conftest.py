"""Shared test fixtures for foliodash.

Provides reusable fixtures for database, config, selection stores, and
API-shaped summary payloads across all test modules.
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from foliodash.config.schema import FoliodashConfig
from foliodash.selection.store import MemoryStore
from foliodash.storage.database import Database
from foliodash.storage.migrations import ensure_schema
from payloads import fund_payload, stock_payload

# ---------------------------------------------------------------------------
# Core infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def test_config(tmp_path: Path) -> FoliodashConfig:
    """Minimal config with temp database path."""
    return FoliodashConfig(
        api={"base_url": "http://api.test/api", "access_token": "tok", "timeout": 5},
        database={"path": str(tmp_path / "test.db")},
    )


@pytest.fixture
def config_file(tmp_path: Path, test_config: FoliodashConfig) -> Path:
    """test_config written out as YAML."""
    import yaml

    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(test_config.model_dump()))
    return path


@pytest.fixture
def test_db(tmp_path: Path) -> Database:
    """Database with schema applied, using temp file."""
    db = Database(tmp_path / "test.db")
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture
def memory_db() -> Database:
    """In-memory database for fast unit tests."""
    db = Database(":memory:")
    ensure_schema(db)
    yield db
    db.close()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


class FailingStore:
    """Store whose every read and write raises, like a disabled local storage."""

    def __init__(self) -> None:
        self.attempts = 0

    def get(self, key: str) -> str | None:
        raise OSError("storage disabled")

    def set(self, key: str, value: str) -> None:
        self.attempts += 1
        raise OSError("quota exceeded")


@pytest.fixture
def failing_store() -> FailingStore:
    return FailingStore()


# ---------------------------------------------------------------------------
# Summary payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def summary_payload() -> dict:
    """Multi-portfolio summary with one fund held in two portfolios."""
    return {
        "investor_name": "Test Investor",
        "portfolio_ids": [1, 2],
        "aggregate_overview": {
            "total_invested": 110000,
            "current_value": 137000,
            "total_profit_loss": 27000,
        },
        "breakdown_by_asset_type": {
            "MUTUAL_FUND": {
                "total_invested": 100000,
                "current_value": 125000,
                "total_gains": 25000,
                "one_day_profit_loss": 1000,
                "holding_count": 2,
            },
            "EQUITY_STOCK": {
                "total_invested": 10000,
                "current_value": 12000,
                "total_gains": 2000,
                "one_day_profit_loss": -200,
                "holding_count": 1,
            },
        },
        "holdings": {
            "mutual_funds": [
                fund_payload("INF000A", portfolio_id=1, units=10, nav=100),
                fund_payload("INF000B", portfolio_id=1, units=5, nav=40),
                fund_payload("INF000A", portfolio_id=2, units=10, nav=200),
            ],
            "stocks": [stock_payload("INFY", portfolio_id=2)],
            "metals": [],
        },
    }


@pytest.fixture
def summary_file(tmp_path: Path, summary_payload: dict) -> Path:
    path = tmp_path / "summary.json"
    path.write_text(json.dumps(summary_payload))
    return path
