"""Named query functions for database operations."""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from foliodash.storage.database import Database

# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------

def get_preference(db: Database, key: str) -> str | None:
    """Get a stored preference value, or None if unset."""
    row = db.fetchone("SELECT value FROM preferences WHERE key = ?", (key,))
    return row["value"] if row else None


def set_preference(db: Database, key: str, value: str) -> None:
    """Insert or update a preference."""
    with db.transaction() as cur:
        cur.execute(
            """INSERT INTO preferences (key, value, updated_at)
            VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET
                value=excluded.value, updated_at=datetime('now')""",
            (key, value),
        )


# ---------------------------------------------------------------------------
# Summary snapshots
# ---------------------------------------------------------------------------

def selection_key(portfolio_ids: Iterable[int]) -> str:
    """Stable cache key for a set of portfolio IDs."""
    return ",".join(str(i) for i in sorted(set(portfolio_ids)))


def save_summary_snapshot(
    db: Database,
    portfolio_ids: Iterable[int],
    payload: dict[str, Any],
    fetched_at: str | None = None,
) -> None:
    """Store the raw summary response for a portfolio selection."""
    fetched_at = fetched_at or datetime.now().isoformat(timespec="seconds")
    with db.transaction() as cur:
        cur.execute(
            """INSERT INTO summary_snapshots (selection_key, fetched_at, payload_json)
            VALUES (?, ?, ?)
            ON CONFLICT(selection_key) DO UPDATE SET
                fetched_at=excluded.fetched_at,
                payload_json=excluded.payload_json""",
            (selection_key(portfolio_ids), fetched_at, json.dumps(payload)),
        )


def load_summary_snapshot(
    db: Database,
    portfolio_ids: Iterable[int],
) -> dict[str, Any] | None:
    """Load the cached summary response for a selection.

    Returns None if nothing is cached or the payload does not decode.
    """
    row = db.fetchone(
        "SELECT payload_json FROM summary_snapshots WHERE selection_key = ?",
        (selection_key(portfolio_ids),),
    )
    if not row:
        return None

    try:
        return json.loads(row["payload_json"])
    except (json.JSONDecodeError, KeyError):
        return None
