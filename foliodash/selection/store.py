"""Persistent key-value stores for selection state.

Values are JSON strings, one key per selection. ``DatabaseStore`` keeps
them in the SQLite ``preferences`` table so a selection survives between
CLI invocations; ``MemoryStore`` is for tests and throwaway sessions.
"""

from __future__ import annotations

from typing import Protocol

from foliodash.storage.database import Database
from foliodash.storage.queries import get_preference, set_preference


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class DatabaseStore:
    """Store backed by the ``preferences`` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def get(self, key: str) -> str | None:
        return get_preference(self.db, key)

    def set(self, key: str, value: str) -> None:
        set_preference(self.db, key, value)
