"""Query-string channel for shareable selection state.

Plays the role a browser URL plays for the dashboard: selections are read
from it once at start-up and written back after each change. Writes that
would not change the rendered value are dropped, so repeated syncs never
add history entries.
"""

from __future__ import annotations

from urllib.parse import parse_qsl, urlencode


class QueryString:
    """Ordered query parameters with change-only writes."""

    def __init__(self, query: str = "") -> None:
        self._params: dict[str, str] = dict(
            parse_qsl(query.lstrip("?"), keep_blank_values=True)
        )
        self.history = 0
        """Number of writes that actually changed a parameter."""

    def get(self, name: str) -> str | None:
        return self._params.get(name)

    def set(self, name: str, value: str | None) -> bool:
        """Set or (with None) delete a parameter. Returns True if it changed."""
        if self._params.get(name) == value:
            return False
        if value is None:
            del self._params[name]
        else:
            self._params[name] = value
        self.history += 1
        return True

    def render(self) -> str:
        return urlencode(self._params, safe=",")

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"QueryString({self.render()!r})"
