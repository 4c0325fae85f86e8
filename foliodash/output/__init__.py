"""Output rendering: holdings tables and the totals panel.

Re-exports key public functions for convenience.
"""

from foliodash.output.tables import holdings_frame, lots_frame, render_frame, totals_lines

__all__ = [
    "holdings_frame",
    "lots_frame",
    "render_frame",
    "totals_lines",
]
