"""CLI commands: foliodash holdings / foliodash summary."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from foliodash.cli.select_cmd import open_selection

if TYPE_CHECKING:
    from foliodash.config.schema import FoliodashConfig
    from foliodash.selection.state import SelectionState
    from foliodash.storage.database import Database

logger = logging.getLogger(__name__)

# --kind choice -> (holdings section, asset type that enables it)
HOLDING_KINDS = {
    "funds": ("mutual_funds", "mutual-funds"),
    "stocks": ("stocks", "stocks"),
    "metals": ("metals", "gold"),
}

SECTION_TITLES = {
    "mutual_funds": "Mutual funds",
    "stocks": "Stocks",
    "metals": "Precious metals",
}


def _read_payload_file(path: str) -> dict[str, Any]:
    try:
        payload = json.loads(Path(path).read_text())
    except (OSError, ValueError) as e:
        click.echo(f"Could not read summary file {path}: {e}", err=True)
        raise SystemExit(1) from None
    if not isinstance(payload, dict):
        click.echo(f"Summary file {path} does not contain a JSON object", err=True)
        raise SystemExit(1)
    return payload


def _load_payload(
    config: FoliodashConfig,
    db: Database,
    state: SelectionState,
    file: str | None,
) -> dict[str, Any] | None:
    """Summary payload from a file, the API, or the last cached snapshot.

    Returns None when no portfolio is selected.
    """
    from foliodash.api.client import PortfolioApiClient
    from foliodash.storage.queries import load_summary_snapshot, save_summary_snapshot

    if file:
        return _read_payload_file(file)

    ids = state.portfolios.ordered
    if not ids:
        click.echo("No portfolios selected. Use: foliodash select portfolio ID")
        return None

    payload = PortfolioApiClient(config.api).fetch_summary_payload(ids)
    if payload is not None:
        save_summary_snapshot(db, ids, payload)
        return payload

    cached = load_summary_snapshot(db, ids)
    if cached is None:
        click.echo("Could not fetch the summary from the API and no cached copy exists.", err=True)
        raise SystemExit(1)
    click.echo("API unavailable, showing the last cached summary.", err=True)
    return cached


@click.command("holdings")
@click.option("--file", "-f", "file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="Read a saved summary JSON instead of calling the API")
@click.option("--kind", "-k", type=click.Choice(sorted(HOLDING_KINDS)), default=None,
              help="Show a single holdings class")
@click.option("--expand", is_flag=True, help="Show per-portfolio rows for merged holdings")
@click.pass_context
def holdings_cmd(ctx: click.Context, file: str | None, kind: str | None, expand: bool) -> None:
    """Show holdings merged across the selected portfolios.

    A holding held in several portfolios is one row with summed amounts
    and a unit-weighted average cost.
    """
    from foliodash.output.tables import holdings_frame, lots_frame, render_frame
    from foliodash.portfolio.holdings import aggregate_holdings
    from foliodash.portfolio.summary import parse_summary

    with open_selection(ctx) as (config, db, state):
        payload = _load_payload(config, db, state, file)
        if payload is None:
            return

        summary = parse_summary(payload)
        aggregated = aggregate_holdings(summary.holdings)
        decimals = config.output.decimals
        placeholder = config.output.placeholder

        if kind:
            sections = [HOLDING_KINDS[kind][0]]
        else:
            sections = [
                section for section, tag in HOLDING_KINDS.values()
                if state.assets.is_selected(tag)
            ]

        for section in sections:
            rows = aggregated[section]
            click.echo(f"\n{SECTION_TITLES[section]} ({len(rows)})")
            click.echo("-" * 40)
            click.echo(render_frame(holdings_frame(rows), decimals, placeholder))

            if expand:
                for agg in rows:
                    if not agg.has_multiple_lots:
                        continue
                    click.echo(f"\n  {agg.name} [{agg.key}] across {agg.n_portfolios} portfolios")
                    click.echo(render_frame(lots_frame(agg), decimals, placeholder))


@click.command("summary")
@click.option("--file", "-f", "file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="Read a saved summary JSON instead of calling the API")
@click.pass_context
def summary_cmd(ctx: click.Context, file: str | None) -> None:
    """Show totals for the selected asset types across the selected portfolios."""
    from foliodash.api.client import PortfolioApiClient
    from foliodash.output.tables import totals_lines
    from foliodash.portfolio.summary import parse_summary
    from foliodash.portfolio.totals import totals_for_selection

    with open_selection(ctx) as (config, db, state):
        payload = _load_payload(config, db, state, file)
        if payload is None:
            return

        summary = parse_summary(payload)
        totals = totals_for_selection(
            summary.breakdown,
            state.assets.ordered,
            config.selection.breakdown_keys,
        )

        xirr = None
        if not file:
            xirr = PortfolioApiClient(config.api).get_consolidated_xirr(state.portfolios.ordered)

        if summary.investor_name:
            click.echo(f"Investor: {summary.investor_name}")
        scope = "all" if state.assets.is_all_selected else ", ".join(state.assets.ordered)
        click.echo(f"Asset types: {scope}")
        click.echo("=" * 40)
        for line in totals_lines(
            totals,
            xirr,
            decimals=config.output.decimals,
            placeholder=config.output.placeholder,
        ):
            click.echo(line)
