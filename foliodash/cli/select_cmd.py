"""Selection CLI commands: show and mutate the persisted portfolio/asset selection."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from foliodash.config.schema import FoliodashConfig
    from foliodash.selection.state import SelectionState
    from foliodash.storage.database import Database

logger = logging.getLogger(__name__)


@contextmanager
def open_selection(
    ctx: click.Context,
) -> Generator[tuple[FoliodashConfig, Database, SelectionState], None, None]:
    """Load config, open the database, and initialize the selection state.

    The ``--query`` option of the root command plays the role of the URL.
    """
    from foliodash.config.loader import load_config, resolve_path
    from foliodash.selection.query import QueryString
    from foliodash.selection.state import SelectionState
    from foliodash.selection.store import DatabaseStore
    from foliodash.storage.database import Database
    from foliodash.storage.migrations import ensure_schema

    config = load_config(ctx.obj.get("config_path"))
    db_path = resolve_path(config.database.path)

    with Database(db_path) as db:
        ensure_schema(db)
        state = SelectionState.initialize(
            QueryString(ctx.obj.get("query", "")),
            DatabaseStore(db),
            config.selection,
        )
        yield config, db, state


def _fetch_portfolio_ids(config: FoliodashConfig) -> list[int]:
    from foliodash.api.client import PortfolioApiClient

    refs = PortfolioApiClient(config.api).list_portfolios()
    if refs is None:
        click.echo("Could not fetch the portfolio list from the API.", err=True)
        raise SystemExit(1)
    return [ref.id for ref in refs]


def _echo_state(state: SelectionState) -> None:
    assets = state.assets
    portfolios = state.portfolios
    asset_label = "all" if assets.is_all_selected else ", ".join(assets.ordered)
    if portfolios.is_empty:
        portfolio_label = "none"
    else:
        portfolio_label = ", ".join(str(i) for i in portfolios.ordered)
        if portfolios.is_all_selected:
            portfolio_label += " (all)"

    click.echo(f"Asset types: {asset_label}")
    click.echo(f"Portfolios:  {portfolio_label}")
    click.echo(f"Query:       {state.query.render() or '(empty)'}")


@click.group("select")
def select_group() -> None:
    """Show or change the portfolio and asset-type selection."""
    pass


@select_group.command("show")
@click.pass_context
def select_show(ctx: click.Context) -> None:
    """Print the current selection."""
    with open_selection(ctx) as (_config, _db, state):
        _echo_state(state)


@select_group.command("asset")
@click.argument("tag")
@click.pass_context
def select_asset(ctx: click.Context, tag: str) -> None:
    """Toggle an asset type (e.g. stocks, mutual-funds)."""
    with open_selection(ctx) as (config, _db, state):
        if tag not in config.selection.asset_types:
            click.echo(
                f"Unknown asset type '{tag}'. "
                f"Choose from: {', '.join(config.selection.asset_types)}",
                err=True,
            )
            raise SystemExit(1)
        state.assets.toggle(tag)
        _echo_state(state)


@select_group.command("portfolio")
@click.argument("portfolio_id", type=int)
@click.pass_context
def select_portfolio(ctx: click.Context, portfolio_id: int) -> None:
    """Toggle a portfolio by ID."""
    with open_selection(ctx) as (_config, _db, state):
        state.portfolios.toggle(portfolio_id)
        _echo_state(state)


@select_group.command("only")
@click.argument("portfolio_id", type=int)
@click.pass_context
def select_only(ctx: click.Context, portfolio_id: int) -> None:
    """Select exactly one portfolio."""
    with open_selection(ctx) as (_config, _db, state):
        state.portfolios.select_only(portfolio_id)
        _echo_state(state)


@select_group.command("all-assets")
@click.pass_context
def select_all_assets(ctx: click.Context) -> None:
    """Select every asset type."""
    with open_selection(ctx) as (_config, _db, state):
        state.assets.select_all()
        _echo_state(state)


@select_group.command("all-portfolios")
@click.pass_context
def select_all_portfolios(ctx: click.Context) -> None:
    """Select every portfolio returned by the API."""
    with open_selection(ctx) as (config, _db, state):
        state.reconcile(_fetch_portfolio_ids(config))
        state.portfolios.select_all()
        _echo_state(state)


@select_group.command("clear-portfolios")
@click.pass_context
def select_clear_portfolios(ctx: click.Context) -> None:
    """Deselect all portfolios."""
    with open_selection(ctx) as (_config, _db, state):
        state.portfolios.clear_all()
        _echo_state(state)


@select_group.command("sync")
@click.pass_context
def select_sync(ctx: click.Context) -> None:
    """Fetch the portfolio list and drop selected IDs that no longer exist."""
    with open_selection(ctx) as (config, _db, state):
        ids = _fetch_portfolio_ids(config)
        click.echo(f"Portfolios available: {len(ids)}")
        if state.reconcile(ids):
            click.echo("Selection updated: stale portfolio IDs removed.")
        _echo_state(state)
