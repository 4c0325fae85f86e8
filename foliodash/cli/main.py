"""Top-level CLI entry point for foliodash."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from foliodash import __version__


@click.group()
@click.version_option(version=__version__, prog_name="foliodash")
@click.option(
    "--config",
    type=click.Path(),
    default=None,
    envvar="FOLIODASH_CONFIG",
    help="Path to config.yaml",
)
@click.option(
    "--query",
    "-q",
    default="",
    help="Query string overriding the stored selection, e.g. 'assets=stocks&portfolios=1,3'",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, config: str | None, query: str, verbose: bool) -> None:
    """foliodash -- multi-portfolio holdings and totals."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["query"] = query

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


# Register sub-commands
from foliodash.cli.config_cmd import config_group  # noqa: E402
from foliodash.cli.holdings_cmd import holdings_cmd, summary_cmd  # noqa: E402
from foliodash.cli.select_cmd import select_group  # noqa: E402

cli.add_command(config_group, "config")
cli.add_command(holdings_cmd, "holdings")
cli.add_command(select_group, "select")
cli.add_command(summary_cmd, "summary")


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Initialize foliodash: create the data directory, database, and a default config."""
    import yaml

    from foliodash.config.loader import load_config, resolve_path
    from foliodash.storage.database import Database
    from foliodash.storage.migrations import ensure_schema

    config = load_config(ctx.obj.get("config_path"))

    foliodash_dir = Path("~/.foliodash").expanduser()
    foliodash_dir.mkdir(parents=True, exist_ok=True)

    db_path = resolve_path(config.database.path)
    click.echo(f"  Database: {db_path}")

    with Database(db_path) as db:
        version = ensure_schema(db)
        click.echo(f"  Schema version: {version}")

    user_config = foliodash_dir / "config.yaml"
    if not user_config.exists():
        user_config.write_text(yaml.safe_dump(config.model_dump(), sort_keys=False))
        click.echo(f"  Wrote default config to {user_config}")

    click.echo("\nfoliodash initialized successfully.")
    click.echo("Next steps:")
    click.echo(f"  1. Edit {user_config} to set api.base_url and api.access_token")
    click.echo("  2. Run: foliodash select sync     (to load your portfolios)")
    click.echo("  3. Run: foliodash summary         (to see totals)")
