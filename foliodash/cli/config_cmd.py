"""Config CLI commands: show, validate."""

from __future__ import annotations

import click


@click.group("config")
def config_group() -> None:
    """Manage configuration."""
    pass


@config_group.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the resolved configuration."""
    import json

    from foliodash.config.loader import load_config

    config = load_config(ctx.obj.get("config_path"))
    dumped = config.model_dump()
    if dumped["api"]["access_token"]:
        dumped["api"]["access_token"] = "***"
    click.echo(json.dumps(dumped, indent=2, default=str))


@config_group.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate config.yaml against the schema."""
    from foliodash.config.loader import load_config

    try:
        config = load_config(ctx.obj.get("config_path"))
        click.echo("Config is valid.")
        click.echo(f"  Version: {config.version}")
        click.echo(f"  API: {config.api.base_url} "
                   f"(token={'set' if config.api.access_token else 'unset'}, "
                   f"timeout={config.api.timeout:g}s)")
        click.echo(f"  Asset types: {', '.join(config.selection.asset_types)}")
        click.echo(f"  Database: {config.database.path}")
    except Exception as e:
        click.echo(f"Config validation failed: {e}", err=True)
        raise SystemExit(1) from None
