"""Config commands for persistent CLI settings."""

from __future__ import annotations

import json
import sys

import click

from .. import config as settings
from ..errors import ConfigError


@click.group()
def config() -> None:
    """Manage CLI settings."""
    pass


@config.command("show")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
def config_show(json_output: bool) -> None:
    """Show current settings and where each value came from."""
    try:
        cfg = settings.load_config()
    except ConfigError as e:
        click.echo(f"✗ {e.message}", err=True)
        sys.exit(1)

    values = cfg.values()
    if json_output:
        data = {
            "path": str(settings.get_config_path()),
            "values": values,
            "sources": {key: cfg.get_source(key) for key in values},
        }
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("cpinit CLI Configuration")
    click.echo(f"Source: {settings.get_config_path()}\n")
    for key, value in values.items():
        click.echo(f"  {key}: {value if value is not None else '-'}  ({cfg.get_source(key)})")


@config.command("set")
@click.argument("key", type=click.Choice(list(settings.KEY_TYPES)))
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Persist a setting."""
    try:
        settings.save_config(key, value)
    except ConfigError as e:
        click.echo(f"✗ {e.message}", err=True)
        sys.exit(1)
    click.echo(f"✓ Set {key} = {value}")


@config.command("unset")
@click.argument("key", type=click.Choice(list(settings.KEY_TYPES)))
def config_unset(key: str) -> None:
    """Remove a persisted setting."""
    if settings.unset_config(key):
        click.echo(f"✓ Unset {key}")
    else:
        click.echo(f"{key} is not set")
