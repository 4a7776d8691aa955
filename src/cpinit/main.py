"""CLI main entry point."""

import click

from .commands.config import config
from .commands.init import init
from .config import DEFAULT_LOG_LEVEL, load_config
from .errors import ConfigError
from .shared.logging import configure_logging, level_from_verbosity


def _configured_log_level() -> str:
    # Broken settings are reported by the command that loads them.
    try:
        return load_config().log_level
    except ConfigError:
        return DEFAULT_LOG_LEVEL


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity")
@click.option(
    "--log-json/--log-console",
    default=None,
    help="Log format (default: console on stderr, JSON in a log file)",
)
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs to a file")
@click.pass_context
def cli(ctx: click.Context, verbose: int, log_json: bool | None, log_file: str | None) -> None:
    """Bootstrap a control plane, one component at a time."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(
        level_from_verbosity(verbose, default=_configured_log_level()),
        log_file=log_file,
        json_output=log_json,
    )


@cli.command()
def version() -> None:
    """Show version information."""
    from . import __version__

    click.echo(f"cpinit version {__version__}")


cli.add_command(init)
cli.add_command(config)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
