# ABOUTME: Command-line interface for creating, converting and inspecting mix documents
# ABOUTME: Thin click wrapper around MixConfig and MixState for host tooling and debugging
"""mixconf command-line interface"""

import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel

from mixconf.config import CONFIG_FILENAME, MixConfig, load_config
from mixconf.exceptions import MixconfError
from mixconf.format_resolver import FormatResolver
from mixconf.logging_config import setup_logging
from mixconf.state import load_state

logger = logging.getLogger(__name__)


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


@click.group()
@click.pass_context
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(dir_okay=False),
    help=f"Path to the config file (default: ./{CONFIG_FILENAME})",
)
@click.option(
    "--log-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Also write a debug log to this file",
)
def cli(ctx, debug, config_path, log_file):
    """mixconf - manage builder.conf and mixer.state for a mix workspace"""
    # Variables referenced as $NAME in builder.conf may come from .env
    load_dotenv(Path.cwd() / ".env")

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path

    setup_logging("DEBUG" if debug else "INFO", log_file=log_file)


@cli.command()
@click.pass_context
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
def init(ctx, force):
    """Create a default config at --config, or ./builder.conf.

    Paths inside it are based on the current directory.
    """
    target = Path(ctx.obj["config_path"] or Path.cwd() / CONFIG_FILENAME)
    if target.exists() and not force:
        click.echo(f"{target} already exists (use --force to overwrite)", err=True)
        sys.exit(1)

    try:
        config = MixConfig()
        config.create_default_config(target)
    except (MixconfError, OSError) as e:
        _fail(e)

    click.echo(f"Created {config.get_filename()}")


@cli.command()
@click.pass_context
def show(ctx):
    """Load, validate and print the configuration."""
    try:
        config = load_config(ctx.obj["config_path"])
    except (MixconfError, OSError) as e:
        _fail(e)

    config.print()


@cli.command()
@click.pass_context
def validate(ctx):
    """Check that the configuration loads and has every required field."""
    try:
        config = load_config(ctx.obj["config_path"])
    except (MixconfError, OSError) as e:
        _fail(e)

    click.echo(f"{config.get_filename()} is valid (version {config.get_version()})")


@cli.command()
@click.pass_context
def convert(ctx):
    """Upgrade a legacy config file to the current format."""
    config = MixConfig()
    try:
        converted = config.convert(ctx.obj["config_path"])
    except (MixconfError, OSError) as e:
        _fail(e)

    if converted:
        click.echo(f"Converted {config.get_filename()} to version {config.get_version()}")
        if config.has_format_field:
            click.echo(f"FORMAT {config.legacy_format} should now be recorded in mixer.state")
    else:
        click.echo(f"{config.get_filename()} is already at version {config.get_latest_version()}")


@cli.command()
@click.option(
    "--file",
    "state_path",
    default=None,
    type=click.Path(dir_okay=False),
    help="Path to the state file (default: ./mixer.state)",
)
@click.option("--offline/--online", default=None, help="Update the offline flag")
@click.pass_context
def state(ctx, state_path, offline):
    """Show mixer.state, creating it on first use."""
    resolver = FormatResolver(config_path=ctx.obj["config_path"] or CONFIG_FILENAME)
    try:
        mix_state = load_state(state_path, resolver=resolver)
        if offline is not None and offline != mix_state.offline:
            mix_state.offline = offline
            mix_state.save()
    except (MixconfError, OSError) as e:
        _fail(e)

    console = Console()
    body = (
        f"FORMAT:  {mix_state.format}  (from {mix_state.format_source or 'state file'})\n"
        f"OFFLINE: {str(mix_state.offline).lower()}\n"
        f"VERSION: {mix_state.get_version()}"
    )
    console.print(Panel(body, title=mix_state.get_filename()))


if __name__ == "__main__":
    cli()
