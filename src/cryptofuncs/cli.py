"""Click CLI entry point for cryptofuncs."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from cryptofuncs import __version__
from cryptofuncs.context import Context
from cryptofuncs.exceptions import CryptofuncsError

# Global console for user output
console = Console()
error_console = Console(stderr=True)


def setup_logging(verbosity: int) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
    """
    level = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}.get(verbosity, logging.DEBUG)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False)],
    )


pass_context = click.make_pass_decorator(Context, ensure=True)


@click.group()
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase output verbosity (can be repeated: -vv)",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    help="Suppress non-essential output",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Use custom config file",
)
@click.option(
    "--no-color",
    is_flag=True,
    help="Disable colored output",
)
@click.version_option(version=__version__, prog_name="cryptofuncs")
@pass_context
def main(
    ctx: Context,
    verbose: int,
    quiet: bool,
    config_path: Path | None,
    no_color: bool,
) -> None:
    """cryptofuncs - Cryptographic template functions for log rendering.

    Compiles templates using $(hash), $(sha1), $(md5), $(uuid) and friends,
    and renders them against records.
    """
    ctx.verbose = verbose
    ctx.quiet = quiet
    ctx.no_color = no_color

    if no_color:
        console.no_color = True
        error_console.no_color = True

    if not quiet:
        setup_logging(verbose)

    try:
        ctx.load_config(config_path)
    except CryptofuncsError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        sys.exit(e.exit_code)


@main.command()
@pass_context
def version(_ctx: Context) -> None:
    """Show version and exit."""
    console.print(f"cryptofuncs {__version__}")


def register_commands() -> None:
    """Register all subcommands."""
    from cryptofuncs.commands.functions import functions_command
    from cryptofuncs.commands.render import render_command
    from cryptofuncs.commands.validate import validate_command

    main.add_command(render_command)
    main.add_command(functions_command)
    main.add_command(validate_command)


# Register commands on import
register_commands()


if __name__ == "__main__":
    main()
