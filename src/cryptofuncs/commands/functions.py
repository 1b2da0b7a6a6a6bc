"""Functions command for cryptofuncs."""

from __future__ import annotations

import click
from rich.console import Console

from cryptofuncs.context import Context
from cryptofuncs.core import listing

console = Console()


@click.command("functions")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json", "yaml"]),
    default="table",
    help="Output format (default: table)",
)
@click.pass_context
def functions_command(ctx: click.Context, output_format: str) -> None:
    """List the template functions that can be used in templates."""
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]
    functions = listing.collect_functions(cli_ctx.get_registry())

    if output_format == "json":
        click.echo(listing.format_functions_json(functions))
    elif output_format == "yaml":
        click.echo(listing.format_functions_yaml(functions))
    else:
        console.print(f"Template functions ({len(functions)} registered)\n")
        console.print(listing.format_functions_table(functions))
