"""Render command for cryptofuncs."""

from __future__ import annotations

import sys
from typing import IO

import click
from rich.console import Console
from rich.markup import escape

from cryptofuncs.context import Context
from cryptofuncs.core import records as records_mod
from cryptofuncs.core import renderer
from cryptofuncs.core.template import LogTemplate
from cryptofuncs.exceptions import CryptofuncsError

error_console = Console(stderr=True)


@click.command("render")
@click.argument("template")
@click.option(
    "--record-file",
    "-r",
    "record_file",
    type=click.File("r"),
    default=None,
    help="Read JSON-lines records from FILE ('-' for stdin)",
)
@click.option(
    "--set",
    "-s",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Set a record value (repeatable)",
)
@click.option(
    "--jobs",
    "-j",
    type=click.IntRange(min=1),
    default=None,
    help="Worker threads used for rendering (default: from config)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default=None,
    help="Output format (default: from config)",
)
@click.pass_context
def render_command(
    ctx: click.Context,
    template: str,
    record_file: IO[str] | None,
    assignments: tuple[str, ...],
    jobs: int | None,
    output_format: str | None,
) -> None:
    """Render TEMPLATE against records.

    TEMPLATE is either template text such as '$(sha1 -l 8 $HOST)' or the
    name of a template in the config file. Without --record-file a single
    record built from the --set values is rendered. With --record-file,
    --set values are applied on top of every record read.
    """
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]
    config = cli_ctx.load_config()

    jobs = jobs or config.render.jobs
    output_format = output_format or config.render.output_format
    text = renderer.resolve_template_text(template, config)

    try:
        overrides = records_mod.parse_assignments(assignments)
        compiled = LogTemplate.compile(text, cli_ctx.get_registry())
    except CryptofuncsError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(e.exit_code)

    try:
        if record_file is None:
            messages = [overrides]
        else:
            messages = list(records_mod.read_records(record_file))
            for message in messages:
                message.values.update(overrides.values)
        results = renderer.render_records(compiled, messages, jobs=jobs)
    except CryptofuncsError as e:
        error_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(e.exit_code)
    finally:
        compiled.close()

    if output_format == "json":
        click.echo(renderer.format_render_json(results))
    else:
        for result in results:
            click.echo(result.output)
