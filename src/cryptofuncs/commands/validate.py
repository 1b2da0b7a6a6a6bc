"""Validate command for cryptofuncs."""

from __future__ import annotations

import click
from rich.console import Console

from cryptofuncs.context import Context
from cryptofuncs.core import validator

console = Console()


@click.command("validate")
@click.pass_context
def validate_command(ctx: click.Context) -> None:
    """Validate configuration and configured templates.

    Checks that the config file parses and that every template under
    'templates' compiles.
    """
    cli_ctx: Context = ctx.find_object(Context)  # type: ignore[assignment]

    config_path = None
    loaded_config = None
    if cli_ctx:
        config_path = cli_ctx.config_path
        loaded_config = cli_ctx.config

    console.print("Validating cryptofuncs setup...\n")

    report = validator.run_validation(config_path, loaded_config)

    for check in report.checks:
        icon = "[green]✓[/green]" if check.passed else "[red]✗[/red]"
        console.print(f"{icon} {check.message}")

        if check.details:
            if check.passed:
                console.print(f"  [yellow]⚠[/yellow] {check.details}")
            else:
                console.print(f"    {check.details}", markup=False)

    console.print()
    if report.passed:
        warning_count = len(report.warnings)
        if warning_count > 0:
            console.print(f"[green]Validation passed[/green] with {warning_count} warning(s).")
        else:
            console.print("[green]Validation passed.[/green]")
    else:
        failure_count = len(report.failures)
        console.print(f"[red]Validation failed[/red] with {failure_count} error(s).")
        raise SystemExit(1)
