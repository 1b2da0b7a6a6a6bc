"""Listing of registered template functions."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import yaml
from rich.table import Table

if TYPE_CHECKING:
    from cryptofuncs.core.plugin import FunctionRegistry


def collect_functions(registry: FunctionRegistry) -> list[dict[str, Any]]:
    """Describe every function in the registry, sorted by name.

    Args:
        registry: Registry to describe.

    Returns:
        One description dict per registered name.
    """
    descriptions = []
    for name in registry.names():
        function = registry.lookup(name)
        if function is not None:
            descriptions.append(function.describe(name))
    return descriptions


def format_functions_table(functions: list[dict[str, Any]]) -> Table:
    """Format function descriptions as a table.

    Args:
        functions: Function descriptions.

    Returns:
        Formatted table.
    """
    table = Table(box=None, padding=(0, 1))
    table.add_column("Name", style="bold")
    table.add_column("Kind", style="cyan")
    table.add_column("Digest")
    table.add_column("Hex length", justify="right")

    for info in functions:
        digest = info.get("digest")
        hex_length = info.get("hex_length")
        if info["kind"] == "hash" and digest is None:
            digest = "[yellow]unavailable[/yellow]"
        table.add_row(
            f"$({info['name']})",
            info["kind"],
            digest or "",
            str(hex_length) if hex_length else "",
        )

    return table


def format_functions_json(functions: list[dict[str, Any]]) -> str:
    return json.dumps({"functions": functions}, indent=2)


def format_functions_yaml(functions: list[dict[str, Any]]) -> str:
    return yaml.dump({"functions": functions}, default_flow_style=False, sort_keys=False)
