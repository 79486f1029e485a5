"""
Remote Configuration Commands.

Commands for reading and changing the cluster's runtime configuration.
Reads may be answered by any node; writes go to the primary node only.
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from clusterctl.cli.client import require_success
from clusterctl.cli.context import CliState, get_state, parse_key_values, run_async
from clusterctl.core.exceptions import DecodeError

app = typer.Typer(help="Cluster configuration commands")
console = Console()


@app.command()
def show(
    ctx: typer.Context,
    section: Optional[str] = typer.Argument(None, help="Top-level key to show"),
) -> None:
    """
    Display the cluster configuration.

    Shows all configuration or a single top-level key.

    Examples:
        clusterctl config show
        clusterctl config show raft
    """
    run_async(_show(get_state(ctx), section))


async def _show(state: CliState, section: str | None) -> None:
    """Async implementation of show command."""
    async with state.client() as client:
        response = await client.get_json("/api/config")

    data = require_success(response, "Fetching configuration failed")
    if not isinstance(data, dict):
        raise DecodeError("Invalid response format for configuration")

    if section:
        if section not in data:
            console.print(f"[red]Unknown section: {escape(section)}[/red]")
            console.print(f"Available sections: {', '.join(data.keys())}", markup=False)
            raise typer.Exit(1)
        data = {section: data[section]}

    _display_config(data)


def _display_config(data: dict) -> None:
    """Display configuration as a tree."""
    tree = Tree("[bold cyan]cluster configuration[/bold cyan]")

    def add_items(parent: Tree, items: dict) -> None:
        for key, value in items.items():
            if isinstance(value, dict):
                branch = parent.add(f"[cyan]{escape(str(key))}[/cyan]")
                add_items(branch, value)
            else:
                parent.add(f"[cyan]{escape(str(key))}[/cyan]: {escape(str(value))}")

    add_items(tree, data)
    console.print(tree)


@app.command("set")
def set_values(
    ctx: typer.Context,
    values: List[str] = typer.Argument(..., help="Settings as key=value"),
) -> None:
    """
    Change cluster configuration values.

    Examples:
        clusterctl config set heartbeat_ms=500
        clusterctl config set log_level=debug snapshot_interval=60
    """
    settings = parse_key_values(values, "VALUES")
    run_async(_set(get_state(ctx), settings))


async def _set(state: CliState, settings: dict[str, str]) -> None:
    """Async implementation of set command."""
    async with state.client() as client:
        response = await client.post_json("/api/config/set", settings)

    require_success(response, "Updating configuration failed")
    console.print(f"[green]✓ Configuration updated[/green] ({', '.join(settings)})")
