"""
Cluster Selection Commands.

Commands for choosing which configured cluster the other commands talk to.
The selection is persisted in the configuration file.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clusterctl.cli.context import get_state, handle_errors

app = typer.Typer(help="Cluster selection commands")
console = Console()


@app.command()
def use(
    ctx: typer.Context,
    cluster_name: str = typer.Argument(..., help="Cluster to select"),
) -> None:
    """
    Select a cluster to use.

    Examples:
        clusterctl use staging
    """
    with handle_errors():
        config = get_state(ctx).config()
        config.select_cluster(cluster_name)

    console.print(f"Now using cluster: [bold]{escape(cluster_name)}[/bold]")


@app.command()
def which(ctx: typer.Context) -> None:
    """
    Show currently selected cluster.

    Examples:
        clusterctl which
    """
    with handle_errors():
        config = get_state(ctx).config()

    if not config.selected_cluster:
        console.print("No cluster selected. Use 'clusterctl use <cluster_name>' to select a cluster.")
        return

    console.print(f"Currently selected cluster: [bold]{escape(config.selected_cluster)}[/bold]")
    if config.cluster_override and config.cluster_override != config.selected_cluster:
        console.print(f"[dim]Overridden for this invocation by: {escape(config.cluster_override)}[/dim]")


@app.command()
def clusters(ctx: typer.Context) -> None:
    """
    List available clusters.

    Examples:
        clusterctl clusters
    """
    with handle_errors():
        config = get_state(ctx).config()

    table = Table(title="Available Clusters", show_header=True)
    table.add_column("Cluster", style="cyan")
    table.add_column("Name")
    table.add_column("Nodes", justify="right")
    table.add_column("Selected", justify="center")

    for key in config.cluster_names:
        cluster = config.get_cluster(key)
        selected = "[green]*[/green]" if key == config.selected_cluster else ""
        table.add_row(escape(key), escape(cluster.name or "-"), str(len(cluster.nodes)), selected)

    console.print(table)
