"""
Cluster Status Commands.

Commands for checking cluster health and reading node, leader, log and
metric information. All of them use the read path: any reachable node
may answer.
"""

import json
from urllib.parse import quote

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clusterctl.cli.client import require_success
from clusterctl.cli.context import CliState, get_state, run_async
from clusterctl.core.exceptions import DecodeError, TransportError
from clusterctl.core.logging import get_logger
from clusterctl.operator.schemas import LeaderInfo, NodeInfo

app = typer.Typer(help="Cluster status commands")
console = Console()
logger = get_logger(__name__)


@app.command()
def health(ctx: typer.Context) -> None:
    """
    Check cluster health.

    Probes every configured node individually and exits non-zero when any
    node is not healthy.

    Examples:
        clusterctl health
        clusterctl --cluster prod health
    """
    all_healthy = run_async(_health(get_state(ctx)))
    if not all_healthy:
        raise typer.Exit(1)


async def _health(state: CliState) -> bool:
    """Async implementation of health command."""
    async with state.client() as client:
        table = Table(title="Cluster Health", show_header=True)
        table.add_column("Node", style="cyan")
        table.add_column("Address")
        table.add_column("Status")
        table.add_column("Details")

        all_healthy = True
        for node, base_url in client.endpoints:
            healthy = False
            try:
                response = await client.get_json_from(node, "/api/health")
            except TransportError as e:
                status, details = "[red]Unreachable[/red]", e.message
            except DecodeError as e:
                status, details = "[red]Invalid response[/red]", e.message
            else:
                healthy = response.success
                if healthy:
                    status, details = "[green]Healthy[/green]", _health_details(response.data)
                else:
                    status, details = "[red]Unhealthy[/red]", response.error or "-"

            all_healthy = all_healthy and healthy
            table.add_row(node, base_url, status, escape(details))

        console.print(table)
        return all_healthy


def _health_details(data: object) -> str:
    if isinstance(data, dict):
        return ", ".join(f"{key}: {value}" for key, value in data.items()) or "-"
    if data is None:
        return "-"
    return str(data)


@app.command()
def nodes(ctx: typer.Context) -> None:
    """
    List all nodes in the cluster.

    Examples:
        clusterctl nodes
    """
    run_async(_nodes(get_state(ctx)))


async def _nodes(state: CliState) -> None:
    """Async implementation of nodes command."""
    async with state.client() as client:
        response = await client.get_json("/api/nodes")

    data = require_success(response, "Fetching nodes failed")
    if not isinstance(data, list):
        raise DecodeError("Invalid response format for nodes")

    table = Table(title="Cluster Nodes", show_header=True)
    table.add_column("Node ID", style="cyan")
    table.add_column("Address")
    table.add_column("Last Seen")
    table.add_column("State")

    for row in data:
        try:
            node = NodeInfo.model_validate(row)
        except ValidationError as e:
            logger.warning("Skipping malformed node entry", extra={"row": row, "error": str(e)})
            continue
        table.add_row(
            escape(node.id), escape(node.address), escape(node.last_seen), escape(node.state),
        )

    console.print(table)


@app.command()
def leader(ctx: typer.Context) -> None:
    """
    Get current cluster leader.

    Examples:
        clusterctl leader
    """
    run_async(_leader(get_state(ctx)))


async def _leader(state: CliState) -> None:
    """Async implementation of leader command."""
    async with state.client() as client:
        response = await client.get_json("/api/leader")

    data = require_success(response, "Fetching leader failed")
    try:
        info = LeaderInfo.model_validate(data)
    except ValidationError as e:
        raise DecodeError("Invalid response format for leader") from e

    table = Table(title="Cluster Leader", show_header=True)
    table.add_column("Leader ID", style="cyan")
    table.add_column("Address")
    table.add_row(escape(info.id), escape(info.address))
    console.print(table)


@app.command()
def logs(
    ctx: typer.Context,
    node_id: str = typer.Argument(..., help="Node to read logs from"),
    lines: int = typer.Option(100, "--lines", "-n", min=1, help="Number of lines to fetch"),
    follow: bool = typer.Option(False, "--follow", "-f", help="Ask the server to follow the log"),
) -> None:
    """
    Show recent log lines of a node.

    --follow is forwarded to the server, but live streaming is not
    implemented yet: the latest lines are printed once.

    Examples:
        clusterctl logs node1
        clusterctl logs node1 -n 500
    """
    run_async(_logs(get_state(ctx), node_id, lines, follow))


async def _logs(state: CliState, node_id: str, lines: int, follow: bool) -> None:
    """Async implementation of logs command."""
    params: dict[str, object] = {"lines": lines}
    if follow:
        params["follow"] = "true"
        logger.warning("Log streaming is not supported, showing latest lines", extra={"node": node_id})
        console.print("[dim]Live streaming is not supported; showing the latest lines.[/dim]")

    async with state.client() as client:
        response = await client.get_json(f"/api/logs/{quote(node_id, safe='')}", params=params)

    data = require_success(response, f"Fetching logs for {node_id} failed")
    if not isinstance(data, list):
        raise DecodeError("Invalid response format for logs")

    for line in data:
        if not isinstance(line, str):
            logger.warning("Skipping malformed log line", extra={"node": node_id, "line": line})
            continue
        console.print(line, markup=False, highlight=False)


@app.command()
def metrics(ctx: typer.Context) -> None:
    """
    Show cluster metrics.

    Examples:
        clusterctl metrics
    """
    run_async(_metrics(get_state(ctx)))


async def _metrics(state: CliState) -> None:
    """Async implementation of metrics command."""
    async with state.client() as client:
        response = await client.get_json("/api/metrics")

    data = require_success(response, "Fetching metrics failed")
    if not isinstance(data, dict):
        raise DecodeError("Invalid response format for metrics")

    table = Table(title="Cluster Metrics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")

    for key, value in data.items():
        rendered = json.dumps(value) if isinstance(value, (dict, list)) else str(value)
        table.add_row(escape(str(key)), escape(rendered))

    console.print(table)
