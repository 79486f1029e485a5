"""
CLI Application.

Root Typer application: global options and command registration.

Usage:
    clusterctl --help                                   # Show help

    # Cluster selection
    clusterctl clusters                                 # List configured clusters
    clusterctl use staging                              # Select a cluster
    clusterctl which                                    # Show selected cluster

    # Status
    clusterctl health                                   # Probe every node
    clusterctl nodes                                    # List nodes
    clusterctl leader                                   # Show leader
    clusterctl logs node1 -n 200                        # Recent log lines
    clusterctl metrics                                  # Cluster metrics

    # Remote configuration
    clusterctl config show
    clusterctl config set heartbeat_ms=500

    # Operators
    clusterctl operator list
    clusterctl operator show aerospike
    clusterctl operator trigger aerospike add_namespace -p name=ns1

Options:
    --cluster, -C     Use this cluster for one invocation
    --config-file     Path to the configuration file
    --verbose, -v     Enable verbose output
    --debug, -d       Enable debug mode (detailed logging)
"""

from pathlib import Path
from typing import Optional

import structlog
import typer
from rich.console import Console

from clusterctl.cli.commands import cluster_app, operator_app, remote_config_app, status_app
from clusterctl.cli.context import get_state
from clusterctl.core.logging import setup_logging

app = typer.Typer(
    name="clusterctl",
    help="Cluster CLI - health, nodes, leader, logs, metrics, and operator invocation.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register command groups
app.add_typer(cluster_app)
app.add_typer(status_app)
app.add_typer(remote_config_app, name="config")
app.add_typer(operator_app, name="operator")


@app.callback()
def main(
    ctx: typer.Context,
    cluster: Optional[str] = typer.Option(
        None,
        "--cluster",
        "-C",
        help="Cluster to use for this invocation (overrides the selected cluster)",
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        help="Path to the configuration file (default: ./.clusterctl.yaml, then ~/.clusterctl.yaml)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Cluster CLI.

    Inspect a cluster (health, nodes, leader, logs, metrics) and invoke
    operator plugins through the cluster's HTTP API.
    """
    state = get_state(ctx)
    if cluster:
        state.cluster = cluster
    if config_file:
        state.config_path = config_file

    # Configure logging based on flags
    if debug:
        state.log_level = "DEBUG"
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        state.log_level = "INFO"

    setup_logging(level=state.log_level)
    structlog.contextvars.bind_contextvars(source="cli")


if __name__ == "__main__":
    app()
