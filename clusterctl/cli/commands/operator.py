"""
Operator Commands.

Commands for discovering operator plugins installed on the cluster and
triggering their operations. Operation arguments are validated locally
against the schema the server publishes before anything is submitted.
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from clusterctl.cli.client import ClusterClient
from clusterctl.cli.context import CliState, get_state, parse_key_values, run_async
from clusterctl.core.exceptions import ApplicationError, UnknownOperatorError
from clusterctl.core.logging import get_logger
from clusterctl.operator.dispatcher import OperationDispatcher
from clusterctl.operator.fetcher import SchemaFetcher
from clusterctl.operator.schemas import OperatorSchema, ParameterSchema

app = typer.Typer(help="Operator commands")
console = Console()
logger = get_logger(__name__)


@app.command("list")
def list_operators(
    ctx: typer.Context,
    operator_name: Optional[str] = typer.Argument(None, help="Show details for this operator"),
) -> None:
    """
    List available operators or show detailed info for a specific operator.

    Examples:
        clusterctl operator list
        clusterctl operator list aerospike
    """
    state = get_state(ctx)
    if operator_name:
        run_async(_show(state, operator_name))
    else:
        run_async(_list(state))


async def _list(state: CliState) -> None:
    """Async implementation of list command."""
    async with state.client() as client:
        operators = await SchemaFetcher(client).list_operators()

    table = Table(title="Available Operators", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Version", justify="center")
    table.add_column("Author")
    table.add_column("Description")

    for operator in operators:
        table.add_row(
            escape(operator.name),
            escape(operator.version),
            escape(operator.author),
            escape(operator.description),
        )

    console.print(table)
    console.print("[dim]Use 'clusterctl operator show <name>' for detailed information[/dim]")


@app.command()
def show(
    ctx: typer.Context,
    operator_name: str = typer.Argument(..., help="Operator to describe"),
) -> None:
    """
    Show detailed information for a specific operator.

    Examples:
        clusterctl operator show aerospike
    """
    run_async(_show(get_state(ctx), operator_name))


async def _show(state: CliState, operator_name: str) -> None:
    """Async implementation of show command."""
    async with state.client() as client:
        try:
            schema = await SchemaFetcher(client).fetch(operator_name)
        except UnknownOperatorError as e:
            e.available = await _available_operators(client)
            raise

    _display_operator(schema)


def _display_operator(schema: OperatorSchema) -> None:
    """Display an operator schema with one table per argument namespace."""
    console.print(f"\n[bold]Operator:[/bold]    {escape(schema.name)}")
    console.print(f"[bold]Version:[/bold]     {escape(schema.version or '-')}")
    console.print(f"[bold]Description:[/bold] {escape(schema.description or '-')}\n")

    console.print("[bold]Available Operations[/bold]")

    for name, operation in schema.operations.items():
        console.print(f"\n[bold cyan]{escape(name)}[/bold cyan]")
        if operation.description:
            console.print(operation.description, markup=False)

        sections = (
            ("Parameters", operation.parameters),
            ("Config", operation.config),
            ("Namespace", operation.namespace),
        )
        for title, params in sections:
            if params:
                console.print(_parameter_table(title, params))


def _parameter_table(title: str, params: dict[str, ParameterSchema]) -> Table:
    table = Table(title=title, title_justify="left", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Required", justify="center")
    table.add_column("Default")
    table.add_column("Description")

    for name, param in params.items():
        table.add_row(
            escape(name),
            escape(param.type),
            "yes" if param.required else "no",
            "-" if param.default is None else escape(str(param.default)),
            escape(param.description),
        )
    return table


async def _available_operators(client: ClusterClient) -> list[str]:
    """Best-effort listing of installed operators after an unknown-operator error."""
    try:
        operators = await SchemaFetcher(client).list_operators()
    except ApplicationError as e:
        logger.warning("Could not list available operators", extra={"error": e.message})
        return []
    return sorted(operator.name for operator in operators)


@app.command()
def trigger(
    ctx: typer.Context,
    operator_name: str = typer.Argument(..., help="Operator to invoke"),
    operation: str = typer.Argument(..., help="Operation to trigger"),
    params: Optional[List[str]] = typer.Option(
        None, "--param", "-p", help="Operation parameter as key=value (repeatable)",
    ),
    config: Optional[List[str]] = typer.Option(
        None, "--config", "-c", help="Config parameter as key=value (repeatable)",
    ),
    namespace: Optional[List[str]] = typer.Option(
        None, "--namespace", "-n", help="Namespace parameter as key=value (repeatable)",
    ),
    parallel: bool = typer.Option(
        False, "--parallel", help="Ask the cluster to run on target nodes in parallel",
    ),
    target_nodes: Optional[List[str]] = typer.Option(
        None, "--target", "-t", help="Node to run on (repeatable; default: server's choice)",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Validate and print the payload without submitting it",
    ),
) -> None:
    """
    Trigger operator operation.

    Arguments are checked against the operator's published schema before
    the request is sent; the request goes to a single node and is never
    retried.

    Examples:
        clusterctl operator trigger aerospike add_namespace -p name=ns1
        clusterctl operator trigger aerospike add_namespace -p name=ns1 -p high_water_disk_pct=40
        clusterctl operator trigger aerospike restart --parallel -t node1 -t node2
    """
    raw_params = parse_key_values(params, "--param")
    raw_config = parse_key_values(config, "--config")
    raw_namespace = parse_key_values(namespace, "--namespace")

    run_async(_trigger(
        get_state(ctx),
        operator_name,
        operation,
        raw_params,
        raw_config,
        raw_namespace,
        parallel,
        target_nodes or [],
        dry_run,
    ))


async def _trigger(
    state: CliState,
    operator_name: str,
    operation: str,
    params: dict[str, str],
    config: dict[str, str],
    namespace: dict[str, str],
    parallel: bool,
    target_nodes: list[str],
    dry_run: bool,
) -> None:
    """Async implementation of trigger command."""
    async with state.client() as client:
        dispatcher = OperationDispatcher(client)
        try:
            payload = await dispatcher.prepare(
                operator_name,
                operation,
                params=params,
                config=config,
                parallel=parallel,
                target_nodes=target_nodes,
                namespace=namespace,
            )
        except UnknownOperatorError as e:
            e.available = await _available_operators(client)
            raise

        if dry_run:
            console.print("[dim]Dry run: payload not submitted[/dim]")
            console.print_json(data=payload.to_wire())
            return

        result = await dispatcher.submit(operator_name, payload)

    console.print("[green]✓ Operation triggered successfully[/green]")
    if result.job_id:
        console.print(f"Job ID: {result.job_id}", markup=False)
