"""
CLI Invocation State.

Holds what the root callback parsed (global options) and lazily builds the
configuration and HTTP client for the command that runs. One CliState per
process; commands receive it through ``typer.Context.obj``.

Also hosts the shared error rendering used by every command.
"""

import asyncio
from collections.abc import Coroutine, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Sequence

import httpx
import typer
from rich.console import Console
from rich.markup import escape

from clusterctl.cli.client import ClusterClient
from clusterctl.core.config import CliConfig, load_cli_config
from clusterctl.core.exceptions import (
    ApplicationError,
    ClusterNotFoundError,
    UnknownOperationError,
    UnknownOperatorError,
    ValidationError,
)
from clusterctl.core.logging import get_logger, setup_logging

logger = get_logger(__name__)
console = Console()


@dataclass
class CliState:
    """Global options plus lazily-loaded configuration for one invocation."""

    config_path: Path | None = None
    cluster: str | None = None
    log_level: str | None = None
    transport: httpx.AsyncBaseTransport | None = None
    _config: CliConfig | None = field(default=None, repr=False)

    def config(self) -> CliConfig:
        """Load the configuration file once and apply its logging section."""
        if self._config is None:
            self._config = load_cli_config(self.config_path, cluster_override=self.cluster)
            setup_logging(level=self.log_level, config=self._config.settings.logging)
            logger.debug("Configuration loaded", extra={"path": str(self._config.path)})
        return self._config

    def client(self) -> ClusterClient:
        """Create a client for the active cluster."""
        return ClusterClient.from_config(self.config(), transport=self.transport)


def get_state(ctx: typer.Context) -> CliState:
    """Return the invocation state created by the root callback."""
    return ctx.ensure_object(CliState)


def parse_key_values(values: Sequence[str] | None, option: str) -> dict[str, str]:
    """
    Parse repeated ``key=value`` options into a mapping.

    The value may itself contain ``=``; later keys override earlier ones.

    Raises:
        typer.BadParameter: An item has no ``=`` or an empty key
    """
    result: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got {item!r}", param_hint=option)
        result[key] = value
    return result


def report_error(error: ApplicationError) -> None:
    """Render an application error with whatever structure it carries."""
    console.print(f"[red]Error: {escape(error.message)}[/red]")

    if isinstance(error, UnknownOperationError) and error.available:
        console.print("\nAvailable operations:")
        for name in error.available:
            console.print(f"- {name}", markup=False)

    elif isinstance(error, UnknownOperatorError) and error.available:
        console.print("\nAvailable operators:")
        for name in error.available:
            console.print(f"- {name}", markup=False)

    elif isinstance(error, ClusterNotFoundError) and error.available:
        console.print("\nAvailable clusters:")
        for name in error.available:
            console.print(f"- {name}", markup=False)

    elif isinstance(error, ValidationError) and error.details.get("required"):
        namespace = error.details.get("namespace", "params")
        label = "" if namespace == "params" else f"{namespace} "
        console.print(f"\nRequired {label}parameters:")
        for param in error.details["required"]:
            description = f": {param['description']}" if param["description"] else ""
            console.print(f"- {param['name']} ({param['type']}){description}", markup=False)


@contextmanager
def handle_errors() -> Iterator[None]:
    """Turn application errors into a rendered message and exit code 1."""
    try:
        yield
    except ApplicationError as e:
        logger.debug("Command failed", extra={"code": e.code, "error": e.message})
        report_error(e)
        raise typer.Exit(1) from e


def run_async(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a command coroutine with shared error handling."""
    with handle_errors():
        return asyncio.run(coro)
