"""
Configuration Management.

Loads the cluster configuration from a single YAML file and validates it
against CliConfigSchema. The resolved configuration is an explicit value
(CliConfig) handed to the client and commands; nothing here is global.

Lookup order for the config file:
    1. --config-file option
    2. CLUSTERCTL_CONFIG environment variable
    3. ./.clusterctl.yaml
    4. ~/.clusterctl.yaml

Environment (CLUSTERCTL_ prefix):
    CLUSTERCTL_CONFIG   - Path to the config file
    CLUSTERCTL_CLUSTER  - One-shot cluster override (same as --cluster)
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from clusterctl.core.config_schema import CliConfigSchema, ClusterSchema
from clusterctl.core.exceptions import (
    ClusterNotFoundError,
    ConfigurationError,
    NoClusterSelectedError,
)

CONFIG_FILENAME = ".clusterctl.yaml"


class EnvSettings(BaseSettings):
    """Overrides read from CLUSTERCTL_* environment variables."""

    config: str | None = None
    cluster: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERCTL_",
        case_sensitive=False,
        extra="ignore",
    )


def find_config_file(explicit: str | Path | None = None) -> Path:
    """
    Locate the configuration file.

    Args:
        explicit: Path given on the command line. Takes precedence over
            the environment and the default locations.

    Returns:
        Path to an existing configuration file.

    Raises:
        ConfigurationError: If no configuration file can be found.
    """
    if explicit is None:
        explicit = EnvSettings().config

    if explicit is not None:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")
        return path

    candidates = [Path.cwd() / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    searched = ", ".join(str(c) for c in candidates)
    raise ConfigurationError(f"Unable to find {CONFIG_FILENAME} (searched: {searched})")


def load_yaml_config(path: Path) -> dict[str, Any]:
    """Load a YAML mapping from disk. An empty file yields an empty dict."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Unable to read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid configuration in {path}: top level must be a mapping")
    return data


class CliConfig:
    """
    Validated configuration bound to the file it came from.

    Carries the optional one-shot cluster override so that commands can
    resolve "the cluster to talk to" without touching global state.
    """

    def __init__(
        self,
        settings: CliConfigSchema,
        path: Path | None = None,
        cluster_override: str | None = None,
    ) -> None:
        self.settings = settings
        self.path = path
        self.cluster_override = cluster_override

    @property
    def timeout(self) -> float:
        return self.settings.timeout

    @property
    def retries(self) -> int:
        return self.settings.retries

    @property
    def selected_cluster(self) -> str | None:
        return self.settings.selected_cluster or None

    @property
    def cluster_names(self) -> list[str]:
        return list(self.settings.clusters)

    def get_cluster(self, name: str) -> ClusterSchema:
        """Look up a cluster by name."""
        try:
            return self.settings.clusters[name]
        except KeyError:
            raise ClusterNotFoundError(name, self.cluster_names) from None

    def active_cluster(self) -> tuple[str, ClusterSchema]:
        """
        Resolve the cluster the current invocation targets.

        The --cluster override wins over the persisted selection.

        Raises:
            NoClusterSelectedError: Neither an override nor a selection exists.
            ClusterNotFoundError: The chosen name is not configured.
        """
        name = self.cluster_override or self.selected_cluster
        if not name:
            raise NoClusterSelectedError()
        return name, self.get_cluster(name)

    def select_cluster(self, name: str) -> None:
        """Validate and persist the selected cluster back to the config file."""
        self.get_cluster(name)
        if self.path is None:
            raise ConfigurationError("Cannot persist cluster selection: configuration has no file")

        raw = load_yaml_config(self.path)
        raw["selected_cluster"] = name
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                yaml.safe_dump(raw, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise ConfigurationError(f"Error saving config {self.path}: {e}") from e

        self.settings.selected_cluster = name


def load_cli_config(
    path: str | Path | None = None,
    cluster_override: str | None = None,
) -> CliConfig:
    """
    Find, load and validate the configuration file.

    Args:
        path: Explicit config file path (from --config-file).
        cluster_override: One-shot cluster name (from --cluster). Falls
            back to CLUSTERCTL_CLUSTER.

    Raises:
        ConfigurationError: File missing, unreadable, or schema-invalid.
    """
    config_path = find_config_file(path)
    raw = load_yaml_config(config_path)
    try:
        settings = CliConfigSchema(**raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {config_path}:\n{e}") from e

    if cluster_override is None:
        cluster_override = EnvSettings().cluster

    return CliConfig(settings, path=config_path, cluster_override=cluster_override)
