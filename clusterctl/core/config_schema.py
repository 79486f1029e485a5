"""
Configuration Schemas.

Pydantic models defining the expected structure of the .clusterctl.yaml
file. Used by load_cli_config to validate configuration at load time. If
the file has missing keys, wrong types, or unknown fields, a clear error
is raised at startup instead of a cryptic KeyError deep in command code.

Example file:

    selected_cluster: staging
    timeout: 10
    retries: 1
    clusters:
      staging:
        name: Staging
        port: 8080
        nodes:
          node1: 10.0.0.1
          node2: 10.0.0.2:9090
    logging:
      level: WARNING
      format: console
"""

from pydantic import BaseModel, ConfigDict, Field


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# clusters
# =============================================================================


class ClusterSchema(_StrictBase):
    name: str = ""
    nodes: dict[str, str] = Field(min_length=1)
    port: int | None = Field(default=None, gt=0, lt=65536)


# =============================================================================
# logging
# =============================================================================


class LogFileSchema(_StrictBase):
    enabled: bool = False
    path: str = "~/.clusterctl/clusterctl.jsonl"
    max_bytes: int = 10485760
    backup_count: int = 5


class LoggingSchema(_StrictBase):
    level: str = "WARNING"
    format: str = "console"
    file: LogFileSchema = Field(default_factory=LogFileSchema)


# =============================================================================
# root
# =============================================================================


class CliConfigSchema(_StrictBase):
    clusters: dict[str, ClusterSchema] = Field(default_factory=dict)
    selected_cluster: str | None = None
    timeout: float = Field(default=10, gt=0)
    retries: int = Field(default=0, ge=0)
    logging: LoggingSchema = Field(default_factory=LoggingSchema)
