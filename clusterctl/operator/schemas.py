"""
Operator and Wire Schemas.

Pydantic models for everything exchanged with the cluster API: the
response envelope, the operator schema tree, the trigger payload, and
the per-endpoint row types that list commands decode lazily from
``ApiResponse.data``.

Server-side models ignore unknown fields so that a newer server can add
keys without breaking older clients.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

SUPPORTED_TYPES = ("string", "int", "bool", "float")


class _WireBase(BaseModel):
    """Base for models decoded from server responses."""

    model_config = ConfigDict(extra="ignore")


# =============================================================================
# Envelope
# =============================================================================


class ApiResponse(_WireBase):
    """
    Standard API response envelope.

    ``data`` is endpoint-specific and interpreted by the caller.
    """

    success: bool = False
    data: Any = None
    error: str | None = None


# =============================================================================
# Operator schema
# =============================================================================


class ParameterSchema(_WireBase):
    type: str
    required: bool = False
    default: Any = None
    description: str = ""

    @property
    def has_default(self) -> bool:
        return self.default is not None


class OperationSchema(_WireBase):
    description: str = ""
    parameters: dict[str, ParameterSchema] = Field(default_factory=dict)
    config: dict[str, ParameterSchema] = Field(default_factory=dict)
    namespace: dict[str, ParameterSchema] = Field(default_factory=dict)

    @field_validator("parameters", "config", "namespace", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class OperatorSchema(_WireBase):
    name: str
    version: str = ""
    description: str = ""
    operations: dict[str, OperationSchema] = Field(default_factory=dict)

    @field_validator("operations", mode="before")
    @classmethod
    def null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def operation_names(self) -> list[str]:
        return sorted(self.operations)


# =============================================================================
# Trigger
# =============================================================================


class OperatorPayload(BaseModel):
    """Request body for POST /api/operator/trigger/{operator}."""

    model_config = ConfigDict(frozen=True)

    operation: str
    params: dict[str, Any] = Field(default_factory=dict)
    config: dict[str, Any] = Field(default_factory=dict)
    namespace: dict[str, str] = Field(default_factory=dict)
    parallel: bool = False
    target_nodes: list[str] = Field(default_factory=list)

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the request body. ``namespace`` is omitted when empty."""
        exclude = None if self.namespace else {"namespace"}
        return self.model_dump(exclude=exclude)


class TriggerResult(BaseModel):
    """Outcome of a successful trigger."""

    operator: str
    operation: str
    job_id: str | None = None
    data: Any = None


# =============================================================================
# Cluster rows
# =============================================================================


class NodeInfo(_WireBase):
    id: str = ""
    address: str = ""
    last_seen: str = ""
    state: str = ""


class LeaderInfo(_WireBase):
    id: str
    address: str = ""


class OperatorSummary(_WireBase):
    name: str
    version: str = ""
    author: str = ""
    description: str = ""
