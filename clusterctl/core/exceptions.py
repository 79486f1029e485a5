"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Every error carries a stable ``code`` so the CLI can render it uniformly,
and the operator errors carry enough structure (available operations,
required parameters) for the caller to present alternatives.
"""

from typing import Any


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Configuration
# =============================================================================


class ConfigurationError(ApplicationError):
    """Raised when the local configuration is missing or invalid."""

    def __init__(self, message: str = "Invalid configuration") -> None:
        super().__init__(message, code="CFG_INVALID")


class ClusterNotFoundError(ConfigurationError):
    """Raised when a cluster name is not present in the configuration."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = sorted(available or [])
        super().__init__(f"Cluster '{name}' not found in configuration")
        self.code = "CFG_CLUSTER_NOT_FOUND"


class NoClusterSelectedError(ConfigurationError):
    """Raised when a command needs a cluster and none is selected."""

    def __init__(self) -> None:
        super().__init__(
            "No cluster selected. Use 'clusterctl use <cluster_name>' to select a cluster"
        )
        self.code = "CFG_NO_CLUSTER"


# =============================================================================
# Remote collaborator
# =============================================================================


class TransportError(ApplicationError):
    """Raised when the cluster cannot be reached (network, timeout, all nodes down)."""

    def __init__(self, message: str = "Cluster unreachable", node: str | None = None) -> None:
        self.node = node
        super().__init__(message, code="SYS_TRANSPORT_ERROR")


class DecodeError(ApplicationError):
    """Raised when the server returns a body that violates the wire contract."""

    def __init__(self, message: str = "Malformed response from server") -> None:
        super().__init__(message, code="SYS_DECODE_ERROR")


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found", code: str = "RES_NOT_FOUND") -> None:
        super().__init__(message, code=code)


class UnknownOperatorError(NotFoundError):
    """Raised when the server does not know the requested operator."""

    def __init__(self, operator: str, reason: str | None = None, available: list[str] | None = None) -> None:
        self.operator = operator
        self.reason = reason
        self.available = sorted(available or [])
        message = f"Operator '{operator}' not found"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="OP_UNKNOWN_OPERATOR")


class UnknownOperationError(NotFoundError):
    """Raised when an operator does not expose the requested operation."""

    def __init__(self, operator: str, operation: str, available: list[str]) -> None:
        self.operator = operator
        self.operation = operation
        self.available = sorted(available)
        super().__init__(
            f"Operation '{operation}' not found for operator '{operator}'",
            code="OP_UNKNOWN_OPERATION",
        )


class RequestRejectedError(ApplicationError):
    """Raised when the server answered a request with success=false."""

    def __init__(self, message: str, reason: str | None = None, code: str = "SRV_REJECTED") -> None:
        self.reason = reason or "no reason given"
        super().__init__(f"{message}: {self.reason}", code=code)


class OperatorRejectedError(RequestRejectedError):
    """Raised when the server processed a trigger but reported success=false."""

    def __init__(self, operator: str, operation: str, reason: str | None) -> None:
        self.operator = operator
        self.operation = operation
        super().__init__(
            f"Failed to trigger operation '{operation}' on '{operator}'",
            reason=reason,
            code="OP_REJECTED",
        )


# =============================================================================
# Argument validation
# =============================================================================


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
        code: str = "VAL_VALIDATION_ERROR",
    ) -> None:
        self.details = details or {}
        super().__init__(message, code=code)


class ConversionError(ValidationError):
    """Raised when a raw string cannot be converted to its declared type."""

    def __init__(self, value: str, target_type: str) -> None:
        self.value = value
        self.target_type = target_type
        super().__init__(
            f"cannot convert {value!r} to {target_type}",
            details={"value": value, "type": target_type},
            code="VAL_CONVERSION_ERROR",
        )


class MissingRequiredParameterError(ValidationError):
    """Raised when a required parameter without default is not supplied."""

    def __init__(self, name: str, namespace: str = "params", details: dict[str, Any] | None = None) -> None:
        self.name = name
        self.namespace = namespace
        super().__init__(
            f"required {namespace} parameter '{name}' is missing",
            details=details,
            code="VAL_MISSING_PARAMETER",
        )


class UnknownParameterError(ValidationError):
    """Raised when a supplied parameter is not declared by the schema."""

    def __init__(self, name: str, namespace: str = "params", details: dict[str, Any] | None = None) -> None:
        self.name = name
        self.namespace = namespace
        super().__init__(
            f"unknown {namespace} parameter '{name}'",
            details=details,
            code="VAL_UNKNOWN_PARAMETER",
        )


class ParameterTypeError(ValidationError):
    """Raised when a supplied parameter fails conversion to its declared type."""

    def __init__(
        self,
        name: str,
        underlying: ConversionError,
        namespace: str = "params",
        details: dict[str, Any] | None = None,
    ) -> None:
        self.name = name
        self.namespace = namespace
        self.underlying = underlying
        super().__init__(
            f"{namespace} parameter '{name}': {underlying.message}",
            details=details,
            code="VAL_PARAMETER_TYPE",
        )


class UnsupportedTypeError(ApplicationError):
    """Raised when a schema declares a type the converter does not know."""

    def __init__(self, type_name: str, parameter: str | None = None) -> None:
        self.type_name = type_name
        self.parameter = parameter
        message = f"unsupported type: {type_name}"
        if parameter:
            message = f"parameter '{parameter}': {message}"
        super().__init__(message, code="SCHEMA_UNSUPPORTED_TYPE")
