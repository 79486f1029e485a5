"""
Schema Validator.

Checks user-supplied ``key=value`` arguments against one namespace of an
operation schema (params, config or namespace) and produces the typed
argument mapping that goes into the trigger payload.

Validation is strict and local: every problem is reported before any
request for the trigger crosses the network.
"""

from collections.abc import Mapping
from typing import Any

from clusterctl.core.exceptions import (
    ConversionError,
    MissingRequiredParameterError,
    ParameterTypeError,
    UnknownParameterError,
    UnsupportedTypeError,
)
from clusterctl.operator.converter import TypedValue, convert_value
from clusterctl.operator.schemas import ParameterSchema


def required_parameters(schema: Mapping[str, ParameterSchema]) -> list[dict[str, str]]:
    """Describe the parameters of a namespace that must be supplied or defaulted."""
    return [
        {"name": name, "type": param.type, "description": param.description}
        for name, param in schema.items()
        if param.required
    ]


def validate_arguments(
    supplied: Mapping[str, str],
    schema: Mapping[str, ParameterSchema],
    namespace: str = "params",
) -> dict[str, TypedValue]:
    """
    Validate and convert supplied arguments against a parameter schema.

    Every schema entry is resolved before the supplied values are looked at,
    so a missing required parameter is always reported first and in schema
    order. Absent entries take their default when one is declared; absent
    optional entries without a default are left out entirely.

    Args:
        supplied: Raw values keyed by parameter name
        schema: Declared parameters of one namespace
        namespace: Namespace label used in error messages

    Returns:
        Typed values keyed by parameter name

    Raises:
        MissingRequiredParameterError: Required parameter absent and no default
        UnknownParameterError: Supplied name not declared in the schema
        ParameterTypeError: Supplied value fails conversion
        UnsupportedTypeError: Schema declares a type the converter does not know
    """
    details: dict[str, Any] = {
        "namespace": namespace,
        "required": required_parameters(schema),
    }
    result: dict[str, TypedValue] = {}

    for name, param in schema.items():
        if name in supplied:
            continue
        if param.has_default:
            result[name] = param.default
        elif param.required:
            raise MissingRequiredParameterError(name, namespace, details=details)

    for name, raw in supplied.items():
        param = schema.get(name)
        if param is None:
            raise UnknownParameterError(name, namespace, details=details)
        try:
            result[name] = convert_value(raw, param.type)
        except ConversionError as e:
            raise ParameterTypeError(name, e, namespace, details=details) from e
        except UnsupportedTypeError as e:
            raise UnsupportedTypeError(e.type_name, parameter=name) from e

    return result
