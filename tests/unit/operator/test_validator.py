"""Unit tests for clusterctl.operator.validator."""

import pytest

from clusterctl.core.exceptions import (
    ConversionError,
    MissingRequiredParameterError,
    ParameterTypeError,
    UnknownParameterError,
    UnsupportedTypeError,
)
from clusterctl.operator.schemas import ParameterSchema
from clusterctl.operator.validator import required_parameters, validate_arguments


def _schema(**entries: dict) -> dict[str, ParameterSchema]:
    return {name: ParameterSchema(**entry) for name, entry in entries.items()}


@pytest.fixture
def namespace_schema() -> dict[str, ParameterSchema]:
    return _schema(
        name={"type": "string", "required": True, "description": "Namespace name"},
        high_water_disk_pct={"type": "int", "required": False, "default": 70},
        memory_gb={"type": "float", "required": False},
        enabled={"type": "bool", "required": True, "default": True},
    )


class TestRequiredParameters:
    def test_missing_required_without_default_names_parameter(self, namespace_schema):
        with pytest.raises(MissingRequiredParameterError) as exc_info:
            validate_arguments({"high_water_disk_pct": "40"}, namespace_schema)
        assert exc_info.value.name == "name"
        assert exc_info.value.namespace == "params"

    def test_missing_reported_before_unknown_supplied_key(self, namespace_schema):
        """Schema entries are resolved before supplied keys are inspected."""
        with pytest.raises(MissingRequiredParameterError):
            validate_arguments({"typo": "x"}, namespace_schema)

    def test_first_missing_in_schema_order(self):
        schema = _schema(
            alpha={"type": "string", "required": True},
            beta={"type": "string", "required": True},
        )
        with pytest.raises(MissingRequiredParameterError) as exc_info:
            validate_arguments({}, schema)
        assert exc_info.value.name == "alpha"

    def test_required_with_default_is_injected(self, namespace_schema):
        result = validate_arguments({"name": "ns1"}, namespace_schema)
        assert result["enabled"] is True

    def test_error_details_list_required_parameters(self, namespace_schema):
        with pytest.raises(MissingRequiredParameterError) as exc_info:
            validate_arguments({}, namespace_schema, namespace="config")
        details = exc_info.value.details
        assert details["namespace"] == "config"
        assert [p["name"] for p in details["required"]] == ["name", "enabled"]
        assert details["required"][0] == {
            "name": "name",
            "type": "string",
            "description": "Namespace name",
        }


class TestDefaults:
    def test_optional_default_is_injected(self, namespace_schema):
        result = validate_arguments({"name": "ns1"}, namespace_schema)
        assert result == {"name": "ns1", "high_water_disk_pct": 70, "enabled": True}

    def test_supplied_value_overrides_default(self, namespace_schema):
        result = validate_arguments(
            {"name": "ns1", "high_water_disk_pct": "55"}, namespace_schema,
        )
        assert result["high_water_disk_pct"] == 55

    def test_optional_without_default_is_omitted(self, namespace_schema):
        result = validate_arguments({"name": "ns1"}, namespace_schema)
        assert "memory_gb" not in result

    def test_int_default_round_trip(self):
        schema = _schema(name={"type": "int", "required": False, "default": 70})
        assert validate_arguments({}, schema) == {"name": 70}
        assert validate_arguments({"name": "55"}, schema) == {"name": 55}

    def test_default_is_used_as_is(self):
        schema = _schema(ratio={"type": "float", "default": 0.5})
        assert validate_arguments({}, schema) == {"ratio": 0.5}


class TestSuppliedValues:
    def test_unknown_key_is_rejected(self, namespace_schema):
        with pytest.raises(UnknownParameterError) as exc_info:
            validate_arguments({"name": "ns1", "nmae": "x"}, namespace_schema)
        assert exc_info.value.name == "nmae"

    def test_any_key_rejected_for_empty_schema(self):
        with pytest.raises(UnknownParameterError):
            validate_arguments({"anything": "1"}, {})

    def test_values_converted_to_declared_types(self, namespace_schema):
        result = validate_arguments(
            {"name": "ns1", "memory_gb": "1.5", "enabled": "false", "high_water_disk_pct": "80"},
            namespace_schema,
        )
        assert result == {
            "name": "ns1",
            "memory_gb": 1.5,
            "enabled": False,
            "high_water_disk_pct": 80,
        }

    def test_conversion_failure_wrapped(self, namespace_schema):
        with pytest.raises(ParameterTypeError) as exc_info:
            validate_arguments({"name": "ns1", "high_water_disk_pct": "abc"}, namespace_schema)
        error = exc_info.value
        assert error.name == "high_water_disk_pct"
        assert isinstance(error.underlying, ConversionError)
        assert isinstance(error.__cause__, ConversionError)

    def test_unsupported_schema_type_names_parameter(self):
        schema = _schema(window={"type": "duration"})
        with pytest.raises(UnsupportedTypeError) as exc_info:
            validate_arguments({"window": "5m"}, schema)
        assert exc_info.value.parameter == "window"

    def test_empty_input_and_schema(self):
        assert validate_arguments({}, {}) == {}


class TestRequiredParametersHelper:
    def test_only_required_entries(self, namespace_schema):
        names = [p["name"] for p in required_parameters(namespace_schema)]
        assert names == ["name", "enabled"]
