"""Unit tests for clusterctl.operator.schemas."""

import pytest
from pydantic import ValidationError

from clusterctl.operator.schemas import (
    ApiResponse,
    OperatorPayload,
    OperatorSchema,
    ParameterSchema,
)


class TestOperatorSchema:
    def test_decodes_nested_operations(self, aerospike_schema):
        schema = OperatorSchema.model_validate(aerospike_schema)
        operation = schema.operations["add_namespace"]
        assert operation.parameters["name"].required is True
        assert operation.parameters["high_water_disk_pct"].default == 70
        assert operation.config["replication_factor"].type == "int"

    def test_null_maps_become_empty(self, aerospike_schema):
        schema = OperatorSchema.model_validate(aerospike_schema)
        assert schema.operations["restart"].config == {}
        assert schema.operations["restart"].namespace == {}

    def test_operation_names_sorted(self, aerospike_schema):
        schema = OperatorSchema.model_validate(aerospike_schema)
        assert schema.operation_names == ["add_namespace", "restart"]

    def test_unknown_fields_ignored(self):
        schema = OperatorSchema.model_validate({"name": "x", "maintainer": "someone"})
        assert schema.name == "x"
        assert schema.operations == {}

    def test_parameter_without_type_is_invalid(self):
        with pytest.raises(ValidationError):
            OperatorSchema.model_validate(
                {"name": "x", "operations": {"op": {"parameters": {"p": {"required": True}}}}}
            )


class TestParameterSchema:
    def test_has_default(self):
        assert ParameterSchema(type="int", default=0).has_default is True
        assert ParameterSchema(type="bool", default=False).has_default is True
        assert ParameterSchema(type="int").has_default is False


class TestOperatorPayload:
    def test_wire_format_omits_empty_namespace(self):
        payload = OperatorPayload(operation="restart")
        assert payload.to_wire() == {
            "operation": "restart",
            "params": {},
            "config": {},
            "parallel": False,
            "target_nodes": [],
        }

    def test_wire_format_keeps_namespace_and_targets(self):
        payload = OperatorPayload(
            operation="add_namespace",
            params={"name": "ns1"},
            namespace={"name": "ns1"},
            parallel=True,
            target_nodes=["node2", "node1"],
        )
        wire = payload.to_wire()
        assert wire["namespace"] == {"name": "ns1"}
        assert wire["target_nodes"] == ["node2", "node1"]
        assert wire["parallel"] is True


class TestApiResponse:
    def test_defaults(self):
        response = ApiResponse.model_validate({})
        assert response.success is False
        assert response.data is None
        assert response.error is None

    def test_null_error_accepted(self):
        response = ApiResponse.model_validate({"success": True, "data": [1], "error": None})
        assert response.success is True
        assert response.data == [1]
