"""Unit tests for clusterctl.operator.fetcher."""

import pytest

from clusterctl.core.exceptions import (
    DecodeError,
    RequestRejectedError,
    TransportError,
    UnknownOperatorError,
)
from clusterctl.operator.fetcher import SchemaFetcher


class TestFetch:
    @pytest.mark.asyncio
    async def test_fetches_and_decodes_schema(self, cluster_client, fake_cluster):
        schema = await SchemaFetcher(cluster_client).fetch("aerospike")

        assert schema.name == "aerospike"
        assert schema.version == "1.2.0"
        assert "add_namespace" in schema.operations
        assert fake_cluster.requests[0].url.path == "/api/operator/schema/aerospike"

    @pytest.mark.asyncio
    async def test_unknown_operator(self, cluster_client):
        with pytest.raises(UnknownOperatorError) as exc_info:
            await SchemaFetcher(cluster_client).fetch("missing")
        assert exc_info.value.operator == "missing"
        assert "not found" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_operator_name_is_path_escaped(self, cluster_client, fake_cluster):
        with pytest.raises(UnknownOperatorError):
            await SchemaFetcher(cluster_client).fetch("a/b")
        assert fake_cluster.requests[0].url.raw_path == b"/api/operator/schema/a%2Fb"

    @pytest.mark.asyncio
    async def test_non_object_schema_is_decode_error(self, cluster_client, fake_cluster):
        fake_cluster.add("GET", "/api/operator/schema/odd", {"success": True, "data": ["x"]})
        with pytest.raises(DecodeError):
            await SchemaFetcher(cluster_client).fetch("odd")

    @pytest.mark.asyncio
    async def test_incompatible_schema_is_decode_error(self, cluster_client, fake_cluster):
        fake_cluster.add(
            "GET",
            "/api/operator/schema/odd",
            {"success": True, "data": {"name": "odd", "operations": {"op": "not-an-object"}}},
        )
        with pytest.raises(DecodeError):
            await SchemaFetcher(cluster_client).fetch("odd")

    @pytest.mark.asyncio
    async def test_all_nodes_down_is_transport_error(self, cluster_client, fake_cluster):
        fake_cluster.down.update({"node1.test", "node2.test", "node3.test"})
        with pytest.raises(TransportError):
            await SchemaFetcher(cluster_client).fetch("aerospike")


class TestListOperators:
    @pytest.mark.asyncio
    async def test_lists_operators(self, cluster_client):
        operators = await SchemaFetcher(cluster_client).list_operators()
        assert [op.name for op in operators] == ["aerospike", "redis"]
        assert operators[1].version == "0.9.1"

    @pytest.mark.asyncio
    async def test_malformed_rows_skipped(self, cluster_client, fake_cluster):
        fake_cluster.add(
            "GET",
            "/api/operator/list",
            {"success": True, "data": [{"name": "ok"}, "garbage", {"version": "1"}]},
        )
        operators = await SchemaFetcher(cluster_client).list_operators()
        assert [op.name for op in operators] == ["ok"]

    @pytest.mark.asyncio
    async def test_rejected_list(self, cluster_client, fake_cluster):
        fake_cluster.add("GET", "/api/operator/list", {"success": False, "error": "boom"})
        with pytest.raises(RequestRejectedError, match="boom"):
            await SchemaFetcher(cluster_client).list_operators()

    @pytest.mark.asyncio
    async def test_non_list_data(self, cluster_client, fake_cluster):
        fake_cluster.add("GET", "/api/operator/list", {"success": True, "data": {"a": 1}})
        with pytest.raises(DecodeError):
            await SchemaFetcher(cluster_client).list_operators()
