"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Cluster Fake:
    Tests never open sockets. FakeCluster plays the cluster's HTTP API
    behind an httpx.MockTransport: routes are canned envelopes keyed by
    method and path, optionally per host, and hosts can be marked down to
    simulate unreachable nodes.

        fake = FakeCluster()
        fake.add("GET", "/api/leader", {"success": True, "data": {...}})
        fake.down.add("node1.test")
        client = ClusterClient(endpoints, transport=fake.transport)
"""

import copy
from typing import Any

import httpx
import pytest

from clusterctl.cli.client import ClusterClient, NodeEndpoints
from clusterctl.core.config import CliConfig
from clusterctl.core.config_schema import CliConfigSchema

NODES = {
    "node1": "node1.test:8080",
    "node2": "node2.test:8080",
    "node3": "node3.test:8080",
}

AEROSPIKE_SCHEMA: dict[str, Any] = {
    "name": "aerospike",
    "version": "1.2.0",
    "description": "Aerospike cluster operator",
    "operations": {
        "add_namespace": {
            "description": "Add a namespace to the Aerospike cluster",
            "parameters": {
                "name": {
                    "type": "string",
                    "required": True,
                    "description": "Namespace name",
                },
                "high_water_disk_pct": {
                    "type": "int",
                    "required": False,
                    "default": 70,
                    "description": "High water mark for disk usage",
                },
            },
            "config": {
                "replication_factor": {
                    "type": "int",
                    "required": False,
                    "default": 2,
                    "description": "Replication factor",
                },
                "strong_consistency": {
                    "type": "bool",
                    "required": False,
                    "description": "Enable strong consistency",
                },
            },
        },
        "restart": {
            "description": "Rolling restart of the service",
            "parameters": {},
            "config": None,
        },
    },
}


class FakeCluster:
    """Routes httpx requests to canned envelopes keyed by (method, path)."""

    def __init__(self) -> None:
        self.routes: dict[tuple, tuple[int, Any]] = {}
        self.down: set[str] = set()
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        body: Any = None,
        status: int = 200,
        host: str | None = None,
    ) -> None:
        """Register a response. Host-specific routes win over generic ones."""
        key = (method, host, path) if host else (method, path)
        self.routes[key] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        if host in self.down:
            raise httpx.ConnectError("connection refused", request=request)

        route = self.routes.get((request.method, host, request.url.path))
        if route is None:
            route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "error": "not found"})

        status, body = route
        if isinstance(body, (str, bytes)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def hosts(self, method: str | None = None) -> list[str]:
        return [r.url.host for r in self.requests if method is None or r.method == method]

    def posts(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]


@pytest.fixture
def fake_cluster() -> FakeCluster:
    """A fake cluster serving the aerospike operator schema."""
    fake = FakeCluster()
    fake.add(
        "GET",
        "/api/operator/schema/aerospike",
        {"success": True, "data": copy.deepcopy(AEROSPIKE_SCHEMA)},
    )
    fake.add(
        "GET",
        "/api/operator/schema/missing",
        {"success": False, "error": "operator missing not found"},
        status=404,
    )
    fake.add(
        "GET",
        "/api/operator/list",
        {
            "success": True,
            "data": [
                {
                    "name": "aerospike",
                    "version": "1.2.0",
                    "author": "ops",
                    "description": "Aerospike cluster operator",
                },
                {
                    "name": "redis",
                    "version": "0.9.1",
                    "author": "ops",
                    "description": "Redis operator",
                },
            ],
        },
    )
    return fake


@pytest.fixture
def endpoints() -> NodeEndpoints:
    return NodeEndpoints(NODES)


@pytest.fixture
async def cluster_client(endpoints: NodeEndpoints, fake_cluster: FakeCluster):
    """ClusterClient wired to the fake cluster, closed after the test."""
    client = ClusterClient(endpoints, timeout=5.0, transport=fake_cluster.transport)
    yield client
    await client.close()


@pytest.fixture
def aerospike_schema() -> dict[str, Any]:
    return copy.deepcopy(AEROSPIKE_SCHEMA)


@pytest.fixture
def cli_config() -> CliConfig:
    """In-memory configuration with two clusters, 'staging' selected."""
    settings = CliConfigSchema(
        clusters={
            "staging": {"name": "Staging", "nodes": NODES},
            "prod": {"name": "Production", "nodes": {"p1": "10.0.0.1"}, "port": 9090},
        },
        selected_cluster="staging",
        timeout=5,
    )
    return CliConfig(settings)
