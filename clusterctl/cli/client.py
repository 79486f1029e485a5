"""
HTTP Client for CLI.

Provides the async HTTP client for communicating with a cluster's REST API.
All requests include X-Frontend-ID: cli header for server-side log routing.

Reads walk the cluster's nodes in configuration order and return the first
node that answers (each node retried per the configured ``retries``).
Writes go to exactly one node and are never retried, since replaying a
mutating call on another node risks running it twice.
"""

from collections.abc import Mapping
from typing import Any

import httpx
from tenacity.wait import wait_base

from clusterctl.core.config import CliConfig
from clusterctl.core.config_schema import ClusterSchema
from clusterctl.core.exceptions import DecodeError, RequestRejectedError, TransportError
from clusterctl.core.logging import get_logger, log_with_source
from clusterctl.core.resilience import read_retrying
from clusterctl.operator.schemas import ApiResponse

logger = get_logger(__name__)


def node_base_url(address: str, port: int | None = None) -> str:
    """
    Build the base URL for a node address.

    ``http://`` is assumed when no scheme is given, and the cluster port is
    appended when the address carries none. IPv6 addresses carry a port only
    in bracketed form (``[::1]:8080``); a bare ``::1`` is bracketed.
    """
    address = address.strip().rstrip("/")
    if "://" in address:
        scheme, _, hostport = address.partition("://")
    else:
        scheme, hostport = "http", address

    if hostport.startswith("["):
        has_port = hostport.rpartition("]")[2].startswith(":")
    elif hostport.count(":") > 1:
        hostport, has_port = f"[{hostport}]", False
    else:
        has_port = ":" in hostport and hostport.rsplit(":", 1)[1].isdigit()

    if port is not None and not has_port:
        hostport = f"{hostport}:{port}"
    return f"{scheme}://{hostport}"


class NodeEndpoints:
    """
    Ordered list of node endpoints for a cluster.

    Order follows the configuration file and is stable for the lifetime of
    the object. The first entry is the primary node used for writes.
    """

    def __init__(self, nodes: Mapping[str, str], port: int | None = None) -> None:
        if not nodes:
            raise ValueError("a cluster needs at least one node")
        self._endpoints = [
            (name, node_base_url(address, port)) for name, address in nodes.items()
        ]

    @classmethod
    def from_cluster(cls, cluster: ClusterSchema) -> "NodeEndpoints":
        return cls(cluster.nodes, cluster.port)

    def __iter__(self):
        return iter(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._endpoints]

    @property
    def primary(self) -> tuple[str, str]:
        return self._endpoints[0]

    def get(self, node: str) -> tuple[str, str]:
        for name, url in self._endpoints:
            if name == node:
                return name, url
        raise KeyError(node)


def decode_envelope(response: httpx.Response, node: str) -> ApiResponse:
    """
    Decode a response body into the standard envelope.

    A 5xx answer without a JSON body is treated as a node failure so that
    reads move on to the next node.

    Raises:
        TransportError: Server error without an envelope
        DecodeError: Body is not a JSON object envelope
    """
    try:
        body = response.json()
    except ValueError as e:
        if response.status_code >= 500:
            raise TransportError(
                f"Node {node} answered HTTP {response.status_code}", node=node
            ) from e
        raise DecodeError(
            f"Node {node} returned a non-JSON body (HTTP {response.status_code})"
        ) from e

    if not isinstance(body, dict):
        raise DecodeError(f"Node {node} returned {type(body).__name__}, expected an object")

    try:
        return ApiResponse.model_validate(body)
    except ValueError as e:
        raise DecodeError(f"Node {node} returned an invalid response envelope: {e}") from e


def require_success(response: ApiResponse, action: str) -> Any:
    """Return ``data`` of a successful envelope, or raise with the server's error."""
    if not response.success:
        raise RequestRejectedError(action, response.error)
    return response.data


class ClusterClient:
    """
    HTTP client for cluster API communication.

    Features:
    - Node endpoints resolved from the selected cluster
    - Read fallback across nodes, with per-node retry
    - Single-node writes, never retried
    - X-Frontend-ID header for log routing
    - Structured logging of requests/responses

    Usage:
        client = ClusterClient.from_config(config)
        response = await client.get_json("/api/nodes")
        response = await client.post_json("/api/config/set", {"key": "value"})
        await client.close()
    """

    def __init__(
        self,
        endpoints: NodeEndpoints,
        timeout: float = 10.0,
        retries: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
        retry_wait: wait_base | None = None,
    ) -> None:
        """
        Initialize the cluster client.

        Args:
            endpoints: Ordered node endpoints of the target cluster.
            timeout: Per-request timeout in seconds.
            retries: Extra attempts per node on the read path.
            transport: Optional httpx transport (tests inject a MockTransport).
            retry_wait: Optional backoff strategy between read retries.
        """
        self.endpoints = endpoints
        self.timeout = timeout
        self.retries = retries
        self._transport = transport
        self._retry_wait = retry_wait
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: CliConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ClusterClient":
        """Create a client for the cluster the configuration currently targets."""
        _, cluster = config.active_cluster()
        return cls(
            NodeEndpoints.from_cluster(cluster),
            timeout=config.timeout,
            retries=config.retries,
            transport=transport,
        )

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"X-Frontend-ID": "cli"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ClusterClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        node: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make one HTTP request to one node.

        Raises:
            TransportError: On connection failure or timeout
        """
        client = await self._get_client()

        log_with_source(logger, "client", "debug", "API request", method=method, node=node, url=url)

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "client",
                "warning",
                "API request failed",
                method=method,
                node=node,
                url=url,
                error=str(e) or type(e).__name__,
            )
            raise TransportError(f"Node {node} unreachable: {e or type(e).__name__}", node=node) from e

        log_with_source(
            logger,
            "client",
            "debug",
            "API response",
            method=method,
            node=node,
            url=url,
            status_code=response.status_code,
        )
        return response

    async def fetch_from_node(
        self,
        node: str,
        base_url: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        """GET one endpoint from one node and decode the envelope."""
        response = await self.request("GET", node, f"{base_url}{path}", params=params)
        return decode_envelope(response, node)

    async def get_json(self, path: str, params: Mapping[str, Any] | None = None) -> ApiResponse:
        """
        Read an endpoint from the first node that answers.

        Args:
            path: API path (e.g., /api/nodes)
            params: Optional query parameters

        Returns:
            Decoded response envelope

        Raises:
            TransportError: Every node failed; chained to the last failure
            DecodeError: A node answered with a malformed body
        """
        last_error: TransportError | None = None

        for node, base_url in self.endpoints:
            retrying = read_retrying(self.retries, wait=self._retry_wait)
            try:
                return await retrying(self.fetch_from_node, node, base_url, path, params)
            except TransportError as e:
                last_error = e
                log_with_source(
                    logger, "client", "info", "Falling back to next node", node=node, path=path,
                )

        raise TransportError(
            f"All {len(self.endpoints)} nodes failed for {path}: {last_error.message}",
        ) from last_error

    async def get_json_from(
        self,
        node: str,
        path: str,
        params: Mapping[str, Any] | None = None,
    ) -> ApiResponse:
        """Read an endpoint from one specific node, without fallback."""
        name, base_url = self.endpoints.get(node)
        retrying = read_retrying(self.retries, wait=self._retry_wait)
        return await retrying(self.fetch_from_node, name, base_url, path, params)

    async def post_json(
        self,
        path: str,
        payload: Any,
    ) -> ApiResponse:
        """
        POST a JSON body to the primary node.

        Args:
            path: API path
            payload: JSON-serializable body

        Raises:
            TransportError: The node could not be reached (not retried)
            DecodeError: The node answered with a malformed body
        """
        name, base_url = self.endpoints.primary
        response = await self.request("POST", name, f"{base_url}{path}", json=payload)
        return decode_envelope(response, name)
