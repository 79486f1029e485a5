"""
Operation Dispatcher.

Turns "run OPERATION of OPERATOR with these key=value arguments" into a
validated trigger request:

    schema = fetch(operator)
    operation = schema.operations[name]        -> UnknownOperationError
    params/config/namespace validated          -> ValidationError subclasses
    payload POSTed to exactly one node         -> TransportError (no retry)
    success=false                              -> OperatorRejectedError
    success=true                               -> TriggerResult(job_id)

``parallel`` and ``target_nodes`` are directives for the cluster and are
forwarded verbatim; the CLI never fans out on its own.
"""

from collections.abc import Mapping, Sequence
from urllib.parse import quote

from clusterctl.cli.client import ClusterClient
from clusterctl.core.exceptions import OperatorRejectedError, UnknownOperationError
from clusterctl.core.logging import get_logger, log_with_source
from clusterctl.operator.fetcher import SchemaFetcher
from clusterctl.operator.schemas import OperatorPayload, TriggerResult
from clusterctl.operator.validator import validate_arguments

logger = get_logger(__name__)

OPERATOR_TRIGGER_PATH = "/api/operator/trigger/{operator}"


class OperationDispatcher:
    """
    Validates and submits operator triggers.

    Usage:
        dispatcher = OperationDispatcher(client)
        result = await dispatcher.trigger(
            "aerospike", "add_namespace", params={"name": "ns1"}, config={},
        )
        print(result.job_id)
    """

    def __init__(self, client: ClusterClient, fetcher: SchemaFetcher | None = None) -> None:
        self.client = client
        self.fetcher = fetcher or SchemaFetcher(client)

    async def prepare(
        self,
        operator: str,
        operation: str,
        params: Mapping[str, str] | None = None,
        config: Mapping[str, str] | None = None,
        parallel: bool = False,
        target_nodes: Sequence[str] = (),
        namespace: Mapping[str, str] | None = None,
    ) -> OperatorPayload:
        """
        Fetch the schema, validate every namespace and build the payload.

        Nothing is submitted. An empty ``target_nodes`` lets the server pick
        its default targets.

        Raises:
            UnknownOperatorError: Server does not know the operator
            UnknownOperationError: Operator has no such operation
            ValidationError: Any namespace failed validation
        """
        schema = await self.fetcher.fetch(operator)

        operation_schema = schema.operations.get(operation)
        if operation_schema is None:
            raise UnknownOperationError(operator, operation, schema.operation_names)

        validated_params = validate_arguments(params or {}, operation_schema.parameters, "params")
        validated_config = validate_arguments(config or {}, operation_schema.config, "config")
        validated_namespace = validate_arguments(
            namespace or {}, operation_schema.namespace, "namespace",
        )

        return OperatorPayload(
            operation=operation,
            params=validated_params,
            config=validated_config,
            namespace={key: _namespace_str(value) for key, value in validated_namespace.items()},
            parallel=parallel,
            target_nodes=list(target_nodes),
        )

    async def submit(self, operator: str, payload: OperatorPayload) -> TriggerResult:
        """
        POST a prepared payload to the primary node and interpret the answer.

        Raises:
            TransportError: The node could not be reached (not retried)
            OperatorRejectedError: The server reported success=false
        """
        path = OPERATOR_TRIGGER_PATH.format(operator=quote(operator, safe=""))
        response = await self.client.post_json(path, payload.to_wire())

        if not response.success:
            log_with_source(
                logger,
                "operator",
                "warning",
                "Operation rejected",
                operator=operator,
                operation=payload.operation,
                error=response.error,
            )
            raise OperatorRejectedError(operator, payload.operation, response.error)

        job_id = None
        if isinstance(response.data, dict) and response.data.get("job_id") is not None:
            job_id = str(response.data["job_id"])

        log_with_source(
            logger,
            "operator",
            "info",
            "Operation triggered",
            operator=operator,
            operation=payload.operation,
            job_id=job_id,
        )
        return TriggerResult(
            operator=operator,
            operation=payload.operation,
            job_id=job_id,
            data=response.data,
        )

    async def trigger(
        self,
        operator: str,
        operation: str,
        params: Mapping[str, str] | None = None,
        config: Mapping[str, str] | None = None,
        parallel: bool = False,
        target_nodes: Sequence[str] = (),
        namespace: Mapping[str, str] | None = None,
    ) -> TriggerResult:
        """Validate and submit one operation. See prepare() and submit()."""
        payload = await self.prepare(
            operator,
            operation,
            params=params,
            config=config,
            parallel=parallel,
            target_nodes=target_nodes,
            namespace=namespace,
        )
        return await self.submit(operator, payload)


def _namespace_str(value: object) -> str:
    # namespace values travel as strings; bools use the lowercase literal
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
