"""
Schema Fetcher.

Retrieves operator metadata from the cluster: the operator list and the
per-operator operation schema. Schemas are fetched fresh on every call.
"""

from urllib.parse import quote

from pydantic import ValidationError

from clusterctl.cli.client import ClusterClient, require_success
from clusterctl.core.exceptions import DecodeError, UnknownOperatorError
from clusterctl.core.logging import get_logger, log_with_source
from clusterctl.operator.schemas import OperatorSchema, OperatorSummary

logger = get_logger(__name__)

OPERATOR_LIST_PATH = "/api/operator/list"
OPERATOR_SCHEMA_PATH = "/api/operator/schema/{operator}"


class SchemaFetcher:
    """Reads operator metadata through the client's read path."""

    def __init__(self, client: ClusterClient) -> None:
        self.client = client

    async def fetch(self, operator: str) -> OperatorSchema:
        """
        Fetch and decode the schema of one operator.

        Raises:
            UnknownOperatorError: The server reported success=false
            TransportError: No node could be reached
            DecodeError: The schema does not match the expected shape
        """
        path = OPERATOR_SCHEMA_PATH.format(operator=quote(operator, safe=""))
        response = await self.client.get_json(path)

        if not response.success:
            raise UnknownOperatorError(operator, response.error)

        if not isinstance(response.data, dict):
            raise DecodeError(f"Schema for operator '{operator}' is not an object")

        try:
            schema = OperatorSchema.model_validate(response.data)
        except ValidationError as e:
            raise DecodeError(f"Invalid schema for operator '{operator}':\n{e}") from e

        log_with_source(
            logger,
            "operator",
            "debug",
            "Operator schema fetched",
            operator=operator,
            version=schema.version,
            operations=schema.operation_names,
        )
        return schema

    async def list_operators(self) -> list[OperatorSummary]:
        """
        List the operators installed on the cluster.

        Rows that do not decode are skipped with a warning.

        Raises:
            RequestRejectedError: The server reported success=false
            DecodeError: Data is not a list
        """
        response = await self.client.get_json(OPERATOR_LIST_PATH)
        data = require_success(response, "Fetching operators failed")
        if not isinstance(data, list):
            raise DecodeError("Invalid response format for operator list")

        operators = []
        for row in data:
            try:
                operators.append(OperatorSummary.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed operator entry", extra={"row": row, "error": str(e)})
        return operators
