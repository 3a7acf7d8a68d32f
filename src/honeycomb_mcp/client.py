"""Async client for the Honeycomb REST API."""

import asyncio
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError as PydanticValidationError

from .config import EnvironmentRegistry
from .exceptions import (
    APIError,
    AnalysisQueryFailed,
    ColumnAnalysisFailed,
    QueryTimeout,
    ValidationError,
)
from .models import (
    DEFAULT_TIME_RANGE_SECONDS,
    AnalysisQuery,
    AnalysisResults,
    CalculationOp,
    Column,
    ColumnAnalysisParams,
    OrderDirection,
    QueryCalculation,
    QueryOrder,
    QueryResult,
    QueryToolParams,
)
from .utils.pylogger import get_python_logger

logger = get_python_logger()

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_POLL_INTERVAL_SECONDS = 1.0
COLUMN_ANALYSIS_LIMIT = 10
NUMERIC_ANALYSIS_OPS = (CalculationOp.AVG, CalculationOp.P95, CalculationOp.MAX, CalculationOp.MIN)


def _encode_params(params: Optional[Mapping[str, Any]]) -> Optional[Dict[str, str]]:
    """Drop unset values and render booleans the way the API expects."""
    if not params:
        return None
    encoded = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            encoded[key] = "true" if value else "false"
        else:
            encoded[key] = str(value)
    return encoded or None


def _segment(value: str) -> str:
    return quote(str(value), safe="")


class HoneycombAPI:
    """
    Client for the Honeycomb API across several named environments.

    Every call names its environment; the registry resolves it to a base URL
    and API key before any request is sent.
    """

    def __init__(
        self,
        registry: EnvironmentRegistry,
        http_client: Optional[httpx.AsyncClient] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
    ) -> None:
        """
        Initialize the Honeycomb client.

        Args:
            registry: Environments available to this client
            http_client: Optional pre-built AsyncClient (tests inject one with a mock transport)
            max_attempts: Poll budget for query results
            poll_interval: Seconds to wait between polls
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")

        self.registry = registry
        self.max_attempts = max_attempts
        self.poll_interval = poll_interval
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient()

    def get_environments(self) -> List[str]:
        return self.registry.names()

    async def _request(
        self,
        environment: str,
        path: str,
        method: str = "GET",
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        env = self.registry.get(environment)

        request_headers = {
            "X-Honeycomb-Team": env.api_key,
            "Content-Type": "application/json",
        }
        if headers:
            request_headers.update(headers)

        logger.debug("Honeycomb request", method=method, path=path, environment=environment)
        response = await self.client.request(
            method,
            f"{env.base_url}{path}",
            params=_encode_params(params),
            json=json_body,
            headers=request_headers,
        )

        if not response.is_success:
            logger.warning(
                "Honeycomb API error",
                method=method,
                path=path,
                environment=environment,
                status_code=response.status_code,
            )
            raise APIError(response.status_code, response.reason_phrase, path=path)

        return response.json()

    # Dataset methods
    async def get_dataset(self, environment: str, dataset_slug: str) -> Dict[str, Any]:
        return await self._request(environment, f"/1/datasets/{_segment(dataset_slug)}")

    async def list_datasets(self, environment: str) -> List[Dict[str, Any]]:
        return await self._request(environment, "/1/datasets")

    # Query methods
    async def create_query(self, environment: str, dataset_slug: str, query: AnalysisQuery) -> Dict[str, Any]:
        return await self._request(
            environment,
            f"/1/queries/{_segment(dataset_slug)}",
            method="POST",
            json_body=query.to_request_body(),
        )

    async def create_query_result(self, environment: str, dataset_slug: str, query_id: str) -> Dict[str, Any]:
        return await self._request(
            environment,
            f"/1/query_results/{_segment(dataset_slug)}",
            method="POST",
            json_body={"query_id": query_id},
        )

    async def get_query_results(self, environment: str, dataset_slug: str, query_result_id: str) -> QueryResult:
        data = await self._request(
            environment,
            f"/1/query_results/{_segment(dataset_slug)}/{_segment(query_result_id)}",
        )
        return QueryResult.model_validate(data)

    async def query_and_wait_for_results(
        self,
        environment: str,
        dataset_slug: str,
        query: AnalysisQuery,
        max_attempts: Optional[int] = None,
    ) -> QueryResult:
        """
        Run a query and poll its result until complete.

        Args:
            environment: Environment name
            dataset_slug: Dataset to query
            query: Validated query body
            max_attempts: Poll budget (default: the client's)

        Returns:
            The completed QueryResult

        Raises:
            QueryTimeout: if the result is still incomplete after the last poll
        """
        attempts_allowed = max_attempts if max_attempts is not None else self.max_attempts

        query_response = await self.create_query(environment, dataset_slug, query)
        query_id = query_response["id"]

        result_response = await self.create_query_result(environment, dataset_slug, query_id)
        query_result_id = result_response["id"]
        logger.debug("Query submitted", dataset=dataset_slug, query_id=query_id, query_result_id=query_result_id)

        for attempt in range(1, attempts_allowed + 1):
            result = await self.get_query_results(environment, dataset_slug, query_result_id)
            if result.complete:
                logger.debug("Query complete", query_result_id=query_result_id, attempts=attempt)
                return result
            if attempt < attempts_allowed:
                await asyncio.sleep(self.poll_interval)

        logger.warning("Query timed out", query_result_id=query_result_id, attempts=attempts_allowed)
        raise QueryTimeout(attempts_allowed, query_result_id=query_result_id)

    # Column methods
    async def get_columns(self, environment: str, dataset_slug: str) -> List[Dict[str, Any]]:
        return await self._request(environment, f"/1/columns/{_segment(dataset_slug)}")

    async def get_column_by_name(self, environment: str, dataset_slug: str, key_name: str) -> Dict[str, Any]:
        return await self._request(
            environment,
            f"/1/columns/{_segment(dataset_slug)}",
            params={"key_name": key_name},
        )

    async def get_visible_columns(self, environment: str, dataset_slug: str) -> List[Dict[str, Any]]:
        columns = await self.get_columns(environment, dataset_slug)
        return [column for column in columns if not column.get("hidden")]

    async def run_analysis_query(
        self,
        environment: str,
        dataset_slug: str,
        params: QueryToolParams,
    ) -> AnalysisResults:
        # Resolve first so a bad environment name is reported as-is
        self.registry.get(environment)
        try:
            query = params.to_query()
        except PydanticValidationError as e:
            raise AnalysisQueryFailed(ValidationError(f"Invalid query: {e}")) from e

        try:
            result = await self.query_and_wait_for_results(environment, dataset_slug, query)
        except Exception as e:
            raise AnalysisQueryFailed(e) from e
        return AnalysisResults.from_query_result(result)

    async def analyze_column(
        self,
        environment: str,
        dataset_slug: str,
        params: ColumnAnalysisParams,
    ) -> AnalysisResults:
        self.registry.get(environment)
        try:
            column = Column.model_validate(
                await self.get_column_by_name(environment, dataset_slug, params.column)
            )

            calculations = [QueryCalculation(op=CalculationOp.COUNT)]
            if column.is_numeric:
                calculations.extend(
                    QueryCalculation(op=op, column=params.column) for op in NUMERIC_ANALYSIS_OPS
                )

            query = AnalysisQuery(
                calculations=calculations,
                breakdowns=[params.column],
                time_range=params.time_range or DEFAULT_TIME_RANGE_SECONDS,
                orders=[QueryOrder(op=CalculationOp.COUNT, order=OrderDirection.DESCENDING)],
                limit=COLUMN_ANALYSIS_LIMIT,
            )
            result = await self.query_and_wait_for_results(environment, dataset_slug, query)
        except Exception as e:
            raise ColumnAnalysisFailed(e) from e
        return AnalysisResults.from_query_result(result)

    # SLO methods
    async def get_slos(self, environment: str, dataset_slug: str) -> List[Dict[str, Any]]:
        return await self._request(environment, f"/1/slos/{_segment(dataset_slug)}")

    async def get_slo(self, environment: str, dataset_slug: str, slo_id: str) -> Dict[str, Any]:
        return await self._request(
            environment,
            f"/1/slos/{_segment(dataset_slug)}/{_segment(slo_id)}",
            params={"detailed": True},
        )

    # Trigger methods
    async def get_triggers(self, environment: str, dataset_slug: str) -> List[Dict[str, Any]]:
        return await self._request(environment, f"/1/triggers/{_segment(dataset_slug)}")

    async def get_trigger(self, environment: str, dataset_slug: str, trigger_id: str) -> Dict[str, Any]:
        return await self._request(
            environment,
            f"/1/triggers/{_segment(dataset_slug)}/{_segment(trigger_id)}",
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HoneycombAPI":
        return self

    async def __aexit__(self, *args) -> None:
        await self.aclose()
