"""Honeycomb MCP tools.

Each tool validates its parameters, makes one client call (or one query
workflow) and returns MCP text content. Errors are rendered by
``handle_mcp_exception`` instead of being raised to the transport.
"""

import json
from typing import Annotated, Any, Callable, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from ..client import HoneycombAPI
from ..exceptions import ValidationError, handle_mcp_exception, validate_required_params
from ..models import (
    AnalysisResults,
    CalculationOp,
    ColumnAnalysisParams,
    QueryFilter,
    QueryToolParams,
)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Rows rendered inline before the JSON payload is truncated
MAX_RESULT_ROWS = 100

EnvironmentArg = Annotated[str, Field(description="Name of the configured Honeycomb environment")]
DatasetArg = Annotated[str, Field(description="Dataset slug")]
TimeRangeArg = Annotated[Optional[int], Field(description="Time range in seconds (default 3600)", gt=0)]


def _resp(content: str) -> List[Dict[str, Any]]:
    """Helper to format MCP tool responses consistently."""
    return [{"type": "text", "text": content}]


def _json(data: Any) -> str:
    return json.dumps(data, indent=2, default=str)


def _build_params(model: Type[ModelT], **values: Any) -> ModelT:
    try:
        return model(**values)
    except PydanticValidationError as e:
        raise ValidationError(
            message=f"Invalid parameters: {e.error_count()} validation error(s)",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def _format_analysis(title: str, dataset: str, analysis: AnalysisResults) -> str:
    content = f"**{title}** on `{dataset}`\n\n"
    content += f"**Result Rows:** {len(analysis.results)}\n"
    content += f"**Series:** {len(analysis.series)}\n"

    query_url = analysis.links.get("query_url")
    if query_url:
        content += f"**Query URL:** {query_url}\n"

    rows = analysis.results[:MAX_RESULT_ROWS]
    content += "\n**Results:**\n```json\n" + _json(rows) + "\n```\n"
    if len(analysis.results) > MAX_RESULT_ROWS:
        content += f"\n_{len(analysis.results) - MAX_RESULT_ROWS} more rows omitted._\n"
    return content


def build_tools(api: HoneycombAPI) -> List[Callable]:
    """Create the tool functions bound to ``api``."""

    @handle_mcp_exception
    async def list_environments() -> List[Dict[str, Any]]:
        """List the names of the configured Honeycomb environments."""
        return _resp(_json(api.get_environments()))

    @handle_mcp_exception
    async def list_datasets(environment: EnvironmentArg) -> List[Dict[str, Any]]:
        """List datasets in a Honeycomb environment."""
        validate_required_params(environment=environment)
        datasets = await api.list_datasets(environment)
        summary = [
            {
                "name": dataset.get("name"),
                "slug": dataset.get("slug"),
                "description": dataset.get("description", ""),
                "last_written_at": dataset.get("last_written_at"),
            }
            for dataset in datasets
        ]
        return _resp(_json(summary))

    @handle_mcp_exception
    async def get_columns(environment: EnvironmentArg, dataset: DatasetArg) -> List[Dict[str, Any]]:
        """List the visible columns of a dataset with their types."""
        validate_required_params(environment=environment, dataset=dataset)
        columns = await api.get_visible_columns(environment, dataset)
        summary = [
            {
                "name": column.get("key_name"),
                "type": column.get("type"),
                "description": column.get("description", ""),
            }
            for column in columns
        ]
        return _resp(_json(summary))

    @handle_mcp_exception
    async def run_query(
        environment: EnvironmentArg,
        dataset: DatasetArg,
        calculation: Annotated[CalculationOp, Field(description="Aggregation to compute, e.g. COUNT, AVG, P99")],
        column: Annotated[Optional[str], Field(description="Column to aggregate; required for every op except COUNT and CONCURRENCY")] = None,
        breakdowns: Annotated[Optional[List[str]], Field(description="Columns to group results by")] = None,
        filter: Annotated[Optional[QueryFilter], Field(description="Single filter: column, op and value")] = None,
        time_range: TimeRangeArg = None,
    ) -> List[Dict[str, Any]]:
        """Run an analytics query against a dataset and wait for the results."""
        validate_required_params(environment=environment, dataset=dataset)
        params = _build_params(
            QueryToolParams,
            calculation=calculation,
            column=column,
            breakdowns=breakdowns,
            filter=filter,
            time_range=time_range,
        )
        analysis = await api.run_analysis_query(environment, dataset, params)
        title = f"{params.calculation.value}({params.column})" if params.column else params.calculation.value
        return _resp(_format_analysis(f"Query {title}", dataset, analysis))

    @handle_mcp_exception
    async def analyze_column(
        environment: EnvironmentArg,
        dataset: DatasetArg,
        column: Annotated[str, Field(description="Column to analyze")],
        time_range: TimeRangeArg = None,
    ) -> List[Dict[str, Any]]:
        """Summarize a column: top values by count, plus AVG/P95/MAX/MIN for numeric columns."""
        validate_required_params(environment=environment, dataset=dataset, column=column)
        params = _build_params(ColumnAnalysisParams, column=column, time_range=time_range)
        analysis = await api.analyze_column(environment, dataset, params)
        return _resp(_format_analysis(f"Column analysis of {params.column}", dataset, analysis))

    @handle_mcp_exception
    async def list_slos(environment: EnvironmentArg, dataset: DatasetArg) -> List[Dict[str, Any]]:
        """List SLOs defined on a dataset."""
        validate_required_params(environment=environment, dataset=dataset)
        slos = await api.get_slos(environment, dataset)
        summary = [
            {
                "id": slo.get("id"),
                "name": slo.get("name"),
                "description": slo.get("description", ""),
                "time_period_days": slo.get("time_period_days"),
                "target_per_million": slo.get("target_per_million"),
            }
            for slo in slos
        ]
        return _resp(_json(summary))

    @handle_mcp_exception
    async def get_slo(
        environment: EnvironmentArg,
        dataset: DatasetArg,
        slo_id: Annotated[str, Field(description="SLO identifier")],
    ) -> List[Dict[str, Any]]:
        """Get an SLO with its current compliance and remaining budget."""
        validate_required_params(environment=environment, dataset=dataset, slo_id=slo_id)
        slo = await api.get_slo(environment, dataset, slo_id)
        return _resp(_json(slo))

    @handle_mcp_exception
    async def list_triggers(environment: EnvironmentArg, dataset: DatasetArg) -> List[Dict[str, Any]]:
        """List triggers defined on a dataset."""
        validate_required_params(environment=environment, dataset=dataset)
        triggers = await api.get_triggers(environment, dataset)
        summary = [
            {
                "id": trigger.get("id"),
                "name": trigger.get("name"),
                "description": trigger.get("description", ""),
                "disabled": trigger.get("disabled", False),
                "triggered": trigger.get("triggered", False),
                "threshold": trigger.get("threshold"),
            }
            for trigger in triggers
        ]
        return _resp(_json(summary))

    @handle_mcp_exception
    async def get_trigger(
        environment: EnvironmentArg,
        dataset: DatasetArg,
        trigger_id: Annotated[str, Field(description="Trigger identifier")],
    ) -> List[Dict[str, Any]]:
        """Get a trigger's query, threshold and recipients."""
        validate_required_params(environment=environment, dataset=dataset, trigger_id=trigger_id)
        trigger = await api.get_trigger(environment, dataset, trigger_id)
        return _resp(_json(trigger))

    return [
        list_environments,
        list_datasets,
        get_columns,
        run_query,
        analyze_column,
        list_slos,
        get_slo,
        list_triggers,
        get_trigger,
    ]
