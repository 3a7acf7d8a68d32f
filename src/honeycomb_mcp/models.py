"""
Data models for Honeycomb queries, columns and tool parameters.

Query bodies are validated before serialization so malformed calculations,
filters or orders never reach the API.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_TIME_RANGE_SECONDS = 3600
MAX_QUERY_LIMIT = 1000


class CalculationOp(str, Enum):
    """Aggregations accepted by the Honeycomb query API."""
    COUNT = "COUNT"
    CONCURRENCY = "CONCURRENCY"
    COUNT_DISTINCT = "COUNT_DISTINCT"
    HEATMAP = "HEATMAP"
    SUM = "SUM"
    AVG = "AVG"
    MAX = "MAX"
    MIN = "MIN"
    P001 = "P001"
    P01 = "P01"
    P05 = "P05"
    P10 = "P10"
    P25 = "P25"
    P50 = "P50"
    P75 = "P75"
    P90 = "P90"
    P95 = "P95"
    P99 = "P99"
    P999 = "P999"
    RATE_AVG = "RATE_AVG"
    RATE_SUM = "RATE_SUM"
    RATE_MAX = "RATE_MAX"


# Ops that count events and take no column
COLUMNLESS_OPS = frozenset({CalculationOp.COUNT, CalculationOp.CONCURRENCY})


class FilterOp(str, Enum):
    """Filter operators accepted by the Honeycomb query API."""
    EQUALS = "="
    NOT_EQUALS = "!="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="
    STARTS_WITH = "starts-with"
    DOES_NOT_START_WITH = "does-not-start-with"
    EXISTS = "exists"
    DOES_NOT_EXIST = "does-not-exist"
    CONTAINS = "contains"
    DOES_NOT_CONTAIN = "does-not-contain"
    IN = "in"
    NOT_IN = "not-in"


VALUELESS_FILTER_OPS = frozenset({FilterOp.EXISTS, FilterOp.DOES_NOT_EXIST})
LIST_FILTER_OPS = frozenset({FilterOp.IN, FilterOp.NOT_IN})


class OrderDirection(str, Enum):
    ASCENDING = "ascending"
    DESCENDING = "descending"


class FilterCombination(str, Enum):
    AND = "AND"
    OR = "OR"


class ColumnType(str, Enum):
    STRING = "string"
    FLOAT = "float"
    INTEGER = "integer"
    BOOLEAN = "boolean"


NUMERIC_COLUMN_TYPES = frozenset({ColumnType.INTEGER, ColumnType.FLOAT})

FilterValue = Union[str, int, float, bool, List[Union[str, int, float, bool]]]


# --- Query body ---

class QueryCalculation(BaseModel):
    """A single aggregation, optionally over a column."""
    op: CalculationOp
    column: Optional[str] = None

    @model_validator(mode="after")
    def _check_column(self) -> "QueryCalculation":
        if self.op not in COLUMNLESS_OPS and not self.column:
            raise ValueError(f"{self.op.value} requires a column")
        return self


class QueryFilter(BaseModel):
    """A predicate on one column."""
    column: str
    op: FilterOp
    value: Optional[FilterValue] = None

    @model_validator(mode="after")
    def _check_value(self) -> "QueryFilter":
        if self.op in VALUELESS_FILTER_OPS:
            if self.value is not None:
                raise ValueError(f"filter op '{self.op.value}' does not take a value")
        elif self.value is None:
            raise ValueError(f"filter op '{self.op.value}' requires a value")
        elif self.op in LIST_FILTER_OPS and not isinstance(self.value, list):
            raise ValueError(f"filter op '{self.op.value}' requires a list value")
        return self


class QueryOrder(BaseModel):
    """Sort by a calculation result or a breakdown column."""
    op: Optional[CalculationOp] = None
    column: Optional[str] = None
    order: OrderDirection = OrderDirection.DESCENDING

    @model_validator(mode="after")
    def _check_target(self) -> "QueryOrder":
        if self.op is None and self.column is None:
            raise ValueError("an order needs an op or a column")
        return self


class AnalysisQuery(BaseModel):
    """Request body for POST /1/queries/{dataset}."""
    calculations: List[QueryCalculation] = Field(min_length=1)
    breakdowns: List[str] = Field(default_factory=list)
    filters: Optional[List[QueryFilter]] = None
    filter_combination: Optional[FilterCombination] = None
    orders: Optional[List[QueryOrder]] = None
    time_range: int = Field(default=DEFAULT_TIME_RANGE_SECONDS, gt=0)
    limit: Optional[int] = Field(default=None, ge=1, le=MAX_QUERY_LIMIT)

    @field_validator("breakdowns")
    @classmethod
    def _unique_breakdowns(cls, value: List[str]) -> List[str]:
        # Column names form a set; keep first occurrence order
        return list(dict.fromkeys(value))

    def to_request_body(self) -> Dict[str, Any]:
        """Serialize for the API, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


# --- Responses ---

class QueryResultData(BaseModel):
    model_config = ConfigDict(extra="allow")

    results: List[Any] = Field(default_factory=list)
    series: List[Any] = Field(default_factory=list)

    @field_validator("results", "series", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class QueryResult(BaseModel):
    """A query result handle, polled until complete."""
    model_config = ConfigDict(extra="allow")

    id: str
    complete: bool = False
    data: Optional[QueryResultData] = None
    links: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("links", mode="before")
    @classmethod
    def _none_links(cls, value: Any) -> Any:
        return {} if value is None else value


class AnalysisResults(BaseModel):
    """Flattened output of a completed analysis query."""
    results: List[Any] = Field(default_factory=list)
    series: List[Any] = Field(default_factory=list)
    links: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_query_result(cls, result: QueryResult) -> "AnalysisResults":
        data = result.data or QueryResultData()
        return cls(results=data.results, series=data.series, links=result.links)


class Column(BaseModel):
    """A typed field of a dataset."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    key_name: str
    type: ColumnType = ColumnType.STRING
    hidden: bool = False
    description: Optional[str] = None

    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_COLUMN_TYPES


# --- Tool parameters ---

class QueryToolParams(BaseModel):
    """Parameters of the run_query tool."""
    calculation: CalculationOp
    column: Optional[str] = None
    breakdowns: Optional[List[str]] = None
    filter: Optional[QueryFilter] = None
    time_range: Optional[int] = Field(default=None, gt=0)

    def to_query(self) -> AnalysisQuery:
        return AnalysisQuery(
            calculations=[QueryCalculation(op=self.calculation, column=self.column)],
            breakdowns=self.breakdowns or [],
            filters=[self.filter] if self.filter is not None else None,
            time_range=self.time_range or DEFAULT_TIME_RANGE_SECONDS,
        )


class ColumnAnalysisParams(BaseModel):
    """Parameters of the analyze_column tool."""
    column: str = Field(min_length=1)
    time_range: Optional[int] = Field(default=None, gt=0)
