"""Prompt templates that guide an assistant through Honeycomb analysis."""

from typing import Callable, List

from .models import CalculationOp, FilterOp

EXAMPLE_QUERIES = """\
Honeycomb queries are built from one calculation, optional breakdowns, an
optional filter and a time range in seconds (default 3600).

Examples for the run_query tool:

1. Request volume over the last hour
   {"calculation": "COUNT"}

2. Slowest endpoints by p99 latency over the last day
   {"calculation": "P99", "column": "duration_ms",
    "breakdowns": ["http.route"], "time_range": 86400}

3. Error count per service
   {"calculation": "COUNT", "breakdowns": ["service.name"],
    "filter": {"column": "http.status_code", "op": ">=", "value": 500}}

4. Distinct users hitting checkout
   {"calculation": "COUNT_DISTINCT", "column": "user.id",
    "filter": {"column": "http.route", "op": "starts-with", "value": "/checkout"}}

COUNT and CONCURRENCY take no column; every other calculation needs one.
"""


def build_prompts() -> List[Callable]:
    """Create the prompt functions exposed by the server."""

    def example_queries() -> str:
        """Reference of query shapes accepted by the run_query tool."""
        return (
            EXAMPLE_QUERIES
            + "\nCalculations: " + ", ".join(op.value for op in CalculationOp)
            + "\nFilter operators: " + ", ".join(op.value for op in FilterOp)
            + "\n"
        )

    def analyze_dataset(environment: str, dataset: str) -> str:
        """Step-by-step investigation of a dataset."""
        return (
            f"Investigate the Honeycomb dataset `{dataset}` in environment `{environment}`.\n\n"
            f"1. Call get_columns for `{dataset}` to learn which fields exist and their types.\n"
            "2. Run a COUNT query broken down by the most informative string column "
            "(service, route or status) to see where traffic goes.\n"
            "3. For numeric latency or size columns, call analyze_column to get "
            "AVG, P95, MAX and MIN.\n"
            f"4. Call list_slos and list_triggers for `{dataset}` and note anything "
            "that is burning budget or currently triggered.\n"
            "5. Summarize the findings with the query URLs returned by each query."
        )

    return [example_queries, analyze_dataset]
