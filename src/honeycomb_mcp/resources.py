"""MCP resources: datasets with their visible columns."""

import json
from typing import Callable

from .client import HoneycombAPI

DATASET_RESOURCE_URI = "honeycomb://{environment}/{dataset}"


def build_dataset_resource(api: HoneycombAPI) -> Callable:
    async def dataset_with_columns(environment: str, dataset: str) -> str:
        """A Honeycomb dataset and the schema of its visible columns."""
        details = await api.get_dataset(environment, dataset)
        columns = await api.get_visible_columns(environment, dataset)
        payload = {
            "name": details.get("name"),
            "slug": details.get("slug", dataset),
            "description": details.get("description", ""),
            "created_at": details.get("created_at"),
            "last_written_at": details.get("last_written_at"),
            "columns": [
                {
                    "name": column.get("key_name"),
                    "type": column.get("type"),
                    "description": column.get("description", ""),
                }
                for column in columns
            ],
        }
        return json.dumps(payload, indent=2)

    return dataset_with_columns
