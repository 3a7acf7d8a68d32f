"""Honeycomb MCP server.

Exposes Honeycomb datasets, queries, columns, SLOs and triggers as MCP tools.
Heavy modules (FastMCP, FastAPI) are imported by the entrypoints, not here.
"""

__version__ = "0.1.0"
