"""MCP tools for the Honeycomb API."""

from .honeycomb_tools import build_tools

__all__ = ["build_tools"]
