import logging
from typing import Optional

from .client import HoneycombAPI
from .config import EnvironmentRegistry, build_registry
from .prompts import build_prompts
from .resources import DATASET_RESOURCE_URI, build_dataset_resource
from .settings import Settings, settings as default_settings
from .tools.honeycomb_tools import build_tools
from .utils.pylogger import get_python_logger, force_reconfigure_all_loggers


class HoneycombMCPServer:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        registry: Optional[EnvironmentRegistry] = None,
        api: Optional[HoneycombAPI] = None,
    ) -> None:
        # Lazy import to avoid import-time circulars when fastmcp pulls in mcp.types
        from fastmcp import FastMCP  # type: ignore

        self.settings = settings or default_settings
        get_python_logger(self.settings.PYTHON_LOG_LEVEL)

        if api is None:
            registry = registry or build_registry(self.settings)
            api = HoneycombAPI(
                registry,
                max_attempts=self.settings.HONEYCOMB_QUERY_MAX_ATTEMPTS,
                poll_interval=self.settings.HONEYCOMB_QUERY_POLL_INTERVAL,
            )
        self.api = api

        self.mcp = FastMCP("honeycomb")
        # Ensure third-party loggers are reconfigured after FastMCP init
        force_reconfigure_all_loggers(self.settings.PYTHON_LOG_LEVEL)
        self._register_mcp_tools()
        self._register_mcp_prompts()
        self._register_mcp_resources()
        logging.getLogger(__name__).info(
            "Honeycomb MCP Server initialized with environments: %s",
            ", ".join(self.api.get_environments()),
        )

    def _register_mcp_tools(self) -> None:
        for tool in build_tools(self.api):
            self.mcp.tool()(tool)

    def _register_mcp_prompts(self) -> None:
        for prompt in build_prompts():
            self.mcp.prompt()(prompt)

    def _register_mcp_resources(self) -> None:
        self.mcp.resource(DATASET_RESOURCE_URI)(build_dataset_resource(self.api))
