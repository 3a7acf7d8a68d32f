#!/usr/bin/env python3
"""STDIO MCP Server for desktop MCP clients.

stdout carries JSON-RPC frames, so every log line goes to stderr.
"""

import os
import sys

from honeycomb_mcp.settings import settings, validate_config
from honeycomb_mcp.utils.pylogger import get_python_logger


def main() -> None:
    """Run the MCP server over STDIO."""
    os.environ["FASTMCP_NO_BANNER"] = "1"
    os.environ["PYTHONUNBUFFERED"] = "1"

    logger = get_python_logger(settings.PYTHON_LOG_LEVEL, stream=sys.stderr)
    try:
        validate_config(settings)

        # Imported after logging is pointed at stderr
        from honeycomb_mcp.server import HoneycombMCPServer

        server = HoneycombMCPServer()
        server.mcp.run(transport="stdio", show_banner=False)
    except KeyboardInterrupt:
        logger.info("STDIO server stopped by user")
    except Exception as e:
        logger.error("STDIO server failed", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
