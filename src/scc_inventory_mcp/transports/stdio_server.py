# Security Command Center Inventory MCP Server
# File: transports/stdio_server.py
# Version: v2

"""STDIO entrypoint for the Security Command Center inventory MCP server.

This is the script behind the ``scc-inventory-mcp`` console command.

It:

- configures logging on stderr (stdout carries the MCP protocol),
- creates a FastMCP server,
- registers the asset and diagnostics tools, and
- runs the built-in stdio transport.
"""

from __future__ import annotations

import logging
import sys

from mcp.server.fastmcp import FastMCP

from ..config import SecurityCenterConfig
from ..tools import tasks


def main() -> None:
    """Synchronous entrypoint for console_scripts."""
    cfg = SecurityCenterConfig.from_env()
    logging.basicConfig(
        level=getattr(logging, cfg.log_level, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mcp = FastMCP("scc-inventory-mcp")
    tasks.register_tools(mcp)

    # Let FastMCP handle stdio + event loop setup.
    mcp.run()


if __name__ == "__main__":
    main()
