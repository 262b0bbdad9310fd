# Security Command Center Inventory MCP Server
# File: __init__.py
# Version: v1

"""Top-level package for the Security Command Center inventory MCP server."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]


def _resolve_version() -> str:
    """Resolve the installed distribution version.

    Falls back to a fixed version when running from a source checkout
    without installed package metadata.
    """
    try:
        return version("scc-inventory-mcp-server")
    except PackageNotFoundError:
        return "0.1.0"


__version__ = _resolve_version()
