# Security Command Center Inventory MCP Server
# File: tools/__init__.py
# Version: v2

"""MCP tool definitions for the Security Command Center inventory server."""

from __future__ import annotations

from . import tasks

__all__ = ["tasks"]
