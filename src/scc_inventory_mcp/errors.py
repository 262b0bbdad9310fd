# Security Command Center Inventory MCP Server
# File: errors.py
# Version: v1

"""Exception types raised by the client and the asset listing helpers.

Every error carries a ``count`` class attribute: the sentinel asset count
reported by the listing helpers when they fail with that error.
"""

from __future__ import annotations

from typing import Optional


class SecurityCenterError(RuntimeError):
    """Base class for all errors raised by this package."""

    code = "SECURITY_CENTER_ERROR"
    count = -1


class ClientInitError(SecurityCenterError):
    """The client could not be constructed from the current configuration."""

    code = "CLIENT_INIT_ERROR"
    count = -1


class TimestampConversionError(SecurityCenterError, ValueError):
    """A read time could not be converted to or from the wire format."""

    code = "TIMESTAMP_ERROR"
    count = 0


class SecurityCenterAPIError(SecurityCenterError):
    """An HTTP call to the Security Command Center (or token) endpoint failed."""

    code = "BACKEND_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body_preview: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body_preview = body_preview


class IterationError(SecurityCenterError):
    """Fetching the next asset failed part-way through a listing."""

    code = "ITERATION_ERROR"
    count = -1

    def __init__(self, message: str, assets_written: int = 0) -> None:
        super().__init__(message)
        self.assets_written = assets_written
