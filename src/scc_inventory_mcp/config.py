# Security Command Center Inventory MCP Server
# File: config.py
# Version: v2

"""Configuration loading for the Security Command Center inventory server."""

from __future__ import annotations

from dataclasses import dataclass
import os

DEFAULT_API_ENDPOINT = "https://securitycenter.googleapis.com"
DEFAULT_OAUTH_TOKEN_URL = "https://oauth2.googleapis.com/token"

# The ListAssets API rejects page sizes above 1000.
MAX_PAGE_SIZE = 1000


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean-like environment variable.

    Accepts 1/0, true/false, yes/no, on/off (case-insensitive).
    """
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _parse_int_env(
    name: str,
    default: int,
    min_value: int | None = None,
    max_value: int | None = None,
) -> int:
    """Parse an int environment variable, clamped, falling back to default."""
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        value = int(default)
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            value = int(default)

    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value

    return value


def _getenv_stripped(name: str) -> str | None:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


@dataclass
class SecurityCenterConfig:
    """Settings needed to talk to the Security Command Center API.

    Credentials are either a ready-made access token (SCC_ACCESS_TOKEN) or
    an OAuth client id/secret plus a refresh token that is exchanged at
    ``oauth_token_url``.
    """

    api_endpoint: str | None
    oauth_token_url: str | None
    access_token: str | None
    client_id: str | None
    client_secret: str | None
    refresh_token: str | None
    mock_mode: bool

    verify_tls: bool = True
    timeout_seconds: int = 30
    page_size: int = 100
    max_list_results: int = 200
    log_level: str = "WARNING"

    @property
    def has_credentials(self) -> bool:
        if self.access_token:
            return True
        return bool(self.client_id and self.client_secret and self.refresh_token)

    @classmethod
    def from_env(cls) -> "SecurityCenterConfig":
        """Create configuration from environment variables."""
        api_endpoint = os.getenv("SCC_API_ENDPOINT", DEFAULT_API_ENDPOINT)
        oauth_token_url = os.getenv("SCC_OAUTH_TOKEN_URL", DEFAULT_OAUTH_TOKEN_URL)

        mock_mode = _parse_bool_env("SCC_MOCK_MODE", default=False)
        verify_tls = _parse_bool_env("SCC_VERIFY_TLS", default=True)

        timeout_seconds = _parse_int_env(
            "SCC_TIMEOUT_SECONDS", default=30, min_value=1, max_value=600
        )
        page_size = _parse_int_env(
            "SCC_PAGE_SIZE", default=100, min_value=1, max_value=MAX_PAGE_SIZE
        )
        max_list_results = _parse_int_env(
            "SCC_MAX_LIST_RESULTS", default=200, min_value=1, max_value=10000
        )

        log_level = (os.getenv("SCC_LOG_LEVEL") or "WARNING").strip().upper()

        return cls(
            api_endpoint=api_endpoint,
            oauth_token_url=oauth_token_url,
            access_token=_getenv_stripped("SCC_ACCESS_TOKEN"),
            client_id=_getenv_stripped("SCC_CLIENT_ID"),
            client_secret=_getenv_stripped("SCC_CLIENT_SECRET"),
            refresh_token=_getenv_stripped("SCC_REFRESH_TOKEN"),
            mock_mode=mock_mode,
            verify_tls=verify_tls,
            timeout_seconds=timeout_seconds,
            page_size=page_size,
            max_list_results=max_list_results,
            log_level=log_level,
        )
