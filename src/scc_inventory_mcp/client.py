# Security Command Center Inventory MCP Server
# File: client.py
# Version: v4
"""Client for the Security Command Center REST API (v1).

Implements:

- ping() as a configuration-level health check
- list_assets() via ``GET /v1/{parent}/assets``, returning a lazy
  AssetIterator that hides page tokens from the caller
- make_client() which picks the real or the in-memory mock client
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import httpx
from httpx import HTTPStatusError, RequestError

from .auth import OAuthClient, load_default_credentials
from .config import SecurityCenterConfig
from .errors import ClientInitError, SecurityCenterAPIError
from .mock import MockSecurityCenterClient
from .models import ListAssetsRequest
from .pager import AssetIterator

logger = logging.getLogger(__name__)


class SecurityCenterClient:
    """Wrapper around the Security Command Center assets API.

    Owns one ``httpx.Client``; use it as a context manager (or call
    ``close()``) to release the connection pool.
    """

    def __init__(
        self,
        config: SecurityCenterConfig,
        oauth: OAuthClient,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.config = config
        self.oauth = oauth
        self._http = httpx.Client(
            base_url=(config.api_endpoint or "").rstrip("/"),
            timeout=float(config.timeout_seconds),
            verify=config.verify_tls,
            transport=transport,
        )

    def __enter__(self) -> "SecurityCenterClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # ------------------------------------------------------------------
    # Basic health
    # ------------------------------------------------------------------

    def ping(self) -> bool:
        """Lightweight health check: is an API endpoint configured?"""
        return bool(self.config.api_endpoint)

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def list_assets(self, request: ListAssetsRequest) -> AssetIterator:
        """List assets under ``request.parent``.

        Returns immediately; each page is requested when the iterator
        runs out of buffered results.
        """
        path = f"/v1/{request.parent}/assets"
        if request.page_size is None:
            request = ListAssetsRequest(
                parent=request.parent,
                filter=request.filter,
                read_time=request.read_time,
                page_size=self.config.page_size,
                order_by=request.order_by,
            )

        def fetch_page(page_token: Optional[str]) -> Dict[str, Any]:
            return self._get_json(path, request.to_params(page_token))

        return AssetIterator(fetch_page)

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        token = self.oauth.get_access_token(self._http)
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }

        logger.debug("GET %s params=%s", path, params)
        try:
            response = self._http.get(path, params=params, headers=headers)
        except RequestError as exc:
            raise SecurityCenterAPIError(
                f"Error calling Security Command Center API at '{path}': {exc}"
            ) from exc

        try:
            response.raise_for_status()
        except HTTPStatusError as exc:
            status = response.status_code
            body_preview = response.text[:500]
            raise SecurityCenterAPIError(
                f"Request to '{path}' failed (HTTP {status}). "
                f"Response snippet: {body_preview}",
                status_code=status,
                body_preview=body_preview,
            ) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise SecurityCenterAPIError(
                f"Response from '{path}' is not valid JSON: {response.text[:200]}",
                status_code=response.status_code,
            ) from exc

        if not isinstance(data, dict):
            raise SecurityCenterAPIError(
                f"Unexpected JSON structure from '{path}': {type(data).__name__}"
            )
        return data


def make_client(
    cfg: Optional[SecurityCenterConfig] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> SecurityCenterClient:
    """Create a client from environment variables (or the given config).

    If SCC_MOCK_MODE is truthy, an in-process mock client is returned
    instead of a real HTTP client. Any configuration problem is raised as
    ClientInitError.
    """
    cfg = cfg or SecurityCenterConfig.from_env()

    if cfg.mock_mode:
        return MockSecurityCenterClient(config=cfg)  # type: ignore[return-value]

    endpoint = cfg.api_endpoint or ""
    parsed = urlparse(endpoint)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ClientInitError(
            f"SCC_API_ENDPOINT must be an http(s) URL, got {endpoint!r}."
        )

    # Without SCC_* credentials, fall back to Application Default Credentials.
    oauth = OAuthClient(config=cfg)
    if not cfg.has_credentials:
        oauth.adc_credentials = load_default_credentials()

    try:
        return SecurityCenterClient(config=cfg, oauth=oauth, transport=transport)
    except Exception as exc:
        raise ClientInitError(f"Could not create HTTP client: {exc}") from exc
