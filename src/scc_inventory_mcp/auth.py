# Security Command Center Inventory MCP Server
# File: auth.py
# Version: v4

"""OAuth2 access tokens for the Security Command Center API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional
import time

import google.auth
import google.auth.exceptions
import google.auth.transport.requests
import httpx

from .config import SecurityCenterConfig
from .errors import ClientInitError, SecurityCenterAPIError

# Refresh this many seconds before the token actually expires.
_EXPIRY_SKEW_SECONDS = 60

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


def load_default_credentials() -> Any:
    """Find Application Default Credentials for the cloud-platform scope.

    Looks at GOOGLE_APPLICATION_CREDENTIALS, gcloud user credentials and the
    GCE / Cloud Run metadata server, in that order.
    """
    try:
        credentials, _project = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])
    except google.auth.exceptions.DefaultCredentialsError as exc:
        raise ClientInitError(
            "No credentials configured. Set SCC_ACCESS_TOKEN, or "
            "SCC_CLIENT_ID, SCC_CLIENT_SECRET and SCC_REFRESH_TOKEN, or "
            f"provide Application Default Credentials: {exc}"
        ) from exc
    return credentials


@dataclass
class OAuthClient:
    """Access-token provider.

    A static token from SCC_ACCESS_TOKEN is returned as is. Otherwise the
    configured refresh token is exchanged at the OAuth token endpoint
    (``grant_type=refresh_token``) and the result is cached in memory
    until shortly before it expires. With neither configured,
    ``adc_credentials`` (google-auth Application Default Credentials) are
    refreshed whenever they are no longer valid.
    """

    config: SecurityCenterConfig
    adc_credentials: Any = None
    _cached_token: Optional[str] = None
    _expires_at: float = 0.0

    def get_access_token(self, http_client: Optional[httpx.Client] = None) -> str:
        """Return a valid access token, refreshing it when needed."""
        if self.config.access_token:
            return self.config.access_token

        if self.adc_credentials is not None and not self.config.has_credentials:
            return self._adc_access_token()

        if self._cached_token and time.time() < self._expires_at:
            return self._cached_token

        if (
            not self.config.oauth_token_url
            or not self.config.client_id
            or not self.config.client_secret
            or not self.config.refresh_token
        ):
            raise ClientInitError(
                "OAuth configuration is incomplete. "
                "Set SCC_ACCESS_TOKEN, or SCC_CLIENT_ID, SCC_CLIENT_SECRET "
                "and SCC_REFRESH_TOKEN."
            )

        form = {
            "grant_type": "refresh_token",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret,
            "refresh_token": self.config.refresh_token,
        }
        headers = {"Content-Type": "application/x-www-form-urlencoded"}

        try:
            if http_client is not None:
                response = http_client.post(
                    self.config.oauth_token_url, data=form, headers=headers
                )
            else:
                with httpx.Client(
                    timeout=float(self.config.timeout_seconds),
                    verify=self.config.verify_tls,
                ) as client:
                    response = client.post(
                        self.config.oauth_token_url, data=form, headers=headers
                    )
        except httpx.RequestError as exc:
            raise SecurityCenterAPIError(
                f"Error calling OAuth token endpoint '{self.config.oauth_token_url}': {exc}"
            ) from exc

        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            body_preview = exc.response.text[:500]
            raise SecurityCenterAPIError(
                f"Failed to obtain access token from '{self.config.oauth_token_url}' "
                f"(HTTP {status}). Check SCC_CLIENT_ID, SCC_CLIENT_SECRET "
                "and SCC_REFRESH_TOKEN. "
                f"Response snippet: {body_preview}",
                status_code=status,
                body_preview=body_preview,
            ) from exc

        data: dict[str, Any] = response.json()
        token = data.get("access_token")
        if not token:
            raise SecurityCenterAPIError(
                "OAuth token response did not contain 'access_token'"
            )

        try:
            expires_in = int(data.get("expires_in") or 3600)
        except (TypeError, ValueError):
            expires_in = 3600

        self._cached_token = token
        self._expires_at = time.time() + max(expires_in - _EXPIRY_SKEW_SECONDS, 0)
        return token

    def _adc_access_token(self) -> str:
        credentials = self.adc_credentials
        if not credentials.valid:
            try:
                credentials.refresh(google.auth.transport.requests.Request())
            except google.auth.exceptions.GoogleAuthError as exc:
                raise SecurityCenterAPIError(
                    f"Failed to refresh Application Default Credentials: {exc}"
                ) from exc

        if not credentials.token:
            raise SecurityCenterAPIError(
                "Application Default Credentials did not yield an access token"
            )
        return credentials.token
