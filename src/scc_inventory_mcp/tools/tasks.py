# Security Command Center Inventory MCP Server
# File: tools/tasks.py
# Version: v5
#
# NOTE: This module is the single place where we define the logic that is
# exposed as MCP tools. The stdio transport simply calls
# `register_tools(server)` to wire these up.

from __future__ import annotations

import io
import logging
import os
import time
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from .. import assets as asset_reports
from ..client import SecurityCenterClient, make_client
from ..config import MAX_PAGE_SIZE, SecurityCenterConfig
from ..errors import SecurityCenterError
from ..models import ListAssetsRequest, ListAssetsResult
from ..timestamps import parse_wire_timestamp, to_wire_timestamp

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _make_error(
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Small, LLM-friendly error shape used by tools and diagnostics."""
    err: Dict[str, Any] = {"code": code, "message": message}
    if details:
        err["details"] = details
    return err


def _cap_int(value: int, cap: int, min_value: int = 1) -> tuple[int, bool]:
    """Clamp an integer to [min_value, cap]. Returns (effective, cap_applied)."""
    try:
        v = int(value)
    except (TypeError, ValueError):
        return min_value, True

    if v < min_value:
        return min_value, True

    if cap > 0 and v > cap:
        return cap, True

    return v, False


def _make_client() -> SecurityCenterClient:
    """Create a client from environment variables.

    Kept as a no-argument module function so tests can monkeypatch it with
    a lambda returning a fake client.
    """
    return make_client()


def _result_to_dict(result: ListAssetsResult) -> Dict[str, Any]:
    props = result.asset.security_center_properties
    return {
        "name": result.asset.name,
        "resource_name": props.resource_name,
        "resource_type": props.resource_type,
        "resource_parent": props.resource_parent,
        "resource_project": props.resource_project,
        "display_name": props.resource_display_name,
        "state_change": result.state_change,
    }


# ---------------------------------------------------------------------------
# Asset listing
# ---------------------------------------------------------------------------


def ping() -> Dict[str, Any]:
    with _make_client() as client:
        ok = client.ping()
    return {"ok": bool(ok)}


def list_assets(
    organization_id: str,
    filter: str = "",
    read_time: Optional[str] = None,
    page_size: Optional[int] = None,
) -> Dict[str, Any]:
    """List assets in an organization, capped at SCC_MAX_LIST_RESULTS.

    ``read_time`` is an RFC 3339 timestamp; when given it is normalised to
    UTC before being sent.
    """
    cfg = SecurityCenterConfig.from_env()
    cap = int(cfg.max_list_results)

    wire_read_time: Optional[str] = None
    if read_time:
        wire_read_time = to_wire_timestamp(parse_wire_timestamp(read_time))

    effective_page_size: Optional[int] = None
    page_size_cap_applied = False
    if page_size is not None:
        effective_page_size, page_size_cap_applied = _cap_int(page_size, MAX_PAGE_SIZE)

    request = ListAssetsRequest(
        parent=f"organizations/{organization_id}",
        filter=filter or "",
        read_time=wire_read_time,
        page_size=effective_page_size,
    )

    items: List[Dict[str, Any]] = []
    truncated = False
    with _make_client() as client:
        results = client.list_assets(request)
        for result in results:
            if len(items) >= cap:
                truncated = True
                break
            items.append(_result_to_dict(result))

    return {
        "summary": f"Found {len(items)} assets in {request.parent}.",
        "assets": items,
        "meta": {
            "parent": request.parent,
            "filter": request.filter,
            "read_time": results.read_time,
            "total_size": results.total_size,
            "count": len(items),
            "truncated": truncated,
            "cap": cap,
            "requested_page_size": page_size,
            "page_size": effective_page_size,
            "page_size_cap_applied": page_size_cap_applied,
        },
    }


def _run_report(
    organization_id: str,
    read_time: Optional[str],
    run: Callable[[io.StringIO, Optional[datetime]], int],
) -> Dict[str, Any]:
    """Run a text report into a buffer; errors come back with their count."""
    buffer = io.StringIO()
    out: Dict[str, Any] = {"organization_id": organization_id, "read_time": read_time}
    try:
        as_of = parse_wire_timestamp(read_time) if read_time is not None else None
        count = run(buffer, as_of)
    except SecurityCenterError as exc:
        out.update(
            ok=False,
            count=exc.count,
            lines=buffer.getvalue().splitlines(),
            error=_make_error(exc.code, str(exc)),
        )
        return out

    out.update(ok=True, count=count, lines=buffer.getvalue().splitlines())
    return out


def list_project_assets_at_time(organization_id: str, read_time: str) -> Dict[str, Any]:
    """Run the project-at-time report and return its lines and count."""
    return _run_report(
        organization_id,
        read_time,
        lambda buffer, as_of: asset_reports.list_all_project_assets_at_time(
            buffer, organization_id, as_of
        ),
    )


def asset_report(
    organization_id: str,
    filter: str = "",
    read_time: Optional[str] = None,
) -> Dict[str, Any]:
    """One report line per asset matching ``filter``, optionally at a read time."""
    result = _run_report(
        organization_id,
        read_time,
        lambda buffer, as_of: asset_reports.list_assets_report(
            buffer, organization_id, filter=filter or "", as_of_time=as_of
        ),
    )
    result["filter"] = filter or ""
    return result


# ---------------------------------------------------------------------------
# Diagnostics & configuration helpers
# ---------------------------------------------------------------------------


def _collect_config_info() -> Dict[str, Any]:
    """Redacted snapshot of endpoint / credential configuration from env."""
    cfg = SecurityCenterConfig.from_env()

    host = None
    if cfg.api_endpoint:
        host = urlparse(cfg.api_endpoint).hostname or cfg.api_endpoint

    if cfg.access_token:
        credential_source = "access-token"
    elif cfg.has_credentials:
        credential_source = "refresh-token"
    else:
        credential_source = "application-default"

    return {
        "api_endpoint": cfg.api_endpoint,
        "host": host,
        "mock_mode": bool(cfg.mock_mode),
        "verify_tls": bool(cfg.verify_tls),
        "oauth": {
            "token_url": cfg.oauth_token_url,
            "credential_source": credential_source,
            "access_token_configured": bool(cfg.access_token),
            "client_id_configured": bool(cfg.client_id),
            "client_secret_configured": bool(cfg.client_secret),
            "refresh_token_configured": bool(cfg.refresh_token),
        },
        "limits": {
            "page_size": cfg.page_size,
            "max_list_results": cfg.max_list_results,
            "timeout_seconds": cfg.timeout_seconds,
        },
    }


def get_config_info() -> Dict[str, Any]:
    return _collect_config_info()


def _elapsed_ms(t0: float) -> int:
    return int((time.time() - t0) * 1000)


def diagnostics() -> Dict[str, Any]:
    started = time.time()
    config_info = _collect_config_info()
    checks: List[Dict[str, Any]] = []
    overall_ok = True

    # Client init
    t0 = time.time()
    try:
        client = _make_client()
        checks.append({"name": "client_init", "ok": True, "error": None, "elapsed_ms": _elapsed_ms(t0)})
    except Exception as exc:
        logger.warning("Diagnostics: client init failed: %s", exc)
        checks.append(
            {
                "name": "client_init",
                "ok": False,
                "error": _make_error("CLIENT_INIT_ERROR", str(exc)),
                "elapsed_ms": _elapsed_ms(t0),
            }
        )
        return {
            "ok": False,
            "mock_mode": config_info["mock_mode"],
            "config": config_info,
            "checks": checks,
            "meta": {"elapsed_ms": _elapsed_ms(started)},
        }

    with client:
        # Ping
        t0 = time.time()
        try:
            ok_ping = client.ping()
            checks.append(
                {
                    "name": "ping",
                    "ok": bool(ok_ping),
                    "error": None if ok_ping else _make_error("BACKEND_ERROR", "Ping returned a falsy result."),
                    "elapsed_ms": _elapsed_ms(t0),
                }
            )
            overall_ok = overall_ok and bool(ok_ping)
        except Exception as exc:
            overall_ok = False
            checks.append(
                {
                    "name": "ping",
                    "ok": False,
                    "error": _make_error("BACKEND_ERROR", str(exc)),
                    "elapsed_ms": _elapsed_ms(t0),
                }
            )

        # One page of assets, only when a diagnostics organization is configured.
        org_id = (os.getenv("SCC_DIAGNOSTICS_ORGANIZATION_ID") or "").strip()
        t0 = time.time()
        if not org_id:
            checks.append(
                {
                    "name": "list_assets",
                    "ok": True,
                    "skipped": True,
                    "error": None,
                    "elapsed_ms": 0,
                }
            )
        else:
            try:
                results = client.list_assets(
                    ListAssetsRequest(parent=f"organizations/{org_id}", page_size=1)
                )
                next(results, None)
                checks.append(
                    {
                        "name": "list_assets",
                        "ok": True,
                        "skipped": False,
                        "total_size": results.total_size,
                        "error": None,
                        "elapsed_ms": _elapsed_ms(t0),
                    }
                )
            except Exception as exc:
                overall_ok = False
                checks.append(
                    {
                        "name": "list_assets",
                        "ok": False,
                        "skipped": False,
                        "error": _make_error("BACKEND_ERROR", str(exc)),
                        "elapsed_ms": _elapsed_ms(t0),
                    }
                )

    return {
        "ok": overall_ok,
        "mock_mode": config_info["mock_mode"],
        "config": config_info,
        "checks": checks,
        "meta": {"elapsed_ms": _elapsed_ms(started)},
    }


# ---------------------------------------------------------------------------
# MCP tool registration
# ---------------------------------------------------------------------------


def register_tools(server: Any) -> None:
    """Register MCP tools on an MCP Server-like instance."""
    if server is None or not hasattr(server, "tool"):
        raise ValueError(
            "register_tools(server) expects an MCP Server-like object that exposes a .tool() decorator."
        )

    @server.tool(name="scc_ping", description="Basic health check for the Security Command Center MCP server.")
    def mcp_ping() -> Dict[str, Any]:
        return ping()

    @server.tool(
        name="scc_list_assets",
        description="List Security Command Center assets in an organization, optionally filtered and at a read time.",
    )
    def mcp_list_assets(
        organization_id: str,
        filter: str = "",
        read_time: Optional[str] = None,
        page_size: Optional[int] = None,
    ) -> Dict[str, Any]:
        return list_assets(
            organization_id=organization_id,
            filter=filter,
            read_time=read_time,
            page_size=page_size,
        )

    @server.tool(
        name="scc_list_project_assets_at_time",
        description="List all GCP project assets in an organization as they existed at an RFC 3339 read time.",
    )
    def mcp_list_project_assets_at_time(organization_id: str, read_time: str) -> Dict[str, Any]:
        return list_project_assets_at_time(organization_id=organization_id, read_time=read_time)

    @server.tool(
        name="scc_asset_report",
        description="Print one report line per asset matching a filter, optionally at an RFC 3339 read time.",
    )
    def mcp_asset_report(
        organization_id: str,
        filter: str = "",
        read_time: Optional[str] = None,
    ) -> Dict[str, Any]:
        return asset_report(organization_id=organization_id, filter=filter, read_time=read_time)

    @server.tool(name="scc_get_config_info", description="Show the redacted endpoint and credential configuration.")
    def mcp_get_config_info() -> Dict[str, Any]:
        return get_config_info()

    @server.tool(name="scc_diagnostics", description="Run connectivity checks against Security Command Center.")
    def mcp_diagnostics() -> Dict[str, Any]:
        return diagnostics()
