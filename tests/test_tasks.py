# Security Command Center Inventory MCP Server
# File: tests/test_tasks.py
# Version: v1

"""Tests for the MCP task functions in tools.tasks (mock mode + fakes)."""

from __future__ import annotations

from typing import Any, Dict

import pytest

from scc_inventory_mcp.mock import MockSecurityCenterClient
from scc_inventory_mcp.tools import tasks

PROJECT_FILTER = 'security_center_properties.resource_type="google.cloud.resourcemanager.Project"'


class DummyServer:
    def __init__(self) -> None:
        self.tools: Dict[str, Any] = {}

    def tool(self, *args, **kwargs):
        def decorator(fn):
            self.tools[kwargs["name"]] = fn
            return fn

        return decorator


class _FailingInitClient:
    def __call__(self):
        raise RuntimeError("credentials exploded")


# ---------------------------------------------------------------------------
# list_assets
# ---------------------------------------------------------------------------


def test_list_assets_with_project_filter(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.list_assets("42", filter=PROJECT_FILTER)

    assert out["meta"]["count"] == 3
    assert out["meta"]["total_size"] == 3
    assert out["meta"]["truncated"] is False
    assert out["meta"]["parent"] == "organizations/42"
    assert {a["resource_type"] for a in out["assets"]} == {
        "google.cloud.resourcemanager.Project"
    }


def test_list_assets_respects_env_cap(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")
    monkeypatch.setenv("SCC_MAX_LIST_RESULTS", "2")

    out = tasks.list_assets("42")

    assert len(out["assets"]) == 2
    assert out["meta"]["truncated"] is True
    assert out["meta"]["cap"] == 2


def test_list_assets_read_time_is_normalised(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    # 2019-03-01 in UTC-05:00; only the org, the folder and one project exist.
    out = tasks.list_assets("42", read_time="2019-02-28T19:00:00-05:00")

    assert out["meta"]["read_time"] == "2019-03-01T00:00:00Z"
    assert [a["name"] for a in out["assets"]] == [
        "organizations/42/assets/1001",
        "organizations/42/assets/1002",
        "organizations/42/assets/1003",
    ]


class _RecordingMockClient(MockSecurityCenterClient):
    def __init__(self) -> None:
        super().__init__()
        self.requests = []

    def list_assets(self, request):
        self.requests.append(request)
        return super().list_assets(request)


@pytest.mark.parametrize(
    "requested, effective",
    [(0, 1), (-5, 1), (5000, 1000), (25, 25)],
)
def test_list_assets_clamps_page_size(monkeypatch, requested, effective) -> None:
    client = _RecordingMockClient()
    monkeypatch.setattr(tasks, "_make_client", lambda: client)

    out = tasks.list_assets("42", page_size=requested)

    assert client.requests[0].page_size == effective
    assert out["meta"]["page_size"] == effective
    assert out["meta"]["requested_page_size"] == requested
    assert out["meta"]["page_size_cap_applied"] is (requested != effective)
    assert out["meta"]["count"] == 7


def test_list_assets_without_page_size_uses_config_default(monkeypatch) -> None:
    client = _RecordingMockClient()
    monkeypatch.setattr(tasks, "_make_client", lambda: client)

    out = tasks.list_assets("42")

    assert client.requests[0].page_size is None
    assert out["meta"]["page_size_cap_applied"] is False


# ---------------------------------------------------------------------------
# list_project_assets_at_time
# ---------------------------------------------------------------------------


def test_list_project_assets_at_time_ok(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.list_project_assets_at_time("42", "2020-01-01T00:00:00Z")

    assert out["ok"] is True
    assert out["count"] == 2
    assert len(out["lines"]) == 2
    assert out["lines"][1].startswith("Asset Name: organizations/42/assets/1004,")


def test_list_project_assets_at_time_bad_read_time(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.list_project_assets_at_time("42", "yesterday")

    assert out["ok"] is False
    assert out["count"] == 0
    assert out["error"]["code"] == "TIMESTAMP_ERROR"
    assert out["lines"] == []


def test_list_project_assets_at_time_without_credentials() -> None:
    out = tasks.list_project_assets_at_time("42", "2020-01-01T00:00:00Z")

    assert out["ok"] is False
    assert out["count"] == -1
    assert out["error"]["code"] == "CLIENT_INIT_ERROR"


# ---------------------------------------------------------------------------
# Diagnostics & config
# ---------------------------------------------------------------------------


def test_ping_mock_mode(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")
    assert tasks.ping() == {"ok": True}


def test_diagnostics_mock_mode_lists_one_asset_page(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")
    monkeypatch.setenv("SCC_DIAGNOSTICS_ORGANIZATION_ID", "42")

    result = tasks.diagnostics()

    assert result["ok"] is True
    assert result["mock_mode"] is True
    checks = {c["name"]: c for c in result["checks"]}
    assert set(checks) == {"client_init", "ping", "list_assets"}
    assert checks["list_assets"]["skipped"] is False
    assert checks["list_assets"]["total_size"] == 7


def test_diagnostics_skips_listing_without_org(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    result = tasks.diagnostics()

    checks = {c["name"]: c for c in result["checks"]}
    assert result["ok"] is True
    assert checks["list_assets"]["skipped"] is True


def test_diagnostics_reports_client_init_failure(monkeypatch) -> None:
    monkeypatch.setattr(tasks, "_make_client", _FailingInitClient())

    result = tasks.diagnostics()

    assert result["ok"] is False
    assert result["checks"][0]["name"] == "client_init"
    assert result["checks"][0]["error"]["message"] == "credentials exploded"


def test_config_info_does_not_leak_secrets(monkeypatch) -> None:
    monkeypatch.setenv("SCC_ACCESS_TOKEN", "super-secret-token")
    monkeypatch.setenv("SCC_CLIENT_SECRET", "super-secret-client")

    info = tasks.get_config_info()

    assert info["host"] == "securitycenter.googleapis.com"
    assert info["oauth"]["credential_source"] == "access-token"
    assert info["oauth"]["client_secret_configured"] is True
    assert "super-secret" not in repr(info)


def test_register_tools_exposes_all_tools() -> None:
    server = DummyServer()
    tasks.register_tools(server)

    assert set(server.tools) == {
        "scc_ping",
        "scc_list_assets",
        "scc_list_project_assets_at_time",
        "scc_asset_report",
        "scc_get_config_info",
        "scc_diagnostics",
    }


# ---------------------------------------------------------------------------
# asset_report
# ---------------------------------------------------------------------------


def test_asset_report_filter_and_read_time(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.asset_report("42", filter=PROJECT_FILTER, read_time="2020-01-01T00:00:00Z")

    assert out["ok"] is True
    assert out["count"] == 2
    assert out["filter"] == PROJECT_FILTER
    assert all(line.startswith("Asset Name: organizations/42/assets/") for line in out["lines"])


def test_asset_report_without_filter_or_read_time(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.asset_report("42")

    assert out["ok"] is True
    assert out["count"] == 7
    assert out["read_time"] is None


def test_asset_report_backend_failure(monkeypatch) -> None:
    monkeypatch.setenv("SCC_MOCK_MODE", "1")

    out = tasks.asset_report("42", filter="resource_type ~ Project")

    assert out["ok"] is False
    assert out["count"] == -1
    assert out["error"]["code"] == "ITERATION_ERROR"
    assert out["lines"] == []


def test_config_info_reports_default_credentials_fallback() -> None:
    info = tasks.get_config_info()

    assert info["oauth"]["credential_source"] == "application-default"
    assert info["oauth"]["access_token_configured"] is False
