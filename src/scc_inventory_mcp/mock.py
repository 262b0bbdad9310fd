# Security Command Center Inventory MCP Server
# File: mock.py
# Version: v1

"""In-memory stand-in for SecurityCenterClient.

Activated when SCC_MOCK_MODE is truthy. Serves a small fixed organization
through the same AssetIterator the real client uses, so paging, filters
and read times behave like the API (for the filter subset below).
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Tuple

from .config import SecurityCenterConfig
from .errors import SecurityCenterAPIError, TimestampConversionError
from .models import ListAssetsRequest
from .pager import AssetIterator
from .timestamps import parse_wire_timestamp

_PROJECT = "google.cloud.resourcemanager.Project"
_FOLDER = "google.cloud.resourcemanager.Folder"
_ORGANIZATION = "google.cloud.resourcemanager.Organization"
_BUCKET = "google.cloud.storage.Bucket"
_INSTANCE = "google.compute.Instance"

# (asset id, resource type, resource name, display name, created)
_MOCK_INVENTORY: List[Tuple[str, str, str, str, str]] = [
    ("1001", _ORGANIZATION, "//cloudresourcemanager.googleapis.com/organizations/{org}", "example.com", "2018-01-01T00:00:00Z"),
    ("1002", _FOLDER, "//cloudresourcemanager.googleapis.com/folders/5001", "engineering", "2018-06-01T00:00:00Z"),
    ("1003", _PROJECT, "//cloudresourcemanager.googleapis.com/projects/7001", "billing-prod", "2019-01-15T12:00:00Z"),
    ("1004", _PROJECT, "//cloudresourcemanager.googleapis.com/projects/7002", "analytics-dev", "2019-05-20T08:30:00Z"),
    ("1005", _BUCKET, "//storage.googleapis.com/billing-prod-exports", "billing-prod-exports", "2019-06-01T00:00:00Z"),
    ("1006", _INSTANCE, "//compute.googleapis.com/projects/billing-prod/zones/us-central1-a/instances/web-1", "web-1", "2020-02-02T00:00:00Z"),
    ("1007", _PROJECT, "//cloudresourcemanager.googleapis.com/projects/7003", "ml-sandbox", "2021-03-10T00:00:00Z"),
]

_FIXED_NOW = "2024-01-01T00:00:00Z"

_CLAUSE_RE = re.compile(r'^\s*([A-Za-z_][A-Za-z0-9_.]*)\s*=\s*(?:"([^"]*)"|(\S+))\s*$')


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _parse_filter(expr: str) -> List[Tuple[List[str], str]]:
    """Parse ``a.b="v" AND c=w`` into [(["a", "b"], "v"), (["c"], "w")]."""
    clauses: List[Tuple[List[str], str]] = []
    if not expr or not expr.strip():
        return clauses

    for part in re.split(r"\s+AND\s+", expr.strip()):
        match = _CLAUSE_RE.match(part)
        if not match:
            raise SecurityCenterAPIError(
                f"Mock client cannot evaluate filter clause {part!r}.",
                status_code=400,
            )
        path = [_camel(p) for p in match.group(1).split(".")]
        value = match.group(2) if match.group(2) is not None else match.group(3)
        clauses.append((path, value))
    return clauses


def _lookup(payload: Dict[str, Any], path: List[str]) -> Any:
    node: Any = payload
    for key in path:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node


class MockSecurityCenterClient:
    """Small in-memory stand-in for SecurityCenterClient."""

    def __init__(self, config: Optional[SecurityCenterConfig] = None) -> None:
        self.config = config
        self.closed = False

    def __enter__(self) -> "MockSecurityCenterClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def ping(self) -> bool:
        return True

    def _assets_for(self, parent: str) -> List[Dict[str, Any]]:
        org_id = parent.rsplit("/", 1)[-1]
        org_resource = f"//cloudresourcemanager.googleapis.com/organizations/{org_id}"
        assets: List[Dict[str, Any]] = []
        for asset_id, rtype, rname, display, created in _MOCK_INVENTORY:
            assets.append(
                {
                    "name": f"{parent}/assets/{asset_id}",
                    "securityCenterProperties": {
                        "resourceName": rname.format(org=org_id),
                        "resourceType": rtype,
                        "resourceParent": org_resource,
                        "resourceDisplayName": display,
                        "resourceOwners": [f"user:owner-{asset_id}@example.com"],
                    },
                    "resourceProperties": {"displayName": display},
                    "createTime": created,
                    "updateTime": created,
                }
            )
        return assets

    def list_assets(self, request: ListAssetsRequest) -> AssetIterator:
        page_size = request.page_size or (self.config.page_size if self.config else 10)

        def fetch_page(page_token: Optional[str]) -> Dict[str, Any]:
            clauses = _parse_filter(request.filter)

            if request.read_time:
                try:
                    cutoff = parse_wire_timestamp(request.read_time)
                except TimestampConversionError as exc:
                    raise SecurityCenterAPIError(str(exc), status_code=400) from exc
            else:
                cutoff = parse_wire_timestamp(_FIXED_NOW)

            matches = [
                a
                for a in self._assets_for(request.parent)
                if parse_wire_timestamp(a["createTime"]) <= cutoff
                and all(str(_lookup(a, path)) == value for path, value in clauses)
            ]

            start = int(page_token) if page_token else 0
            end = start + int(page_size)
            page: Dict[str, Any] = {
                "listAssetsResults": [
                    {"asset": a, "stateChange": "UNUSED"} for a in matches[start:end]
                ],
                "readTime": request.read_time or _FIXED_NOW,
                "totalSize": len(matches),
            }
            if end < len(matches):
                page["nextPageToken"] = str(end)
            return page

        return AssetIterator(fetch_page)
