# Security Command Center Inventory MCP Server
# File: models.py
# Version: v2

"""Domain models for Security Command Center asset listings."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ListAssetsRequest:
    """Parameters of one ListAssets call; page tokens are not part of it."""

    parent: str
    filter: str = ""
    read_time: Optional[str] = None
    page_size: Optional[int] = None
    order_by: Optional[str] = None

    def to_params(self, page_token: Optional[str] = None) -> Dict[str, Any]:
        """Query parameters for the REST call, omitting unset values."""
        params: Dict[str, Any] = {}
        if self.filter:
            params["filter"] = self.filter
        if self.read_time:
            params["readTime"] = self.read_time
        if self.page_size:
            params["pageSize"] = int(self.page_size)
        if self.order_by:
            params["orderBy"] = self.order_by
        if page_token:
            params["pageToken"] = page_token
        return params


@dataclass
class SecurityCenterProperties:
    """Resource identity as seen by Security Command Center."""

    resource_name: str = ""
    resource_type: str = ""
    resource_parent: Optional[str] = None
    resource_project: Optional[str] = None
    resource_display_name: Optional[str] = None
    resource_owners: List[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> "SecurityCenterProperties":
        item = payload if isinstance(payload, dict) else {}
        owners = item.get("resourceOwners")
        return cls(
            resource_name=str(item.get("resourceName") or ""),
            resource_type=str(item.get("resourceType") or ""),
            resource_parent=item.get("resourceParent"),
            resource_project=item.get("resourceProject"),
            resource_display_name=item.get("resourceDisplayName"),
            resource_owners=[str(o) for o in owners] if isinstance(owners, list) else [],
        )


@dataclass
class Asset:
    """A tracked cloud resource record returned by ListAssets."""

    name: str
    security_center_properties: SecurityCenterProperties
    resource_properties: Dict[str, Any] = field(default_factory=dict)
    create_time: Optional[str] = None
    update_time: Optional[str] = None

    # Raw JSON payload from the API, for debugging / advanced use.
    raw: Optional[Dict[str, Any]] = None

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> "Asset":
        item = payload if isinstance(payload, dict) else {}
        resource_properties = item.get("resourceProperties")
        return cls(
            name=str(item.get("name") or ""),
            security_center_properties=SecurityCenterProperties.from_api(
                item.get("securityCenterProperties")
            ),
            resource_properties=resource_properties
            if isinstance(resource_properties, dict)
            else {},
            create_time=item.get("createTime"),
            update_time=item.get("updateTime"),
            raw=item,
        )


@dataclass
class ListAssetsResult:
    """One entry of a ListAssets page: the asset and its state change."""

    asset: Asset
    state_change: Optional[str] = None

    @classmethod
    def from_api(cls, payload: Optional[Dict[str, Any]]) -> "ListAssetsResult":
        item = payload if isinstance(payload, dict) else {}
        return cls(
            asset=Asset.from_api(item.get("asset")),
            state_change=item.get("stateChange"),
        )
