# Security Command Center Inventory MCP Server
# File: assets.py
# Version: v2

"""Asset listing reports written to a text stream.

``list_all_project_assets_at_time`` prints every GCP project in an
organization as it existed at a given moment, one line per asset, and
returns how many lines it wrote.

Failures are raised, never returned. Each error carries the sentinel count
for its failure path in ``err.count``:

- ClientInitError: -1 (a diagnostic is logged first)
- TimestampConversionError: 0 (a diagnostic is logged first)
- IterationError: -1, with ``err.assets_written`` lines already written
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, TextIO

from .client import make_client
from .errors import ClientInitError, IterationError, TimestampConversionError
from .models import ListAssetsRequest
from .timestamps import to_wire_timestamp

logger = logging.getLogger(__name__)

PROJECT_RESOURCE_TYPE = "google.cloud.resourcemanager.Project"
ONLY_PROJECTS_FILTER = (
    f'security_center_properties.resource_type="{PROJECT_RESOURCE_TYPE}"'
)

ASSET_LINE_FORMAT = "Asset Name: %s, Resource Name %s, Resource Type %s\n"


def list_all_project_assets_at_time(
    output: TextIO, organization_id: str, as_of_time: datetime
) -> int:
    """List all GCP projects in ``organization_id`` at ``as_of_time``.

    ``organization_id`` is the numeric organization id, e.g. "12321311".
    One line per project is written to ``output``; the number of lines
    written is returned.
    """
    return _report(
        output,
        organization_id,
        ONLY_PROJECTS_FILTER,
        as_of_time,
        read_time_required=True,
    )


def list_assets_report(
    output: TextIO,
    organization_id: str,
    filter: str = "",
    as_of_time: Optional[datetime] = None,
    page_size: Optional[int] = None,
) -> int:
    """Write one line per asset matching ``filter`` and return the count."""
    return _report(output, organization_id, filter, as_of_time, page_size=page_size)


def _report(
    output: TextIO,
    organization_id: str,
    filter: str,
    as_of_time: Optional[datetime],
    page_size: Optional[int] = None,
    read_time_required: bool = False,
) -> int:
    try:
        client = make_client()
    except Exception as exc:
        logger.error("Error instantiating client %s", exc)
        if isinstance(exc, ClientInitError):
            raise
        raise ClientInitError(f"Error instantiating client: {exc}") from exc

    with client:
        read_time: Optional[str] = None
        if as_of_time is not None or read_time_required:
            try:
                read_time = to_wire_timestamp(as_of_time)
            except TimestampConversionError as exc:
                logger.error("Error converting %r: %s", as_of_time, exc)
                raise

        request = ListAssetsRequest(
            parent=f"organizations/{organization_id}",
            filter=filter,
            read_time=read_time,
            page_size=page_size,
        )

        assets_found = 0
        results = client.list_assets(request)
        while True:
            try:
                result = next(results)
            except StopIteration:
                break
            except Exception as exc:
                raise IterationError(
                    f"Error listing assets: {exc}", assets_written=assets_found
                ) from exc

            asset = result.asset
            properties = asset.security_center_properties
            output.write(
                ASSET_LINE_FORMAT
                % (asset.name, properties.resource_name, properties.resource_type)
            )
            assets_found += 1

    return assets_found
