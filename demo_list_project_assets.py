# demo_list_project_assets.py
# Version: v1

r"""
Quick smoke test: print all GCP projects in an organization at a point in time.

Run with virtualenv active and env vars loaded:
  export SCC_ACCESS_TOKEN=...        # or SCC_MOCK_MODE=1
  python demo_list_project_assets.py 123456789 2021-01-01T00:00:00Z
"""

import sys
from datetime import datetime, timezone

from scc_inventory_mcp.assets import list_all_project_assets_at_time
from scc_inventory_mcp.errors import SecurityCenterError
from scc_inventory_mcp.timestamps import parse_wire_timestamp


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python demo_list_project_assets.py ORG_ID [READ_TIME]")
        return 2

    org_id = sys.argv[1]
    as_of = (
        parse_wire_timestamp(sys.argv[2])
        if len(sys.argv) > 2
        else datetime.now(timezone.utc)
    )

    try:
        count = list_all_project_assets_at_time(sys.stdout, org_id, as_of)
    except SecurityCenterError as exc:
        print(f"Listing failed (count={exc.count}): {exc}")
        return 1

    print(f"Projects found: {count}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
