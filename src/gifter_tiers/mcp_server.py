"""MCP server for gifter-tiers.

Exposes the gifter status computation as MCP tools.
Run via: python3 -m gifter_tiers.mcp_server
"""
from __future__ import annotations

from typing import Any

from mcp.server.fastmcp import FastMCP

from gifter_tiers.config import load_tier_table
from gifter_tiers.status import ViewerContext, compute_gifter_status

mcp = FastMCP(name="gifter-tiers")


@mcp.tool()
def get_gifter_status(lifetime_coins: float, is_admin: bool = False) -> dict[str, Any]:
    """Get tier, level, progress and locked-tier gating for a lifetime coin spend."""
    status = compute_gifter_status(lifetime_coins, ViewerContext(is_admin=is_admin), load_tier_table())
    return status.to_dict()


@mcp.tool()
def list_tiers(lifetime_coins: float = 0, is_admin: bool = False) -> dict[str, Any]:
    """List the tiers visible to a viewer with the given spend. Hidden tiers are masked."""
    from gifter_tiers.tiers import get_visible_tiers, tier_coin_range, tier_level_range

    tiers = load_tier_table()
    status = compute_gifter_status(lifetime_coins, ViewerContext(is_admin=is_admin), tiers)
    result = []
    for tier in get_visible_tiers(status.tier_key, status.show_locked_tiers, tiers):
        if tier.order > status.tier_order and not status.show_locked_tiers:
            result.append({"order": tier.order, "locked": True})
            continue
        result.append({
            "order": tier.order, "key": tier.key, "name": tier.name,
            "icon": tier.icon, "color": tier.color, "locked": tier.order > status.tier_order,
            "levels": tier_level_range(tier), "coins": tier_coin_range(tier),
            "start": tier.start, "end": tier.end,
        })
    return {"tiers": result, "current_tier": status.tier_key,
            "show_locked_tiers": status.show_locked_tiers, "locked_reason": status.locked_reason}


@mcp.tool()
def get_tier_levels(tier_key: str, count: int = 10) -> dict[str, Any]:
    """Get level start thresholds for a tier (first `count` levels for Diamond)."""
    from gifter_tiers.levels import boundaries_for_tier, diamond_thresholds
    from gifter_tiers.tiers import get_tier_by_key

    tiers = load_tier_table()
    tier = get_tier_by_key(tier_key, tiers)
    if tier is None:
        valid = ", ".join(t.key for t in tiers)
        return {"error": f"Unknown tier. Must be one of: {valid}"}
    if tier.is_unbounded:
        rows = diamond_thresholds(tier, max(1, count))
    else:
        rows = [(i + 1, b) for i, b in enumerate(boundaries_for_tier(tier)[:-1])]
    return {
        "tier_key": tier.key,
        "levels": [{"level": lv, "start_coins": start} for lv, start in rows],
        "tier_end_coins": tier.end,
    }


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
