"""Gifter tier table and tier lookups. Pure data, no side effects.

Tiers are ordered by lifetime coins gifted. Every tier except the last one
covers a bounded range split into a fixed number of levels; the last tier
(Diamond) has no upper bound and generates its levels on demand.

    Starter      0          -> 60,000
    Supporter    60,000     -> 300,000
    Contributor  300,000    -> 900,000
    Elite        900,000    -> 2,400,000
    Patron       2,400,000  -> 6,000,000
    Power        6,000,000  -> 15,000,000
    VIP          15,000,000 -> 30,000,000
    Legend       30,000,000 -> 45,000,000
    Mythic       45,000,000 -> 60,000,000
    Diamond      60,000,000 -> no cap
"""

from __future__ import annotations

import math
from dataclasses import dataclass

LEVELS_PER_TIER = 50
BOUNDED_GROWTH = 1.1
DIAMOND_GROWTH = 1.45
DIAMOND_BASE_COST = 3_000_000


class GifterTierError(Exception):
    """Base error for gifter tier configuration problems."""


class TierTableError(GifterTierError, ValueError):
    """Raised when a tier table breaks the contiguity or shape rules."""


@dataclass(frozen=True)
class TierDefinition:
    key: str
    name: str
    order: int
    start: int
    end: int | None  # exclusive; None = no cap
    growth_factor: float
    level_count: int | None  # None = unlimited levels
    color: str = "#9CA3AF"
    icon: str = ""
    base_cost: int | None = None  # coin cost of level 1, unbounded tier only

    @property
    def is_unbounded(self) -> bool:
        return self.end is None

    def contains(self, coins: int) -> bool:
        """True if coins falls in [start, end)."""
        if coins < self.start:
            return False
        return self.end is None or coins < self.end


GIFTER_TIERS: tuple[TierDefinition, ...] = (
    TierDefinition("starter", "Starter", 1, 0, 60_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#9CA3AF", "\U0001f331"),
    TierDefinition("supporter", "Supporter", 2, 60_000, 300_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#CD7F32", "\U0001f91d"),
    TierDefinition("contributor", "Contributor", 3, 300_000, 900_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#C0C0C0", "\u2b50"),
    TierDefinition("elite", "Elite", 4, 900_000, 2_400_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#D4AF37", "\U0001f451"),
    TierDefinition("patron", "Patron", 5, 2_400_000, 6_000_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#22C55E", "\U0001f3c6"),
    TierDefinition("power", "Power", 6, 6_000_000, 15_000_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#3B82F6", "\u26a1"),
    TierDefinition("vip", "VIP", 7, 15_000_000, 30_000_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#EF4444", "\U0001f525"),
    TierDefinition("legend", "Legend", 8, 30_000_000, 45_000_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#A855F7", "\U0001f31f"),
    TierDefinition("mythic", "Mythic", 9, 45_000_000, 60_000_000,
                   BOUNDED_GROWTH, LEVELS_PER_TIER, "#111827", "\U0001f52e"),
    # Diamond level 1 begins at exactly 60,000,000 coins
    TierDefinition("diamond", "Diamond", 10, 60_000_000, None,
                   DIAMOND_GROWTH, None, "#22D3EE", "\U0001f48e",
                   base_cost=DIAMOND_BASE_COST),
)


def get_tier_by_key(key: str, tiers: tuple[TierDefinition, ...] = GIFTER_TIERS) -> TierDefinition | None:
    for tier in tiers:
        if tier.key == key:
            return tier
    return None


def get_tier_by_order(order: int, tiers: tuple[TierDefinition, ...] = GIFTER_TIERS) -> TierDefinition | None:
    for tier in tiers:
        if tier.order == order:
            return tier
    return None


def get_unbounded_tier(tiers: tuple[TierDefinition, ...] = GIFTER_TIERS) -> TierDefinition:
    """Return the terminal tier with no upper bound."""
    for tier in tiers:
        if tier.is_unbounded:
            return tier
    raise TierTableError("tier table has no unbounded tier")


DIAMOND_UNLOCK_COINS: int = get_unbounded_tier().start


def get_visible_tiers(
    current_tier_key: str,
    show_locked_tiers: bool,
    tiers: tuple[TierDefinition, ...] = GIFTER_TIERS,
) -> list[TierDefinition]:
    """Tiers a viewer may see.

    Unlocked viewers see everything. Everyone else sees the tiers up to and
    including their current one, plus a single preview of the next tier.
    An unknown tier key shows only the first tier.
    """
    if show_locked_tiers:
        return list(tiers)
    current = get_tier_by_key(current_tier_key, tiers)
    if current is None:
        return list(tiers[:1])
    return [t for t in tiers if t.order <= current.order + 1]


def format_coin_amount(coins: int) -> str:
    """Compact coin amount: 60000000 -> '60.0M', 60000 -> '60K', 950 -> '950'."""
    if coins >= 1_000_000:
        return f"{coins / 1_000_000:.1f}M"
    if coins >= 1_000:
        return f"{coins / 1_000:.0f}K"
    return f"{coins:,}"


def tier_level_range(tier: TierDefinition) -> str:
    if tier.level_count is None:
        return "1+"
    return f"1-{tier.level_count}"


def tier_coin_range(tier: TierDefinition) -> str:
    low = format_coin_amount(tier.start)
    if tier.end is None:
        return f"{low}+"
    return f"{low} - {format_coin_amount(tier.end)}"


def validate_tier_table(tiers: tuple[TierDefinition, ...]) -> None:
    """Raise TierTableError unless tiers form a contiguous table ending in one unbounded tier."""
    if not tiers:
        raise TierTableError("tier table is empty")
    if tiers[0].start != 0:
        raise TierTableError(f"first tier must start at 0, got {tiers[0].start}")

    seen: set[str] = set()
    for i, tier in enumerate(tiers):
        if tier.key in seen:
            raise TierTableError(f"duplicate tier key: {tier.key!r}")
        seen.add(tier.key)
        if tier.order != i + 1:
            raise TierTableError(f"{tier.key}: order must be {i + 1}, got {tier.order}")
        if not (math.isfinite(tier.growth_factor) and tier.growth_factor > 1):
            raise TierTableError(f"{tier.key}: growth_factor must be a finite number > 1")

        is_last = i == len(tiers) - 1
        if tier.is_unbounded:
            if not is_last:
                raise TierTableError(f"{tier.key}: only the last tier may be unbounded")
            if tier.base_cost is None or tier.base_cost <= 0:
                raise TierTableError(f"{tier.key}: unbounded tier needs a positive base_cost")
            # consecutive costs must differ by more than a coin to stay distinct once rounded
            if not tier.base_cost * (tier.growth_factor - 1) > 1:
                raise TierTableError(
                    f"{tier.key}: base_cost * (growth_factor - 1) must exceed 1 coin"
                )
            continue

        if is_last:
            raise TierTableError("last tier must be unbounded")
        if tier.end <= tier.start:
            raise TierTableError(f"{tier.key}: end must be greater than start")
        if tier.level_count is None or tier.level_count < 1:
            raise TierTableError(f"{tier.key}: level_count must be >= 1")
        if tiers[i + 1].start != tier.end:
            raise TierTableError(
                f"{tier.key} ends at {tier.end} but {tiers[i + 1].key} starts at {tiers[i + 1].start}"
            )
