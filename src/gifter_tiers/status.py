"""Gifter status computation: tier, level, progress, and locked-tier gating.

Everything is recomputed from lifetime coins on every call. Bad spend input
never raises; it degrades to the first tier at level 1 with zero progress.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from gifter_tiers.levels import boundaries_for_tier, diamond_level, locate_level
from gifter_tiers.tiers import GIFTER_TIERS, TierDefinition, get_tier_by_key, get_unbounded_tier

# Mythic level 40 reveals the hidden tiers to non-admin, non-diamond viewers
REVEAL_TIER_KEY = "mythic"
REVEAL_LEVEL = 40
LOCKED_REASON = "Reach Mythic level 40 to reveal the hidden tiers."

# Ledger counters are signed 64-bit; larger inputs are clamped to this
MAX_LIFETIME_COINS = 2**63 - 1


@dataclass(frozen=True)
class ViewerContext:
    is_admin: bool = False


@dataclass(frozen=True)
class Progression:
    """Numeric progress of a lifetime spend through the tier table."""

    tier: TierDefinition
    level: int  # global level across all tiers
    level_in_tier: int
    lifetime_coins: int
    level_start_coins: int
    next_level_coins: int | None
    progress_pct: float  # 0.0 to 1.0

    @property
    def is_diamond(self) -> bool:
        return self.tier.is_unbounded


@dataclass(frozen=True)
class Gating:
    show_locked_tiers: bool
    locked_reason: str | None


@dataclass(frozen=True)
class GifterStatus:
    tier_key: str
    tier_name: str
    tier_order: int
    tier_color: str
    tier_icon: str
    is_diamond: bool
    tier_level_max: int | None
    level: int
    level_in_tier: int
    lifetime_coins: int
    tier_start_coins: int
    tier_end_coins: int | None
    level_start_coins: int
    next_level_coins: int | None
    coins_to_next_level: int | None
    progress_pct: float
    show_locked_tiers: bool
    locked_reason: str | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def normalize_coins(raw: object) -> int:
    """Clamp any spend value to a non-negative whole number of coins.

    None, NaN, infinities, negatives and non-numeric values all become 0.
    Values above MAX_LIFETIME_COINS are clamped to it.
    """
    if isinstance(raw, int):
        return max(0, min(raw, MAX_LIFETIME_COINS))
    try:
        value = float(raw)
    except (TypeError, ValueError, OverflowError):
        return 0
    if not math.isfinite(value) or value <= 0:
        return 0
    return min(math.floor(value), MAX_LIFETIME_COINS)


def select_tier(coins: int, tiers: tuple[TierDefinition, ...] = GIFTER_TIERS) -> TierDefinition:
    """First tier whose [start, end) holds coins; the unbounded tier otherwise."""
    for tier in tiers:
        if not tier.is_unbounded and tier.contains(coins):
            return tier
    return get_unbounded_tier(tiers)


def _levels_before(tier: TierDefinition, tiers: tuple[TierDefinition, ...]) -> int:
    return sum(t.level_count or 0 for t in tiers if t.order < tier.order)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def compute_progression(
    lifetime_coins_raw: object, tiers: tuple[TierDefinition, ...] = GIFTER_TIERS
) -> Progression:
    """Tier, level and progress for a lifetime spend, independent of who is looking."""
    lifetime = normalize_coins(lifetime_coins_raw)
    tier = select_tier(lifetime, tiers)

    if tier.is_unbounded:
        level_in_tier, level_start, next_level = diamond_level(
            lifetime, tier.start, tier.base_cost, tier.growth_factor
        )
    else:
        boundaries = boundaries_for_tier(tier)
        level_in_tier = locate_level(lifetime, boundaries)
        level_start = boundaries[level_in_tier - 1]
        next_level = boundaries[level_in_tier]

    progress = 0.0
    if next_level is not None:
        denom = next_level - level_start
        if denom > 0:
            progress = _clamp01((lifetime - level_start) / denom)

    return Progression(
        tier=tier,
        level=_levels_before(tier, tiers) + level_in_tier,
        level_in_tier=level_in_tier,
        lifetime_coins=lifetime,
        level_start_coins=level_start,
        next_level_coins=next_level,
        progress_pct=progress,
    )


def reached_reveal_threshold(lifetime_coins: int, tiers: tuple[TierDefinition, ...] = GIFTER_TIERS) -> bool:
    """True once lifetime coins sit at Mythic level 40 or above (within Mythic only)."""
    tier = get_tier_by_key(REVEAL_TIER_KEY, tiers)
    if tier is None or tier.is_unbounded or not tier.contains(lifetime_coins):
        return False
    return locate_level(lifetime_coins, boundaries_for_tier(tier)) >= REVEAL_LEVEL


def _is_admin(viewer: ViewerContext | Mapping[str, Any] | None) -> bool:
    if viewer is None:
        return False
    if isinstance(viewer, Mapping):
        flag = viewer.get("is_admin", viewer.get("isAdmin"))
    else:
        flag = getattr(viewer, "is_admin", False)
    return flag is True


def compute_gating(
    progression: Progression,
    viewer: ViewerContext | Mapping[str, Any] | None = None,
    tiers: tuple[TierDefinition, ...] = GIFTER_TIERS,
) -> Gating:
    """Decide whether locked tier details may be shown to this viewer."""
    show = (
        _is_admin(viewer)
        or progression.is_diamond
        or reached_reveal_threshold(progression.lifetime_coins, tiers)
    )
    return Gating(show_locked_tiers=show, locked_reason=None if show else LOCKED_REASON)


def compute_gifter_status(
    lifetime_coins_raw: object,
    viewer: ViewerContext | Mapping[str, Any] | None = None,
    tiers: tuple[TierDefinition, ...] = GIFTER_TIERS,
) -> GifterStatus:
    """Full gifter status for a lifetime spend as seen by `viewer`."""
    progression = compute_progression(lifetime_coins_raw, tiers)
    gating = compute_gating(progression, viewer, tiers)
    tier = progression.tier
    next_level = progression.next_level_coins
    return GifterStatus(
        tier_key=tier.key,
        tier_name=tier.name,
        tier_order=tier.order,
        tier_color=tier.color,
        tier_icon=tier.icon,
        is_diamond=progression.is_diamond,
        tier_level_max=tier.level_count,
        level=progression.level,
        level_in_tier=progression.level_in_tier,
        lifetime_coins=progression.lifetime_coins,
        tier_start_coins=tier.start,
        tier_end_coins=tier.end,
        level_start_coins=progression.level_start_coins,
        next_level_coins=next_level,
        coins_to_next_level=None if next_level is None else next_level - progression.lifetime_coins,
        progress_pct=progression.progress_pct,
        show_locked_tiers=gating.show_locked_tiers,
        locked_reason=gating.locked_reason,
    )
