"""Level math within a tier. Pure functions, no side effects."""

from __future__ import annotations

import math
from bisect import bisect_right
from functools import lru_cache

from gifter_tiers.tiers import TierDefinition


@lru_cache(maxsize=128)
def tier_boundaries(start: int, end: int, growth_factor: float, level_count: int) -> tuple[int, ...]:
    """Split [start, end) into level_count levels of geometrically growing width.

    Returns level_count + 1 boundaries; level i (1-indexed) spans
    [b[i-1], b[i]). The first boundary is always start and the last is
    always end: the final level absorbs whatever floor() left over.
    """
    if level_count < 1:
        raise ValueError(f"level_count must be >= 1, got {level_count}")
    if end <= start:
        raise ValueError(f"end ({end}) must be greater than start ({start})")

    span = end - start
    # scaled so the widest level weighs 1; large level counts cannot overflow
    weights = [growth_factor ** (i - (level_count - 1)) for i in range(level_count)]
    sum_w = sum(weights)

    boundaries = [start]
    allotted = 0
    for w in weights[:-1]:
        inc = math.floor(span * w / sum_w)
        allotted += inc
        boundaries.append(boundaries[-1] + inc)
    boundaries.append(boundaries[-1] + (span - allotted))

    for i in range(1, len(boundaries)):
        if boundaries[i] < boundaries[i - 1]:
            boundaries[i] = boundaries[i - 1]
    return tuple(boundaries)


def boundaries_for_tier(tier: TierDefinition) -> tuple[int, ...]:
    """Level boundaries of a bounded tier."""
    if tier.end is None or tier.level_count is None:
        raise ValueError(f"{tier.key} is unbounded and has no boundary table")
    return tier_boundaries(tier.start, tier.end, tier.growth_factor, tier.level_count)


def locate_level(coins: int, boundaries: tuple[int, ...]) -> int:
    """1-indexed level whose [start, next) range holds coins, clamped to [1, level_count]."""
    level_count = len(boundaries) - 1
    # bisect_right skips past zero-width levels sharing a boundary
    level = bisect_right(boundaries, coins)
    return max(1, min(level, level_count))


def diamond_step_cost(step: int, base_cost: int, growth_factor: float) -> int:
    """Coins needed to clear diamond level `step` (1-indexed), rounded to whole coins."""
    return max(1, round(base_cost * growth_factor ** (step - 1)))


def diamond_level(
    coins: int, unlock_coins: int, base_cost: int, growth_factor: float
) -> tuple[int, int, int]:
    """Return (level, level_start_coins, next_level_coins) in the unbounded tier.

    Level 1 begins exactly at unlock_coins. Each further level costs
    growth_factor times more than the previous one, so the loop runs a
    logarithmic number of times in coins.
    """
    level = 1
    level_start = unlock_coins
    next_level = unlock_coins + diamond_step_cost(1, base_cost, growth_factor)
    while coins >= next_level:
        level += 1
        level_start = next_level
        next_level += diamond_step_cost(level, base_cost, growth_factor)
    return level, level_start, next_level


def diamond_thresholds(tier: TierDefinition, count: int) -> list[tuple[int, int]]:
    """First `count` diamond levels as (level, start_coins) pairs."""
    result: list[tuple[int, int]] = []
    start = tier.start
    for level in range(1, count + 1):
        result.append((level, start))
        start += diamond_step_cost(level, tier.base_cost, tier.growth_factor)
    return result
