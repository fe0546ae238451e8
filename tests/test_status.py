"""Tests for gifter status computation and locked-tier gating."""

import math
from dataclasses import replace

from gifter_tiers.levels import boundaries_for_tier
from gifter_tiers.status import (
    LOCKED_REASON,
    MAX_LIFETIME_COINS,
    REVEAL_LEVEL,
    ViewerContext,
    compute_gating,
    compute_gifter_status,
    compute_progression,
    normalize_coins,
    reached_reveal_threshold,
    select_tier,
)
from gifter_tiers.tiers import DIAMOND_UNLOCK_COINS, GIFTER_TIERS, get_tier_by_key


def _sample_coins() -> list[int]:
    """Spend values from 0 to 2x the diamond unlock, including every tier and level edge."""
    values = set(range(0, 2 * DIAMOND_UNLOCK_COINS + 1, 104_729))
    edges = [tier.start for tier in GIFTER_TIERS]
    for tier in GIFTER_TIERS[:-1]:
        edges.extend(boundaries_for_tier(tier))
    for edge in edges:
        for coins in (edge - 1, edge, edge + 1):
            if coins >= 0:
                values.add(coins)
    return sorted(values)


class TestNormalizeCoins:
    def test_int_passthrough(self):
        assert normalize_coins(1500) == 1500

    def test_float_floored(self):
        assert normalize_coins(12.9) == 12

    def test_negative(self):
        assert normalize_coins(-5) == 0
        assert normalize_coins(-0.5) == 0

    def test_nan_and_inf(self):
        assert normalize_coins(float("nan")) == 0
        assert normalize_coins(float("inf")) == 0
        assert normalize_coins(float("-inf")) == 0

    def test_none(self):
        assert normalize_coins(None) == 0

    def test_numeric_string(self):
        assert normalize_coins("1500") == 1500

    def test_garbage(self):
        assert normalize_coins("abc") == 0
        assert normalize_coins(object()) == 0

    def test_huge_values_clamped(self):
        assert normalize_coins(10**30) == MAX_LIFETIME_COINS
        assert normalize_coins(1e300) == MAX_LIFETIME_COINS


class TestScenarios:
    def test_zero(self):
        s = compute_gifter_status(0)
        assert s.tier_key == "starter"
        assert s.level_in_tier == 1
        assert s.level_start_coins == 0
        assert s.progress_pct == 0
        assert s.level == 1

    def test_last_starter_coin(self):
        s = compute_gifter_status(59_999)
        assert s.tier_key == "starter"
        assert s.level_in_tier == 50
        assert s.tier_end_coins == 60_000
        assert s.next_level_coins == 60_000
        assert s.coins_to_next_level == 1

    def test_supporter_starts_at_60k(self):
        s = compute_gifter_status(60_000)
        assert s.tier_key == "supporter"
        assert s.level_in_tier == 1
        assert s.level == 51
        assert s.level_start_coins == 60_000

    def test_diamond_unlock(self):
        s = compute_gifter_status(60_000_000)
        assert s.tier_key == "diamond"
        assert s.is_diamond
        assert s.level_in_tier == 1
        assert s.level_start_coins == 60_000_000
        assert s.next_level_coins == 63_000_000
        assert s.tier_level_max is None
        assert s.tier_end_coins is None
        assert s.level == 451

    def test_diamond_level_2(self):
        s = compute_gifter_status(63_000_000)
        assert s.tier_key == "diamond"
        assert s.level_in_tier == 2
        assert s.level_start_coins == 63_000_000

    def test_diamond_progress(self):
        s = compute_gifter_status(61_500_000)
        assert s.progress_pct == 0.5

    def test_bad_input_matches_zero(self):
        zero = compute_gifter_status(0)
        assert compute_gifter_status(-5) == zero
        assert compute_gifter_status(float("nan")) == zero
        assert compute_gifter_status(None) == zero

    def test_admin_always_unlocked(self):
        for coins in (0, 59_999, 30_000_000, 60_000_000, -1, float("nan")):
            s = compute_gifter_status(coins, ViewerContext(is_admin=True))
            assert s.show_locked_tiers is True
            assert s.locked_reason is None


class TestProperties:
    def test_monotonic(self):
        prev = (0, 0)
        for coins in _sample_coins():
            s = compute_gifter_status(coins)
            current = (s.tier_order, s.level_in_tier)
            assert current >= prev, coins
            prev = current

    def test_global_level_monotonic(self):
        prev = 0
        for coins in _sample_coins():
            level = compute_progression(coins).level
            assert level >= prev
            prev = level

    def test_progress_in_range(self):
        for coins in _sample_coins():
            pct = compute_gifter_status(coins).progress_pct
            assert 0.0 <= pct <= 1.0

    def test_exactly_one_tier(self):
        for coins in _sample_coins():
            tier = select_tier(coins)
            assert sum(1 for t in GIFTER_TIERS if t.contains(coins)) == 1
            assert tier.contains(coins)

    def test_each_level_edge_starts_its_level(self):
        for tier in GIFTER_TIERS[:-1]:
            b = boundaries_for_tier(tier)
            for level in range(1, len(b)):
                if b[level - 1] == b[level]:
                    continue
                s = compute_gifter_status(b[level - 1])
                assert (s.tier_key, s.level_in_tier) == (tier.key, level)
                assert s.level_start_coins == b[level - 1]
                assert s.progress_pct == 0.0
                before = compute_gifter_status(b[level] - 1)
                assert before.level_in_tier == level
                assert before.next_level_coins == b[level]

    def test_level_range_holds_coins(self):
        for coins in _sample_coins():
            s = compute_gifter_status(coins)
            assert s.level_start_coins <= coins < s.next_level_coins

    def test_idempotent(self):
        viewer = ViewerContext(is_admin=False)
        for coins in (0, 123_456, 47_000_000, 99_999_999):
            assert compute_gifter_status(coins, viewer) == compute_gifter_status(coins, viewer)

    def test_huge_spend_is_diamond(self):
        s = compute_gifter_status(10**40)
        assert s.is_diamond
        assert s.lifetime_coins == MAX_LIFETIME_COINS
        assert 0.0 <= s.progress_pct <= 1.0


class TestGating:
    def _mythic_level_start(self, level: int) -> int:
        return boundaries_for_tier(get_tier_by_key("mythic"))[level - 1]

    def test_low_tier_locked(self):
        s = compute_gifter_status(1_000)
        assert s.show_locked_tiers is False
        assert s.locked_reason == LOCKED_REASON

    def test_legend_locked(self):
        assert compute_gifter_status(44_999_999).show_locked_tiers is False

    def test_mythic_below_reveal_level(self):
        coins = self._mythic_level_start(REVEAL_LEVEL) - 1
        assert compute_gifter_status(coins).level_in_tier == REVEAL_LEVEL - 1
        assert compute_gifter_status(coins).show_locked_tiers is False

    def test_mythic_at_reveal_level(self):
        coins = self._mythic_level_start(REVEAL_LEVEL)
        s = compute_gifter_status(coins)
        assert s.tier_key == "mythic"
        assert s.level_in_tier == REVEAL_LEVEL
        assert s.show_locked_tiers is True
        assert s.locked_reason is None

    def test_diamond_unlocked(self):
        s = compute_gifter_status(DIAMOND_UNLOCK_COINS)
        assert s.show_locked_tiers is True

    def test_reveal_threshold_only_inside_mythic(self):
        assert reached_reveal_threshold(DIAMOND_UNLOCK_COINS) is False
        assert reached_reveal_threshold(10_000) is False

    def test_reveal_threshold_without_mythic_tier(self):
        tiers = tuple(t for t in GIFTER_TIERS if t.key != "mythic")
        assert reached_reveal_threshold(50_000_000, tiers) is False

    def test_mapping_viewer(self):
        progression = compute_progression(0)
        assert compute_gating(progression, {"is_admin": True}).show_locked_tiers is True
        assert compute_gating(progression, {"isAdmin": True}).show_locked_tiers is True

    def test_admin_flag_must_be_true(self):
        progression = compute_progression(0)
        assert compute_gating(progression, {"is_admin": "yes"}).show_locked_tiers is False
        assert compute_gating(progression, {"is_admin": 1}).show_locked_tiers is False

    def test_no_viewer(self):
        gating = compute_gating(compute_progression(0))
        assert gating.show_locked_tiers is False
        assert gating.locked_reason == LOCKED_REASON


class TestProgression:
    def test_independent_of_viewer(self):
        p = compute_progression(2_500_000)
        assert p.tier.key == "patron"
        assert not p.is_diamond

    def test_progress_fraction(self):
        p = compute_progression(25)
        # starter level 1 spans [0, 51)
        assert p.next_level_coins == 51
        assert math.isclose(p.progress_pct, 25 / 51)


class TestCustomTable:
    def test_custom_table(self):
        tiers = (
            replace(GIFTER_TIERS[0], end=100, level_count=4),
            replace(GIFTER_TIERS[-1], order=2, start=100, base_cost=10),
        )
        s = compute_gifter_status(100, tiers=tiers)
        assert s.tier_key == "diamond"
        assert s.level == 5
        assert s.next_level_coins == 110


class TestUnvalidatedTable:
    def test_infinite_growth_does_not_raise(self):
        tiers = (replace(GIFTER_TIERS[0], growth_factor=float("inf")),) + GIFTER_TIERS[1:]
        s = compute_gifter_status(10, tiers=tiers)
        assert s.tier_key == "starter"
        assert s.level_in_tier == 50
        assert s.next_level_coins == 60_000


class TestToDict:
    def test_snake_case_keys(self):
        data = compute_gifter_status(60_000_000).to_dict()
        for key in (
            "tier_key", "tier_name", "is_diamond", "tier_level_max", "level_in_tier",
            "lifetime_coins", "tier_start_coins", "tier_end_coins", "level_start_coins",
            "next_level_coins", "progress_pct", "show_locked_tiers", "locked_reason",
        ):
            assert key in data
        assert data["tier_end_coins"] is None
