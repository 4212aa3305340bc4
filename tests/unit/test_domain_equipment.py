"""Unit tests for equipment arithmetic."""

from dataclasses import dataclass

import pytest
from hypothesis import given
from hypothesis import strategies as st

from marcoland.domain.equipment import (
    build_combat_stats,
    calculate_speed_modifier,
    can_equip,
    sell_back_refund,
)
from marcoland.domain.rules_config import CombatStatRules, RulesConfig, TradeRules


@dataclass
class _Item:
    slot_type: str
    damage_min: int = 0
    damage_max: int = 0
    protection: int = 0
    encumbrance: int = 0
    strength_required: int = 0


class TestSellBackRefund:
    @pytest.mark.parametrize(
        ("cost", "refund"),
        [(100, 50), (101, 50), (1, 0), (0, 0), (10000, 5000)],
    )
    def test_half_price_rounded_down(self, cost, refund):
        assert sell_back_refund(cost) == refund

    def test_negative_cost_rejected(self):
        with pytest.raises(ValueError, match="negative"):
            sell_back_refund(-1)

    def test_custom_rate(self):
        rules = RulesConfig(trade=TradeRules(sell_back_numerator=3, sell_back_denominator=4))
        assert sell_back_refund(101, rules) == 75


class TestSpeedModifier:
    def test_no_encumbrance_is_full_speed(self):
        assert calculate_speed_modifier(50, 0) == 1.0

    def test_linear_falloff(self):
        assert calculate_speed_modifier(100, 30) == pytest.approx(0.85)
        assert calculate_speed_modifier(75, 45) == pytest.approx(0.7)

    def test_floor_when_encumbrance_reaches_speed(self):
        assert calculate_speed_modifier(20, 20) == 0.5
        assert calculate_speed_modifier(20, 90) == 0.5

    def test_custom_bounds(self):
        rules = RulesConfig(combat=CombatStatRules(min_speed_modifier=0.25))
        assert calculate_speed_modifier(10, 10, rules) == 0.25


class TestCanEquip:
    def test_strength_requirement(self):
        assert can_equip(10, 10)
        assert not can_equip(9, 10)

    def test_encumbrance_limit(self):
        assert can_equip(10, 0, current_encumbrance=6, item_encumbrance=4)
        assert not can_equip(10, 0, current_encumbrance=7, item_encumbrance=4)


class TestCombatStats:
    def test_empty_loadout(self):
        stats = build_combat_stats([], speed=10)
        assert stats.total_protection == 0
        assert stats.total_encumbrance == 0
        assert stats.speed_modifier == 1.0
        assert (stats.weapon_damage_min, stats.weapon_damage_max) == (0, 0)

    def test_aggregates_armor_and_weapon(self):
        equipped = [
            _Item("weapon", damage_min=3, damage_max=8),
            _Item("head", protection=3, encumbrance=3),
            _Item("body", protection=6, encumbrance=8),
        ]
        stats = build_combat_stats(equipped, speed=22)

        assert stats.total_protection == 9
        assert stats.total_encumbrance == 11
        assert stats.speed_modifier == pytest.approx(0.75)
        assert (stats.weapon_damage_min, stats.weapon_damage_max) == (3, 8)
        assert stats.to_dict()["total_protection"] == 9


class TestProperties:
    @given(cost=st.integers(min_value=0, max_value=10_000_000))
    def test_refund_never_exceeds_half(self, cost):
        refund = sell_back_refund(cost)
        assert 0 <= refund <= cost
        assert refund * 2 in (cost, cost - 1)

    @given(
        speed=st.integers(min_value=1, max_value=500),
        encumbrance=st.integers(min_value=0, max_value=1000),
    )
    def test_speed_modifier_bounded(self, speed, encumbrance):
        modifier = calculate_speed_modifier(speed, encumbrance)
        assert 0.5 <= modifier <= 1.0

    @given(
        speed=st.integers(min_value=1, max_value=500),
        encumbrance=st.integers(min_value=0, max_value=499),
    )
    def test_speed_modifier_monotonic(self, speed, encumbrance):
        assert calculate_speed_modifier(speed, encumbrance + 1) <= calculate_speed_modifier(
            speed, encumbrance
        )
