"""
Damage Calculation Tests

Tests the hit formulas with scripted rolls.
Verifies order of operations, floors and clamps.
"""

import pytest

from bossfight.engine.calc.damage import (
    resolve_damage, boss_hit_damage, elemental_bonus,
    lifesteal_heal, apply_hp_loss, apply_heal,
    VARIANCE_MIN, VARIANCE_MAX, BOSS_MIN_HIT, ELEMENT_MULT,
)
from bossfight.engine.content.effects import SLOW_ATTACK_MULT
from bossfight.engine.state.combat import Element
from bossfight.engine.state.rng import Random
from tests.conftest import FixedRandom


class TestPlayerHit:
    """Test the outgoing damage formula."""

    def test_base_minus_half_defense(self):
        """30 attack vs 20 defense = 20 at variance 1.0."""
        result = resolve_damage(30, 20, FixedRandom())
        assert result.amount == 20
        assert not result.is_crit

    def test_variance_scales_base(self):
        assert resolve_damage(30, 20, FixedRandom(variance=1.1)).amount == 22
        assert resolve_damage(30, 20, FixedRandom(variance=0.9)).amount == 18

    def test_crit_multiplies(self):
        """Crit with 50% crit damage = x1.5."""
        result = resolve_damage(30, 20, FixedRandom(roll=0.0), crit_chance=5, crit_damage=50)
        assert result.is_crit
        assert result.amount == 30

    def test_zero_crit_chance_never_crits(self):
        result = resolve_damage(30, 20, FixedRandom(roll=0.0), crit_chance=0, crit_damage=500)
        assert not result.is_crit
        assert result.amount == 20

    def test_elemental_bonus_added_after_crit(self):
        """(20 x 1.5) + 15 = 45, bonus is not multiplied by the crit."""
        bonus = elemental_bonus(Element.FIRE, 10)
        result = resolve_damage(30, 20, FixedRandom(roll=0.0), crit_chance=100,
                                crit_damage=50, elemental_bonus=bonus)
        assert result.amount == 45

    def test_variance_then_crit_roll_order(self):
        rng = FixedRandom()
        resolve_damage(30, 20, rng, crit_chance=10)
        assert rng.calls == ["float_range", "chance"]

    def test_crit_roll_taken_even_at_zero_chance(self):
        rng = FixedRandom()
        resolve_damage(30, 20, rng)
        assert rng.counter == 2


class TestDamageFloor:
    """Test the minimum-damage clamp."""

    def test_base_never_below_one(self):
        """Attack far below defense still has base 1."""
        result = resolve_damage(5, 100, FixedRandom(variance=1.1))
        assert result.amount == 1

    def test_floor_lifts_zero_to_one(self):
        """base 1 x 0.9 floors to 0, then the floor makes it 1."""
        assert resolve_damage(5, 100, FixedRandom(variance=0.9)).amount == 1

    def test_floor_disabled(self):
        assert resolve_damage(5, 100, FixedRandom(variance=0.9), min_damage=0).amount == 0

    def test_never_negative(self):
        for seed in range(50):
            assert resolve_damage(1, 10_000, Random(seed), min_damage=0).amount >= 0


class TestElementalBonus:
    """Test elemental multipliers."""

    @pytest.mark.parametrize("element,mult", [
        (Element.FIRE, 1.5),
        (Element.ICE, 1.3),
        (Element.LIGHTNING, 2.0),
        (Element.POISON, 1.0),
    ])
    def test_multipliers(self, element, mult):
        assert ELEMENT_MULT[element] == mult
        assert elemental_bonus(element, 10) == pytest.approx(10 * mult)

    def test_zero_stat_zero_bonus(self):
        assert elemental_bonus(Element.LIGHTNING, 0) == 0


class TestBossHit:
    """Test the incoming damage formula."""

    def test_basic(self):
        """40 attack vs 10 defense = 35."""
        assert boss_hit_damage(40, 1.0, 10, FixedRandom()) == 35

    def test_minimum_hit(self):
        """Weak boss vs tanky player still hits for 5 before variance."""
        assert boss_hit_damage(10, 1.0, 100, FixedRandom()) == BOSS_MIN_HIT
        assert boss_hit_damage(10, 1.0, 100, FixedRandom(variance=0.9)) == 4

    def test_slow_modifier_floors_attack_first(self):
        expected = int(int(100 * SLOW_ATTACK_MULT) - 10 / 2)
        assert boss_hit_damage(100, SLOW_ATTACK_MULT, 10, FixedRandom()) == expected
        assert expected < boss_hit_damage(100, 1.0, 10, FixedRandom())

    def test_single_variance_roll(self):
        rng = FixedRandom()
        boss_hit_damage(40, 1.0, 10, rng)
        assert rng.calls == ["float_range"]

    def test_seeded_range(self):
        """Variance keeps a 35 hit within [31, 38]."""
        rng = Random(7)
        for _ in range(200):
            dmg = boss_hit_damage(40, 1.0, 10, rng)
            assert int(35 * VARIANCE_MIN) <= dmg <= int(35 * VARIANCE_MAX)


class TestHpHelpers:
    """Test clamps on hp changes."""

    def test_lifesteal(self):
        assert lifesteal_heal(20, 10) == 2
        assert lifesteal_heal(5, 10) == 0
        assert lifesteal_heal(100, 0) == 0

    def test_hp_loss_floors_at_zero(self):
        assert apply_hp_loss(10, 15) == 0
        assert apply_hp_loss(10, 3) == 7

    def test_hp_loss_ignores_negative(self):
        assert apply_hp_loss(10, -5) == 10

    def test_heal_clamps_to_max(self):
        assert apply_heal(95, 100, 10) == 100
        assert apply_heal(50, 100, 10) == 60
