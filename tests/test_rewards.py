"""
Reward Generation Tests

Tests victory payouts: fixed experience/gold, item quantity ranges, the
level-gated gem and the socket drill chance.
"""

import pytest

from bossfight.engine.generation.rewards import (
    generate_boss_rewards, boss_experience, boss_gold, boss_gem_name,
    ENHANCEMENT_STONE, REFINING_STONE, SOCKET_DRILL, IRON_GEM, WOODEN_GEM,
    IRON_GEM_LEVEL,
)
from bossfight.engine.state.rng import Random
from tests.conftest import FixedRandom


class TestFixedPayout:
    """Experience and gold scale linearly with level."""

    @pytest.mark.parametrize("level,xp,gold", [
        (1, 450, 300),
        (5, 2250, 1500),
        (12, 5400, 3600),
    ])
    def test_experience_and_gold(self, level, xp, gold):
        assert boss_experience(level) == xp
        assert boss_gold(level) == gold
        rewards = generate_boss_rewards(level, FixedRandom())
        assert rewards.experience == xp
        assert rewards.gold == gold

    def test_gem_by_level(self):
        assert boss_gem_name(IRON_GEM_LEVEL - 1) == WOODEN_GEM
        assert boss_gem_name(IRON_GEM_LEVEL) == IRON_GEM
        assert boss_gem_name(30) == IRON_GEM

    def test_exactly_one_gem(self):
        rewards = generate_boss_rewards(15, Random(3))
        assert len(rewards.gems) == 1
        assert rewards.gems[0].name == IRON_GEM
        assert rewards.gems[0].quantity == 1


class TestRolls:
    """Item quantities and the drill come from the reward stream."""

    def test_draw_order(self):
        rng = FixedRandom()
        generate_boss_rewards(5, rng)
        assert rng.calls == ["int_range", "int_range", "chance"]

    def test_scripted_quantities(self):
        rewards = generate_boss_rewards(5, FixedRandom(ints=[3, 2], roll=0.1))
        assert rewards.item_quantity(ENHANCEMENT_STONE) == 3
        assert rewards.item_quantity(REFINING_STONE) == 2
        assert rewards.item_quantity(SOCKET_DRILL) == 1

    def test_no_drill_above_chance(self):
        rewards = generate_boss_rewards(5, FixedRandom(roll=0.3))
        assert rewards.item_quantity(SOCKET_DRILL) == 0
        assert [s.name for s in rewards.items] == [ENHANCEMENT_STONE, REFINING_STONE]

    def test_seeded_ranges(self):
        rng = Random(2024)
        drills = 0
        for _ in range(500):
            rewards = generate_boss_rewards(8, rng)
            assert 1 <= rewards.item_quantity(ENHANCEMENT_STONE) <= 3
            assert 1 <= rewards.item_quantity(REFINING_STONE) <= 2
            drills += rewards.item_quantity(SOCKET_DRILL)
        # 30% of 500, loosely
        assert 100 < drills < 200

    def test_deterministic(self):
        assert generate_boss_rewards(9, Random(77)) == generate_boss_rewards(9, Random(77))


class TestBundle:

    def test_to_dict(self):
        rewards = generate_boss_rewards(10, FixedRandom(ints=[2, 1], roll=0.9))
        assert rewards.to_dict() == {
            "experience": 4500,
            "gold": 3000,
            "items": [
                {"name": ENHANCEMENT_STONE, "quantity": 2},
                {"name": REFINING_STONE, "quantity": 1},
            ],
            "gems": [{"name": IRON_GEM, "quantity": 1}],
        }

    def test_immutable(self):
        rewards = generate_boss_rewards(1, FixedRandom())
        with pytest.raises(AttributeError):
            rewards.gold = 0
