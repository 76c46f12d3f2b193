"""
Shared pytest fixtures for the boss-fight test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- A fixed-roll random double for exact formula checks
- Player and boss stat blocks
- Started engines
"""

import os
import sys
from collections import deque

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from bossfight.engine.combat_engine import CombatEngine
from bossfight.engine.config import EngineConfig
from bossfight.engine.state.combat import create_boss, create_combat, create_player
from bossfight.engine.state.rng import Random


# =============================================================================
# RNG Fixtures
# =============================================================================


class FixedRandom:
    """
    Random double with scripted rolls.

    - random_float_range() returns `variance` (clamped into the range)
    - random_boolean_chance(chance) is `roll < chance`
    - random_int_range() pops from `ints`, falling back to `start`

    Every call is counted like the real Random.
    """

    def __init__(self, variance=1.0, roll=0.5, ints=()):
        self.variance = variance
        self.roll = roll
        self.ints = deque(ints)
        self.counter = 0
        self.calls = []

    def random_float_range(self, start, end):
        self.counter += 1
        self.calls.append("float_range")
        return min(max(self.variance, start), end)

    def random_boolean_chance(self, chance):
        self.counter += 1
        self.calls.append("chance")
        return self.roll < chance

    def random_int_range(self, start, end):
        self.counter += 1
        self.calls.append("int_range")
        if self.ints:
            return self.ints.popleft()
        return start


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def rng_seed_12345():
    """RNG initialized with seed 12345 for deterministic tests."""
    return Random(12345)


@pytest.fixture
def fixed_rng():
    """Variance 1.0, never crits, never dodges at 0%."""
    return FixedRandom()


# =============================================================================
# Combatant Fixtures
# =============================================================================


@pytest.fixture
def player_basic():
    """Plain player, no elements, no percent stats."""
    return create_player(hp=100, max_hp=100, attack=30, defense=10)


@pytest.fixture
def player_elemental():
    """Player with every element enabled."""
    return create_player(
        hp=100, max_hp=100, attack=30, defense=10,
        fire_attack=10, ice_attack=10, lightning_attack=10, poison_attack=10,
    )


@pytest.fixture
def boss_basic():
    """Level 5 boss, 1000 hp so fights do not end by accident."""
    return create_boss(name="Slime King", level=5, max_hp=1000, attack=40, defense=20)


# =============================================================================
# Engine Fixtures
# =============================================================================


def make_engine(player, boss, rng=None, reward_rng=None, config=None, on_complete=None, start=True):
    """Build a CombatEngine around the given stat blocks."""
    engine = CombatEngine(
        create_combat(player, boss, dungeon_name="Mossy Hollow"),
        rng=rng or FixedRandom(),
        reward_rng=reward_rng or FixedRandom(),
        config=config or EngineConfig(),
        on_complete=on_complete,
    )
    if start:
        engine.start_combat()
    return engine


@pytest.fixture
def engine_basic(player_basic, boss_basic):
    """Started engine with fixed rolls."""
    return make_engine(player_basic, boss_basic)


@pytest.fixture
def completions():
    """Recorder for on_complete calls: list of (success, final_hp, rewards)."""
    calls = []

    def record(success, final_hp, rewards):
        calls.append((success, final_hp, rewards))

    record.calls = calls
    return record
