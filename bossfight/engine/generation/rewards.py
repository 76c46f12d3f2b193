"""
Boss reward generation.

Called once, when a boss fight reaches Victory:
- Experience: boss level x 150 x 3
- Gold: boss level x 100 x 3
- Guaranteed items: Enhancement Stone (1-3), Refining Stone (1-2)
- One gem: Iron Gem at level 10+, Wooden Gem below
- 30% chance of one Socket Drill

All rolls come from the reward stream passed in, in this order:
Enhancement Stone quantity, Refining Stone quantity, Socket Drill chance.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


# ============================================================================
# CONSTANTS
# ============================================================================

XP_PER_LEVEL = 150
GOLD_PER_LEVEL = 100
BOSS_REWARD_MULT = 3

ENHANCEMENT_STONE = "Enhancement Stone"
REFINING_STONE = "Refining Stone"
SOCKET_DRILL = "Socket Drill"
IRON_GEM = "Iron Gem"
WOODEN_GEM = "Wooden Gem"

ENHANCEMENT_STONE_RANGE = (1, 3)
REFINING_STONE_RANGE = (1, 2)

# Level at which the gem upgrades from wood to iron
IRON_GEM_LEVEL = 10

SOCKET_DRILL_CHANCE = 0.30


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass(frozen=True)
class RewardStack:
    """A named item or gem with a quantity."""
    name: str
    quantity: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity}


@dataclass(frozen=True)
class RewardBundle:
    """Victory payout. Immutable once created."""
    experience: int
    gold: int
    items: Tuple[RewardStack, ...] = ()
    gems: Tuple[RewardStack, ...] = ()

    def item_quantity(self, name: str) -> int:
        """Total quantity of a named item or gem (0 if absent)."""
        return sum(s.quantity for s in self.items + self.gems if s.name == name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "experience": self.experience,
            "gold": self.gold,
            "items": [s.to_dict() for s in self.items],
            "gems": [s.to_dict() for s in self.gems],
        }


# ============================================================================
# GENERATION
# ============================================================================

def boss_experience(boss_level: int) -> int:
    return boss_level * XP_PER_LEVEL * BOSS_REWARD_MULT


def boss_gold(boss_level: int) -> int:
    return boss_level * GOLD_PER_LEVEL * BOSS_REWARD_MULT


def boss_gem_name(boss_level: int) -> str:
    return IRON_GEM if boss_level >= IRON_GEM_LEVEL else WOODEN_GEM


def generate_boss_rewards(boss_level: int, rng) -> RewardBundle:
    """
    Generate the reward bundle for defeating a boss.

    Args:
        boss_level: Boss level from the dungeon configuration
        rng: Reward stream (three rolls are taken)

    Returns:
        RewardBundle
    """
    items = [
        RewardStack(ENHANCEMENT_STONE, rng.random_int_range(*ENHANCEMENT_STONE_RANGE)),
        RewardStack(REFINING_STONE, rng.random_int_range(*REFINING_STONE_RANGE)),
    ]

    if rng.random_boolean_chance(SOCKET_DRILL_CHANCE):
        items.append(RewardStack(SOCKET_DRILL, 1))

    gems = (RewardStack(boss_gem_name(boss_level), 1),)

    return RewardBundle(
        experience=boss_experience(boss_level),
        gold=boss_gold(boss_level),
        items=tuple(items),
        gems=gems,
    )
