"""Generation module - victory rewards."""

from .rewards import (
    RewardStack,
    RewardBundle,
    generate_boss_rewards,
    boss_experience,
    boss_gold,
    boss_gem_name,
)
