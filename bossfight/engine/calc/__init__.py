"""
Calculation utilities for boss fights.

Contains:
- Damage calculation (pure functions, rolls come from the passed-in rng)
"""

from .damage import (
    DamageResult,
    resolve_damage,
    boss_hit_damage,
    elemental_bonus,
    lifesteal_heal,
    apply_hp_loss,
    apply_heal,
    # Constants
    VARIANCE_MIN,
    VARIANCE_MAX,
    BOSS_MIN_HIT,
    DEFAULT_MIN_DAMAGE,
    ELEMENT_MULT,
)
