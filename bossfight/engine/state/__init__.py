"""
State module - battle state and RNG.

Contains:
- RNG system (XorShift128, counted Random, per-battle streams)
- Combat state, stat blocks and action types
"""

# RNG System
from .rng import XorShift128, Random, BattleRNG, seed_to_long

# Combat State
from .combat import (
    CombatState,
    PlayerStats,
    BossStats,
    TurnOwner,
    Terminal,
    Element,
    NormalAttack,
    Defend,
    ElementalAttack,
    BossTurn,
    PlayerAction,
    Action,
    create_player,
    create_boss,
    create_combat,
)

__all__ = [
    # RNG
    "XorShift128",
    "Random",
    "BattleRNG",
    "seed_to_long",
    # Combat
    "CombatState",
    "PlayerStats",
    "BossStats",
    "TurnOwner",
    "Terminal",
    "Element",
    "NormalAttack",
    "Defend",
    "ElementalAttack",
    "BossTurn",
    "PlayerAction",
    "Action",
    "create_player",
    "create_boss",
    "create_combat",
]
