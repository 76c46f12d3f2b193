"""
Boss-fight engine

Turn-based boss combat for a cozy dungeon RPG: one player against one boss,
resolved as a deterministic state machine over a seedable RNG.

Core subsystems:
- state: RNG (XorShift128), stat blocks, combat state, action types
- content: Status effects (burn, poison, slow)
- calc: Damage, healing and hp formulas
- generation: Victory rewards
- combat_engine: The turn state machine
- session / scheduler: Pacing, try-lock, presentation sinks

Usage:
    from bossfight.engine import create_boss_fight, create_player, create_boss, NormalAttack, BossTurn

    engine = create_boss_fight(create_player(100, 100, 20, 5),
                               create_boss("Slime King", 5, 300, 25, 10), seed=42)
    engine.apply_action(NormalAttack())
    engine.apply_action(BossTurn())
"""

# RNG System
from .state.rng import XorShift128, Random, BattleRNG, seed_to_long

# Combat State
from .state.combat import (
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
    create_player,
    create_boss,
    create_combat,
)

# Damage Calculation
from .calc.damage import resolve_damage, boss_hit_damage, DamageResult

# Status Effects
from .content.effects import EffectKind, StatusEffect, StatusEffectTracker

# Rewards
from .generation.rewards import RewardBundle, RewardStack, generate_boss_rewards

# Events
from .events import (
    LogLine,
    FloatingValue,
    Miss,
    EffectApplied,
    EffectExpired,
    BattleEnded,
    CombatLog,
    event_to_dict,
)

# Configuration
from .config import EngineConfig, load_config

# Combat Engine
from .combat_engine import (
    CombatEngine,
    CombatPhase,
    CombatResult,
    StateDelta,
    create_boss_fight,
    parse_action,
)

# Pacing
from .scheduler import TurnScheduler, ScheduledTask
from .session import BossFightSession

__all__ = [
    # RNG
    "XorShift128", "Random", "BattleRNG", "seed_to_long",
    # State
    "CombatState", "PlayerStats", "BossStats", "TurnOwner", "Terminal", "Element",
    "NormalAttack", "Defend", "ElementalAttack", "BossTurn",
    "create_player", "create_boss", "create_combat",
    # Calc
    "resolve_damage", "boss_hit_damage", "DamageResult",
    # Effects
    "EffectKind", "StatusEffect", "StatusEffectTracker",
    # Rewards
    "RewardBundle", "RewardStack", "generate_boss_rewards",
    # Events
    "LogLine", "FloatingValue", "Miss", "EffectApplied", "EffectExpired", "BattleEnded",
    "CombatLog", "event_to_dict",
    # Config
    "EngineConfig", "load_config",
    # Engine
    "CombatEngine", "CombatPhase", "CombatResult", "StateDelta", "create_boss_fight", "parse_action",
    # Pacing
    "TurnScheduler", "ScheduledTask", "BossFightSession",
]
