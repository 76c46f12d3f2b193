"""Content definitions - status effects the player can inflict on a boss."""

from .effects import (
    EffectKind,
    StatusEffect,
    StatusEffectTracker,
    TickResult,
    create_effect,
    EFFECT_DATA,
    SLOW_ATTACK_MULT,
)
