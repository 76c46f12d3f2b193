"""
Status Effects - damage-over-time and debuffs the player can put on a boss.

Effect kinds:
- burn:   3 turns, ticks for 3% of boss max hp
- poison: 5 turns, ticks for 2% of boss max hp
- slow:   2 turns, no tick damage, boss attack x0.7 while active

At most one effect of each kind is active. Re-applying a kind throws the old
instance away and installs the new one: durations and damage never stack.

Tick order (once per round, when control returns to the player):
1. Sum tick damage of every active burn/poison
2. Subtract once from boss hp, floor at 0
3. Decrement every effect's remaining turns, drop those reaching 0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EffectKind(Enum):
    """Effect kinds the tracker knows about."""
    BURN = "burn"
    POISON = "poison"
    SLOW = "slow"


# Kind -> (duration, fraction of boss max hp dealt per tick)
EFFECT_DATA: Dict[EffectKind, Dict[str, float]] = {
    EffectKind.BURN: {"duration": 3, "tick_fraction": 0.03},
    EffectKind.POISON: {"duration": 5, "tick_fraction": 0.02},
    EffectKind.SLOW: {"duration": 2, "tick_fraction": 0.0},
}

SLOW_ATTACK_MULT = 0.7
NORMAL_ATTACK_MULT = 1.0


@dataclass
class StatusEffect:
    """One active effect on the boss."""
    kind: EffectKind
    remaining_turns: int
    tick_damage: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "remaining_turns": self.remaining_turns,
            "tick_damage": self.tick_damage,
        }


@dataclass
class TickResult:
    """Outcome of one turn-boundary tick."""
    damage: int
    boss_hp: int
    expired: List[EffectKind] = field(default_factory=list)


def create_effect(kind: EffectKind, boss_max_hp: int) -> StatusEffect:
    """Build a fresh effect instance sized to the boss."""
    data = EFFECT_DATA[kind]
    return StatusEffect(
        kind=kind,
        remaining_turns=int(data["duration"]),
        tick_damage=int(data["tick_fraction"] * boss_max_hp),
    )


@dataclass
class StatusEffectTracker:
    """
    Manages all effects on the boss.
    Handles replacement, ticking and the slow attack modifier.
    """
    effects: Dict[EffectKind, StatusEffect] = field(default_factory=dict)

    def apply(self, kind: EffectKind, boss_max_hp: int) -> StatusEffect:
        """Install an effect, replacing any active instance of the same kind."""
        effect = create_effect(kind, boss_max_hp)
        self.effects[kind] = effect
        return effect

    def get(self, kind: EffectKind) -> Optional[StatusEffect]:
        return self.effects.get(kind)

    def has(self, kind: EffectKind) -> bool:
        return kind in self.effects

    def active(self) -> List[StatusEffect]:
        """Active effects in a stable kind order."""
        return [self.effects[k] for k in EffectKind if k in self.effects]

    @property
    def attack_modifier(self) -> float:
        """Boss attack multiplier implied by the active effects."""
        if self.has(EffectKind.SLOW):
            return SLOW_ATTACK_MULT
        return NORMAL_ATTACK_MULT

    def tick(self, boss_hp: int) -> TickResult:
        """Deal summed DOT damage once, then age and expire effects."""
        damage = sum(e.tick_damage for e in self.effects.values()
                     if e.kind in (EffectKind.BURN, EffectKind.POISON))
        new_hp = max(0, boss_hp - damage)

        expired = []
        for kind in list(self.effects):
            effect = self.effects[kind]
            effect.remaining_turns -= 1
            if effect.remaining_turns <= 0:
                del self.effects[kind]
                expired.append(kind)

        return TickResult(damage=boss_hp - new_hp, boss_hp=new_hp, expired=expired)


__all__ = [
    "EffectKind",
    "StatusEffect",
    "StatusEffectTracker",
    "TickResult",
    "EFFECT_DATA",
    "SLOW_ATTACK_MULT",
    "create_effect",
]
