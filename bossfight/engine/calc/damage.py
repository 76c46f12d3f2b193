"""
Damage Calculator - Single source of truth for boss-fight damage and healing.

Design principles:
1. Pure functions - no state beyond the rolls taken from the passed-in rng
2. Rolls are always taken in the same order, so a seed replays exactly
3. Floor to int at the end, never in the middle

Player hit order:
1. Base = max(1, attack - defense / 2)
2. Variance roll: x Uniform(0.9, 1.1)
3. Crit roll: x (1 + critDamage / 100) on crit
4. Flat elemental bonus
5. Floor to int, then clamp to the minimum damage floor

Boss hit order:
1. Effective attack = floor(attack x attack modifier)
2. max(5, effective - defense / 2)
3. Variance roll: x Uniform(0.9, 1.1)
4. Floor to int
"""

from dataclasses import dataclass

from ..state.combat import Element

__all__ = [
    "DamageResult",
    "resolve_damage",
    "boss_hit_damage",
    "elemental_bonus",
    "lifesteal_heal",
    "apply_hp_loss",
    "apply_heal",
    # Constants
    "VARIANCE_MIN",
    "VARIANCE_MAX",
    "BOSS_MIN_HIT",
    "DEFAULT_MIN_DAMAGE",
    "ELEMENT_MULT",
]


# =============================================================================
# CONSTANTS
# =============================================================================

VARIANCE_MIN = 0.9
VARIANCE_MAX = 1.1

# Boss hits never drop below this before variance
BOSS_MIN_HIT = 5

# Floor applied to player hits after flooring (0 disables it)
DEFAULT_MIN_DAMAGE = 1

# Elemental bonus = raw elemental stat x multiplier
ELEMENT_MULT = {
    Element.FIRE: 1.5,
    Element.ICE: 1.3,
    Element.LIGHTNING: 2.0,
    Element.POISON: 1.0,
}


@dataclass(frozen=True)
class DamageResult:
    """Outcome of one player hit."""
    amount: int
    is_crit: bool


# =============================================================================
# OUTGOING DAMAGE (player -> boss)
# =============================================================================

def resolve_damage(
    attack: float,
    defense: float,
    rng,
    crit_chance: float = 0,
    crit_damage: float = 0,
    elemental_bonus: float = 0,
    min_damage: int = DEFAULT_MIN_DAMAGE,
) -> DamageResult:
    """
    Calculate a player hit against the boss.

    Args:
        attack: Attacker's attack stat
        defense: Defender's defense stat (halved)
        rng: Random source (variance then crit are drawn, always both)
        crit_chance: Crit chance in percent
        crit_damage: Extra crit damage in percent (50 = x1.5)
        elemental_bonus: Flat bonus added after the crit multiplier
        min_damage: Lowest amount returned; 0 keeps the raw floored value

    Returns:
        DamageResult with amount >= 0
    """
    base = max(1.0, attack - defense / 2)

    variance = rng.random_float_range(VARIANCE_MIN, VARIANCE_MAX)
    raw = base * variance

    is_crit = rng.random_boolean_chance(crit_chance / 100)
    if is_crit:
        raw *= 1 + crit_damage / 100

    raw += elemental_bonus

    amount = max(min_damage, int(raw))
    return DamageResult(amount=amount, is_crit=is_crit)


def elemental_bonus(element: Element, stat: float) -> float:
    """Flat bonus for an elemental attack, from the raw elemental stat."""
    return stat * ELEMENT_MULT[element]


# =============================================================================
# INCOMING DAMAGE (boss -> player)
# =============================================================================

def boss_hit_damage(
    boss_attack: int,
    attack_modifier: float,
    player_defense: float,
    rng,
) -> int:
    """
    Calculate the boss's hit before dodge and defend are considered.

    Args:
        boss_attack: Boss base attack
        attack_modifier: 1.0 normally, lower while slowed
        player_defense: Player defense (halved)
        rng: Random source (one variance roll)

    Returns:
        Damage as int
    """
    effective_attack = int(boss_attack * attack_modifier)
    damage = max(BOSS_MIN_HIT, effective_attack - player_defense / 2)
    damage *= rng.random_float_range(VARIANCE_MIN, VARIANCE_MAX)
    return int(damage)


# =============================================================================
# HP HELPERS
# =============================================================================

def lifesteal_heal(damage: int, life_steal: float) -> int:
    """Healing granted for dealing `damage` with `life_steal` percent."""
    if life_steal <= 0:
        return 0
    return int(damage * life_steal / 100)


def apply_hp_loss(hp: int, amount: int) -> int:
    """New hp after losing `amount`, floored at 0."""
    return max(0, hp - max(0, amount))


def apply_heal(hp: int, max_hp: int, amount: int) -> int:
    """New hp after healing `amount`, clamped to max_hp."""
    return min(max_hp, hp + max(0, amount))
