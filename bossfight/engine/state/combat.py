"""
Combat State for boss fights.

Holds the player/boss stat blocks, the mutable per-battle state, and the
action types the state machine accepts. Stat blocks are copied in at
battle start so the caller's character profile is never mutated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

from ..content.effects import StatusEffectTracker


# =============================================================================
# Enums
# =============================================================================


class TurnOwner(Enum):
    """Whose turn it is."""
    PLAYER = "player"
    BOSS = "boss"


class Terminal(Enum):
    """Battle outcome. Moves from NONE to VICTORY or DEFEAT exactly once."""
    NONE = "none"
    VICTORY = "victory"
    DEFEAT = "defeat"


class Element(Enum):
    """Elemental attack kinds, keyed by the player stat that enables them."""
    FIRE = "fire"
    ICE = "ice"
    LIGHTNING = "lightning"
    POISON = "poison"


# =============================================================================
# Action Types
# =============================================================================


@dataclass(frozen=True)
class NormalAttack:
    """Plain weapon attack. The only action that triggers lifesteal by default."""

    pass


@dataclass(frozen=True)
class Defend:
    """Halve the next boss hit."""

    pass


@dataclass(frozen=True)
class ElementalAttack:
    """Attack with an elemental bonus; may install a status effect on the boss."""

    element: Element


@dataclass(frozen=True)
class BossTurn:
    """The boss's reply. Driven by the caller once the player's action lands."""

    pass


PlayerAction = Union[NormalAttack, Defend, ElementalAttack]
Action = Union[NormalAttack, Defend, ElementalAttack, BossTurn]


# =============================================================================
# Combatants
# =============================================================================


@dataclass(frozen=True)
class PlayerStats:
    """Fully-resolved player stat bundle. Percent stats are 0-100."""

    hp: int
    max_hp: int
    attack: int
    defense: int
    speed: int = 0
    combat_power: int = 0  # Opaque to the engine, carried for the caller
    fire_attack: int = 0
    ice_attack: int = 0
    lightning_attack: int = 0
    poison_attack: int = 0
    crit_chance: float = 0.0
    crit_damage: float = 0.0
    life_steal: float = 0.0
    dodge_chance: float = 0.0

    def elemental_stat(self, element: Element) -> int:
        """Raw elemental attack value for an element."""
        return {
            Element.FIRE: self.fire_attack,
            Element.ICE: self.ice_attack,
            Element.LIGHTNING: self.lightning_attack,
            Element.POISON: self.poison_attack,
        }[element]

    def has_element(self, element: Element) -> bool:
        return self.elemental_stat(element) > 0


@dataclass(frozen=True)
class BossStats:
    """Boss stat block, supplied fully formed by the dungeon configuration."""

    name: str
    level: int
    max_hp: int
    attack: int
    defense: int
    hp: Optional[int] = None  # Starting hp, defaults to max_hp

    @property
    def starting_hp(self) -> int:
        return self.max_hp if self.hp is None else self.hp


# =============================================================================
# Combat State
# =============================================================================


@dataclass
class CombatState:
    """
    Complete boss-fight state.

    Created once per battle and only mutated by CombatEngine transitions.
    """

    player: PlayerStats
    boss: BossStats
    player_hp: int
    boss_hp: int
    dungeon_name: str = ""
    turn_owner: TurnOwner = TurnOwner.PLAYER
    effects: StatusEffectTracker = field(default_factory=StatusEffectTracker)
    is_defending: bool = False
    boss_attack_modifier: float = 1.0
    terminal: Terminal = Terminal.NONE
    action_locked: bool = False

    # Round counter, starts at 1 and advances when the boss reply resolves
    turn: int = 1

    # Statistics
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    total_dot_damage: int = 0
    total_healed: int = 0
    crits: int = 0
    dodges: int = 0

    @property
    def combat_over(self) -> bool:
        return self.terminal != Terminal.NONE

    @property
    def player_won(self) -> bool:
        return self.terminal == Terminal.VICTORY

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dungeon": self.dungeon_name,
            "turn": self.turn,
            "turn_owner": self.turn_owner.value,
            "terminal": self.terminal.value,
            "action_locked": self.action_locked,
            "is_defending": self.is_defending,
            "player": {
                "hp": self.player_hp,
                "max_hp": self.player.max_hp,
            },
            "boss": {
                "name": self.boss.name,
                "level": self.boss.level,
                "hp": self.boss_hp,
                "max_hp": self.boss.max_hp,
                "attack_modifier": self.boss_attack_modifier,
            },
            "effects": [e.to_dict() for e in self.effects.active()],
        }


# =============================================================================
# Factory Functions
# =============================================================================


def create_player(
    hp: int,
    max_hp: int,
    attack: int,
    defense: int,
    **stats: Any,
) -> PlayerStats:
    """Create a player stat bundle. Extra keyword stats map onto PlayerStats fields."""
    return PlayerStats(hp=hp, max_hp=max_hp, attack=attack, defense=defense, **stats)


def create_boss(
    name: str,
    level: int,
    max_hp: int,
    attack: int,
    defense: int,
    hp: Optional[int] = None,
) -> BossStats:
    """Create a boss stat block."""
    return BossStats(name=name, level=level, max_hp=max_hp, attack=attack, defense=defense, hp=hp)


def create_combat(
    player: PlayerStats,
    boss: BossStats,
    dungeon_name: str = "",
) -> CombatState:
    """
    Create the initial combat state.

    Starting hp values are clamped into [0, max_hp].
    """
    player_hp = max(0, min(player.hp, player.max_hp))
    boss_hp = max(0, min(boss.starting_hp, boss.max_hp))
    return CombatState(
        player=player,
        boss=boss,
        player_hp=player_hp,
        boss_hp=boss_hp,
        dungeon_name=dungeon_name,
    )
