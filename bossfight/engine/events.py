"""
Structured events emitted by the boss-fight engine.

The engine never draws, plays sounds or raises toasts. Every externally
visible effect is one of these records, returned from apply_action() and
forwarded by the session to whichever sinks the caller registered.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Union

from .generation.rewards import RewardBundle


# Screen-position hints for floating numbers
POSITION_PLAYER = "player"
POSITION_BOSS = "boss"

# Floating number colors
COLOR_DAMAGE = "white"
COLOR_CRIT = "orange"
COLOR_PLAYER_HURT = "red"
COLOR_HEAL = "green"
COLOR_MISS = "gray"
COLOR_DOT = "purple"
ELEMENT_COLORS = {
    "fire": "orange-red",
    "ice": "cyan",
    "lightning": "yellow",
    "poison": "lime",
}

DEFAULT_LOG_LIMIT = 5


@dataclass(frozen=True)
class LogLine:
    """One human-readable combat-log line."""
    text: str


@dataclass(frozen=True)
class FloatingValue:
    """A number that pops up over a combatant."""
    amount: int
    position: str
    color: str
    is_crit: bool = False
    label: str = ""


@dataclass(frozen=True)
class Miss:
    """An attack that was dodged."""
    target: str


@dataclass(frozen=True)
class EffectApplied:
    kind: str
    remaining_turns: int
    tick_damage: int


@dataclass(frozen=True)
class EffectExpired:
    kind: str


@dataclass(frozen=True)
class BattleEnded:
    """Terminal transition. Emitted exactly once per battle."""
    victory: bool
    final_player_hp: int
    rewards: Optional[RewardBundle] = None


CombatEvent = Union[LogLine, FloatingValue, Miss, EffectApplied, EffectExpired, BattleEnded]


def event_to_dict(event: CombatEvent) -> Dict[str, Any]:
    """JSON-friendly form of an event, tagged with its type name."""
    data: Dict[str, Any] = {"type": type(event).__name__}
    if isinstance(event, BattleEnded):
        data.update(
            victory=event.victory,
            final_player_hp=event.final_player_hp,
            rewards=event.rewards.to_dict() if event.rewards else None,
        )
    else:
        data.update(vars(event))
    return data


@dataclass
class CombatLog:
    """
    Bounded combat log - keeps only the last `limit` lines.

    Older lines fall off the front as new ones arrive.
    """
    limit: int = DEFAULT_LOG_LIMIT
    _lines: Deque[str] = field(init=False, repr=False)

    def __post_init__(self):
        self._lines = deque(maxlen=self.limit)

    def add(self, text: str) -> None:
        self._lines.append(text)

    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
