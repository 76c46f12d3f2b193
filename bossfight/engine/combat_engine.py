"""
Combat Engine - turn-based boss-fight state machine.

This module resolves one boss fight:
1. Turn flow (player action -> boss reply -> status tick -> next player turn)
2. Player actions: normal attack, defend, elemental attacks
3. Boss reply with slow modifier, dodge and defend
4. Status effects on the boss (burn, poison, slow)
5. Victory/Defeat, entered exactly once, with rewards on victory

Design principles:
- Pure in-memory simulation: no timers, no I/O, no rendering
- Every roll comes from the injected rng, so a seed replays a whole fight
- Invalid or late input is a silent no-op, never an exception
- Observable effects are returned as structured events

Usage:
    from bossfight.engine.combat_engine import create_boss_fight

    engine = create_boss_fight(player, boss, seed=42, on_complete=handle_result)

    while not engine.is_combat_over():
        action = engine.get_legal_actions()[0]
        delta, events = engine.apply_action(action)

    result = engine.get_result()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .calc.damage import (
    apply_heal,
    apply_hp_loss,
    boss_hit_damage,
    elemental_bonus,
    lifesteal_heal,
    resolve_damage,
)
from .config import EngineConfig
from .content.effects import EffectKind
from .events import (
    COLOR_CRIT,
    COLOR_DAMAGE,
    COLOR_DOT,
    COLOR_HEAL,
    COLOR_MISS,
    COLOR_PLAYER_HURT,
    ELEMENT_COLORS,
    POSITION_BOSS,
    POSITION_PLAYER,
    BattleEnded,
    CombatEvent,
    EffectApplied,
    EffectExpired,
    FloatingValue,
    LogLine,
    Miss,
)
from .generation.rewards import RewardBundle, generate_boss_rewards
from .state.combat import (
    Action,
    BossStats,
    BossTurn,
    CombatState,
    Defend,
    Element,
    ElementalAttack,
    NormalAttack,
    PlayerStats,
    Terminal,
    TurnOwner,
    create_combat,
)
from .state.rng import BattleRNG, Random


logger = logging.getLogger("BossFight")

CompletionCallback = Callable[[bool, int, Optional[RewardBundle]], None]

# Element -> status effect it installs (lightning installs none)
ELEMENT_EFFECTS = {
    Element.FIRE: EffectKind.BURN,
    Element.ICE: EffectKind.SLOW,
    Element.POISON: EffectKind.POISON,
}

EFFECT_VERBS = {
    EffectKind.BURN: "is burning",
    EffectKind.SLOW: "is slowed",
    EffectKind.POISON: "is poisoned",
}


# =============================================================================
# COMBAT PHASE
# =============================================================================

class CombatPhase(Enum):
    """Current phase of combat."""
    NOT_STARTED = "NOT_STARTED"
    PLAYER_TURN = "PLAYER_TURN"
    BOSS_TURN = "BOSS_TURN"
    VICTORY = "VICTORY"
    DEFEAT = "DEFEAT"


# =============================================================================
# STATE DELTA / RESULT
# =============================================================================

@dataclass
class StateDelta:
    """What one apply_action() call changed."""
    accepted: bool
    action: str = ""
    reason: str = ""
    player_hp_change: int = 0
    boss_hp_change: int = 0
    turn_owner: Optional[TurnOwner] = None
    terminal: Terminal = Terminal.NONE
    effects_applied: List[str] = field(default_factory=list)
    effects_expired: List[str] = field(default_factory=list)

    @property
    def ended_battle(self) -> bool:
        return self.accepted and self.terminal != Terminal.NONE


@dataclass
class CombatResult:
    """Result of a completed boss fight."""
    victory: bool
    hp_remaining: int
    hp_lost: int
    turns: int
    damage_dealt: int
    damage_taken: int
    dot_damage: int = 0
    healed: int = 0
    crits: int = 0
    dodges: int = 0
    rewards: Optional[RewardBundle] = None


# =============================================================================
# COMBAT ENGINE
# =============================================================================

class CombatEngine:
    """
    Boss-fight state machine.

    PlayerTurn -> BossTurn -> PlayerTurn -> ... -> Victory | Defeat

    Victory and Defeat are absorbing: once reached, every apply_action()
    is a no-op and on_complete has fired exactly once.
    """

    def __init__(
        self,
        state: CombatState,
        rng: Optional[Random] = None,
        reward_rng: Optional[Random] = None,
        config: Optional[EngineConfig] = None,
        on_complete: Optional[CompletionCallback] = None,
    ):
        """
        Initialize combat engine.

        Args:
            state: Initial combat state
            rng: Stream for variance, crit and dodge rolls (seed 0 when omitted)
            reward_rng: Stream for victory rewards. Defaults to a stream seeded
                REWARD_SEED_OFFSET past rng.seed, as BattleRNG pairs them
            config: Engine tunables
            on_complete: Called once with (success, final_player_hp, rewards)
        """
        self.state = state
        if rng is None:
            streams = BattleRNG(seed=0)
        else:
            streams = BattleRNG(seed=getattr(rng, "seed", 0), combat_rng=rng)
        self.rng = streams.combat_rng
        self.reward_rng = reward_rng or streams.reward_rng
        self.config = config or EngineConfig()
        self.on_complete = on_complete

        self.started = False
        self.rewards: Optional[RewardBundle] = None
        self.history: List[CombatEvent] = []
        self.initial_hp = state.player_hp
        self._completed = False

    # =========================================================================
    # Core State Access
    # =========================================================================

    @property
    def phase(self) -> CombatPhase:
        if self.state.terminal == Terminal.VICTORY:
            return CombatPhase.VICTORY
        if self.state.terminal == Terminal.DEFEAT:
            return CombatPhase.DEFEAT
        if not self.started:
            return CombatPhase.NOT_STARTED
        if self.state.turn_owner == TurnOwner.PLAYER:
            return CombatPhase.PLAYER_TURN
        return CombatPhase.BOSS_TURN

    def is_combat_over(self) -> bool:
        return self.state.combat_over

    def is_victory(self) -> bool:
        return self.state.player_won

    def is_defeat(self) -> bool:
        return self.state.terminal == Terminal.DEFEAT

    @property
    def completed(self) -> bool:
        """True once on_complete has been delivered."""
        return self._completed

    # =========================================================================
    # Combat Flow
    # =========================================================================

    def start_combat(self) -> List[CombatEvent]:
        """
        Open the battle.

        A battle that begins with either side at 0 hp ends here, before any
        action is taken.
        """
        if self.started:
            return []
        self.started = True

        events: List[CombatEvent] = [LogLine(f"Battle begins against {self.state.boss.name}!")]
        logger.debug("boss fight started: %s (lv %d) hp=%d, player hp=%d",
                     self.state.boss.name, self.state.boss.level,
                     self.state.boss_hp, self.state.player_hp)
        self._check_combat_end(events)

        self.history.extend(events)
        return events

    def get_legal_actions(self) -> List[Action]:
        """Actions apply_action() would accept right now."""
        if not self.started or self.state.combat_over:
            return []

        if self.state.turn_owner == TurnOwner.BOSS:
            return [BossTurn()]

        if self.state.action_locked:
            return []

        actions: List[Action] = [NormalAttack(), Defend()]
        for element in Element:
            if self.state.player.has_element(element):
                actions.append(ElementalAttack(element))
        return actions

    def apply_action(self, action: Action) -> Tuple[StateDelta, List[CombatEvent]]:
        """
        Resolve one event against the state machine.

        Player actions are accepted only on the player's turn while no other
        action is in flight; BossTurn only on the boss's turn. Anything else,
        and everything after the battle has ended, is rejected without
        touching state.

        Returns:
            (delta, events) - events is empty for a rejected action
        """
        name = type(action).__name__
        reason = self._rejection_reason(action)
        if reason:
            logger.debug("ignored %s: %s", name, reason)
            return StateDelta(accepted=False, action=name, reason=reason,
                              turn_owner=self.state.turn_owner,
                              terminal=self.state.terminal), []

        player_hp_before = self.state.player_hp
        boss_hp_before = self.state.boss_hp
        delta = StateDelta(accepted=True, action=name)
        events: List[CombatEvent] = []

        if isinstance(action, BossTurn):
            self._resolve_boss_turn(events, delta)
        else:
            # Held until the boss reply resolves (or the battle ends)
            self.state.action_locked = True
            if isinstance(action, NormalAttack):
                self._resolve_normal_attack(events)
            elif isinstance(action, Defend):
                self._resolve_defend(events)
            else:
                self._resolve_elemental_attack(action.element, events, delta)

            if not self.state.combat_over:
                self.state.turn_owner = TurnOwner.BOSS

        delta.player_hp_change = self.state.player_hp - player_hp_before
        delta.boss_hp_change = self.state.boss_hp - boss_hp_before
        delta.turn_owner = self.state.turn_owner
        delta.terminal = self.state.terminal

        logger.debug("resolved %s: player %d->%d, boss %d->%d",
                     name, player_hp_before, self.state.player_hp,
                     boss_hp_before, self.state.boss_hp)

        self.history.extend(events)
        return delta, events

    def _rejection_reason(self, action: Action) -> str:
        if not self.started:
            return "combat not started"
        if self.state.combat_over:
            return "combat over"
        if isinstance(action, BossTurn):
            if self.state.turn_owner != TurnOwner.BOSS:
                return "not the boss's turn"
            return ""
        if not isinstance(action, (NormalAttack, Defend, ElementalAttack)):
            return "unknown action"
        if self.state.turn_owner != TurnOwner.PLAYER:
            return "not the player's turn"
        if self.state.action_locked:
            return "action in flight"
        if isinstance(action, ElementalAttack) and not self.state.player.has_element(action.element):
            return f"{action.element.value} attack unavailable"
        return ""

    # =========================================================================
    # Player Actions
    # =========================================================================

    def _resolve_normal_attack(self, events: List[CombatEvent]):
        player = self.state.player
        result = resolve_damage(
            player.attack,
            self.state.boss.defense,
            self.rng,
            crit_chance=player.crit_chance,
            crit_damage=player.crit_damage,
            min_damage=self.config.min_damage,
        )
        dealt = self._deal_damage_to_boss(result.amount, result.is_crit,
                                          COLOR_CRIT if result.is_crit else COLOR_DAMAGE, events)
        prefix = "Critical hit! " if result.is_crit else ""
        events.append(LogLine(f"{prefix}You dealt {dealt} damage!"))

        self._apply_lifesteal(dealt, events)
        self._check_combat_end(events)

    def _resolve_defend(self, events: List[CombatEvent]):
        self.state.is_defending = True
        events.append(LogLine("You brace for impact!"))

    def _resolve_elemental_attack(self, element: Element, events: List[CombatEvent], delta: StateDelta):
        player = self.state.player
        bonus = elemental_bonus(element, player.elemental_stat(element))
        result = resolve_damage(
            player.attack,
            self.state.boss.defense,
            self.rng,
            crit_chance=player.crit_chance,
            crit_damage=player.crit_damage,
            elemental_bonus=bonus,
            min_damage=self.config.min_damage,
        )
        # Lightning always shows as a crit; the damage itself is not multiplied
        shown_crit = result.is_crit or element == Element.LIGHTNING
        if result.is_crit:
            self.state.crits += 1
        dealt = self._deal_damage_to_boss(result.amount, shown_crit,
                                          ELEMENT_COLORS[element.value], events, count_crit=False)
        events.append(LogLine(f"{element.value.capitalize()} attack dealt {dealt} damage!"))

        if self.config.lifesteal_on_elemental:
            self._apply_lifesteal(dealt, events)

        if self._check_combat_end(events):
            return

        kind = ELEMENT_EFFECTS.get(element)
        if kind is not None:
            effect = self.state.effects.apply(kind, self.state.boss.max_hp)
            self.state.boss_attack_modifier = self.state.effects.attack_modifier
            delta.effects_applied.append(kind.value)
            events.append(EffectApplied(kind.value, effect.remaining_turns, effect.tick_damage))
            events.append(LogLine(f"{self.state.boss.name} {EFFECT_VERBS[kind]}!"))

    def _deal_damage_to_boss(self, amount: int, is_crit: bool, color: str,
                             events: List[CombatEvent], count_crit: bool = True) -> int:
        """Apply a hit to the boss. Returns hp actually removed."""
        before = self.state.boss_hp
        self.state.boss_hp = apply_hp_loss(before, amount)
        dealt = before - self.state.boss_hp
        self.state.total_damage_dealt += dealt
        if is_crit and count_crit:
            self.state.crits += 1
        events.append(FloatingValue(amount=dealt, position=POSITION_BOSS, color=color, is_crit=is_crit))
        return dealt

    def _apply_lifesteal(self, damage: int, events: List[CombatEvent]):
        heal = lifesteal_heal(damage, self.state.player.life_steal)
        if heal <= 0:
            return
        before = self.state.player_hp
        self.state.player_hp = apply_heal(before, self.state.player.max_hp, heal)
        healed = self.state.player_hp - before
        if healed <= 0:
            return
        self.state.total_healed += healed
        events.append(FloatingValue(amount=healed, position=POSITION_PLAYER, color=COLOR_HEAL))
        events.append(LogLine(f"You healed {healed} HP."))

    # =========================================================================
    # Boss Turn
    # =========================================================================

    def _resolve_boss_turn(self, events: List[CombatEvent], delta: StateDelta):
        """Boss hit, then the end-of-round status tick, then back to the player."""
        state = self.state
        boss_name = state.boss.name

        damage = boss_hit_damage(state.boss.attack, state.boss_attack_modifier,
                                 state.player.defense, self.rng)
        dodged = self.rng.random_boolean_chance(state.player.dodge_chance / 100)

        if dodged:
            damage = 0
            state.dodges += 1
            events.append(Miss(target=POSITION_PLAYER))
            events.append(FloatingValue(amount=0, position=POSITION_PLAYER, color=COLOR_MISS, label="MISS"))
            events.append(LogLine(f"You dodged {boss_name}'s attack!"))
        else:
            blocked = state.is_defending
            if blocked:
                damage //= 2
            before = state.player_hp
            state.player_hp = apply_hp_loss(before, damage)
            state.total_damage_taken += before - state.player_hp
            events.append(FloatingValue(amount=damage, position=POSITION_PLAYER, color=COLOR_PLAYER_HURT))
            suffix = " (blocked half)" if blocked else ""
            events.append(LogLine(f"{boss_name} dealt {damage} damage!{suffix}"))

        state.is_defending = False

        if not self._check_combat_end(events):
            self._tick_effects(events, delta)

        state.action_locked = False
        if not state.combat_over:
            state.turn_owner = TurnOwner.PLAYER
            state.turn += 1

    def _tick_effects(self, events: List[CombatEvent], delta: StateDelta):
        state = self.state
        if not state.effects.active():
            return

        tick = state.effects.tick(state.boss_hp)
        state.boss_hp = tick.boss_hp
        state.boss_attack_modifier = state.effects.attack_modifier

        if tick.damage > 0:
            state.total_damage_dealt += tick.damage
            state.total_dot_damage += tick.damage
            events.append(FloatingValue(amount=tick.damage, position=POSITION_BOSS, color=COLOR_DOT))
            events.append(LogLine(f"{state.boss.name} took {tick.damage} damage from effects."))

        for kind in tick.expired:
            delta.effects_expired.append(kind.value)
            events.append(EffectExpired(kind.value))
            events.append(LogLine(f"{kind.value.capitalize()} wore off."))

        self._check_combat_end(events)

    # =========================================================================
    # Termination
    # =========================================================================

    def _check_combat_end(self, events: List[CombatEvent]) -> bool:
        """Check if combat should end. Returns True if it has ended."""
        if self.state.combat_over:
            return True
        if self.state.boss_hp <= 0:
            self._end_combat(True, events)
            return True
        if self.state.player_hp <= 0:
            self._end_combat(False, events)
            return True
        return False

    def _end_combat(self, victory: bool, events: List[CombatEvent]):
        """Enter Victory or Defeat. Only the first call has any effect."""
        if self.state.terminal != Terminal.NONE:
            return

        self.state.terminal = Terminal.VICTORY if victory else Terminal.DEFEAT
        self.state.action_locked = False

        if victory:
            self.rewards = generate_boss_rewards(self.state.boss.level, self.reward_rng)
            final_hp = self.state.player_hp
            events.append(LogLine(f"Victory! {self.state.boss.name} defeated!"))
        else:
            final_hp = self.config.defeat_final_hp
            events.append(LogLine("Defeated! You have fallen..."))

        events.append(BattleEnded(victory=victory, final_player_hp=final_hp, rewards=self.rewards))
        logger.info("boss fight over: %s vs %s after %d turn(s), player hp %d",
                    "victory" if victory else "defeat", self.state.boss.name,
                    self.state.turn, self.state.player_hp)

        self._completed = True
        if self.on_complete is not None:
            self.on_complete(victory, final_hp, self.rewards)

    # =========================================================================
    # Results
    # =========================================================================

    def get_result(self) -> CombatResult:
        """Get the combat result (meaningful once the battle is over)."""
        return CombatResult(
            victory=self.is_victory(),
            hp_remaining=self.state.player_hp,
            hp_lost=max(0, self.initial_hp - self.state.player_hp),
            turns=self.state.turn,
            damage_dealt=self.state.total_damage_dealt,
            damage_taken=self.state.total_damage_taken,
            dot_damage=self.state.total_dot_damage,
            healed=self.state.total_healed,
            crits=self.state.crits,
            dodges=self.state.dodges,
            rewards=self.rewards,
        )

    def get_state_dict(self) -> Dict[str, Any]:
        """JSON-serializable snapshot for the UI."""
        data = self.state.to_dict()
        data["phase"] = self.phase.value
        data["legal_actions"] = [_action_name(a) for a in self.get_legal_actions()]
        data["rewards"] = self.rewards.to_dict() if self.rewards else None
        data["rng_counter"] = self.rng.counter
        return data


def _action_name(action: Action) -> str:
    if isinstance(action, ElementalAttack):
        return f"elemental:{action.element.value}"
    return {
        NormalAttack: "attack",
        Defend: "defend",
        BossTurn: "boss_turn",
    }[type(action)]


def parse_action(name: str) -> Action:
    """Inverse of the action names used in get_state_dict()."""
    if name.startswith("elemental:"):
        return ElementalAttack(Element(name.split(":", 1)[1]))
    actions = {"attack": NormalAttack(), "defend": Defend(), "boss_turn": BossTurn()}
    if name not in actions:
        raise ValueError(f"unknown action name: {name!r}")
    return actions[name]


# =============================================================================
# FACTORY
# =============================================================================

def create_boss_fight(
    player: PlayerStats,
    boss: BossStats,
    seed: int = 0,
    dungeon_name: str = "",
    config: Optional[EngineConfig] = None,
    on_complete: Optional[CompletionCallback] = None,
    rng: Optional[BattleRNG] = None,
) -> CombatEngine:
    """
    Create and start a boss fight.

    Args:
        player: Player stat bundle (copied, never mutated)
        boss: Boss stat block
        seed: Battle seed used when no rng is given
        dungeon_name: Display name of the dungeon
        config: Engine tunables
        on_complete: Completion callback
        rng: Pre-built streams (overrides seed)

    Returns:
        Started CombatEngine
    """
    streams = rng or BattleRNG(seed=seed)
    state = create_combat(player, boss, dungeon_name=dungeon_name)
    engine = CombatEngine(
        state,
        rng=streams.combat_rng,
        reward_rng=streams.reward_rng,
        config=config,
        on_complete=on_complete,
    )
    engine.start_combat()
    return engine
