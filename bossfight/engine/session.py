"""
Boss-fight session - wires a CombatEngine to pacing and presentation sinks.

The engine resolves rules instantly. The session adds what the battle screen
needs on top:
- a non-blocking try-lock, so a second click during the boss wind-up is ignored
- the boss reply, posted on a TurnScheduler instead of a real timer
- a bounded combat log and callbacks for log lines and floating numbers
- close() for the flee / continue button, and dispose() for teardown

Usage:
    session = BossFightSession.create(player, boss, seed=7,
                                      on_complete=finish, on_close=leave)
    session.submit(NormalAttack())   # resolves now, boss replies in 2000 ms
    session.advance(2000)            # boss reply runs
    session.dispose()                # pending replies never run
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .combat_engine import CombatEngine, CombatResult, CompletionCallback
from .config import EngineConfig
from .events import BattleEnded, CombatEvent, CombatLog, FloatingValue, LogLine
from .scheduler import ScheduledTask, TurnScheduler
from .state.combat import BossStats, BossTurn, CombatState, PlayerAction, PlayerStats, create_combat
from .state.rng import BattleRNG


logger = logging.getLogger("BossFight.Session")

BOSS_REPLY_TASK = "boss_reply"


class BossFightSession:
    """One boss battle as the screen sees it."""

    def __init__(
        self,
        engine: CombatEngine,
        scheduler: Optional[TurnScheduler] = None,
        on_complete: Optional[CompletionCallback] = None,
        on_close: Optional[Callable[[], None]] = None,
        on_log: Optional[Callable[[str], None]] = None,
        on_floating: Optional[Callable[[FloatingValue], None]] = None,
        on_event: Optional[Callable[[CombatEvent], None]] = None,
    ):
        """
        Take ownership of an engine that has not started yet and start it.

        The scheduler is disposed together with the session, so each session
        should get its own.
        """
        if engine.started:
            raise ValueError("session needs an engine that has not started yet")

        self.engine = engine
        self.scheduler = scheduler or TurnScheduler()
        self.config = engine.config
        self.on_close = on_close
        self.on_log = on_log
        self.on_floating = on_floating
        self.on_event = on_event
        if on_complete is not None:
            engine.on_complete = on_complete

        self.combat_log = CombatLog(limit=self.config.log_limit)
        self.disposed = False
        self.closed = False
        self._reply_task: Optional[ScheduledTask] = None

        self._dispatch(engine.start_combat())

    @classmethod
    def create(
        cls,
        player: PlayerStats,
        boss: BossStats,
        seed: int = 0,
        dungeon_name: str = "",
        config: Optional[EngineConfig] = None,
        scheduler: Optional[TurnScheduler] = None,
        **callbacks,
    ) -> BossFightSession:
        """Build the engine from stat blocks and a battle seed, then open the session."""
        streams = BattleRNG(seed=seed)
        engine = CombatEngine(
            create_combat(player, boss, dungeon_name=dungeon_name),
            rng=streams.combat_rng,
            reward_rng=streams.reward_rng,
            config=config,
        )
        return cls(engine, scheduler=scheduler, **callbacks)

    # ── State ────────────────────────────────────────────────────────

    @property
    def state(self) -> CombatState:
        return self.engine.state

    @property
    def log_lines(self) -> List[str]:
        """Most recent combat-log lines, oldest first."""
        return self.combat_log.lines

    @property
    def busy(self) -> bool:
        """True while a player action is waiting on the boss reply."""
        return self._reply_task is not None and not self._reply_task.cancelled

    @property
    def is_over(self) -> bool:
        return self.engine.is_combat_over()

    def result(self) -> CombatResult:
        return self.engine.get_result()

    # ── Input ────────────────────────────────────────────────────────

    def submit(self, action: PlayerAction) -> bool:
        """
        Try to take a player action. Never blocks.

        Returns False, changing nothing, when the session is disposed, a
        previous action is still waiting on the boss, the action is not
        currently legal, or the battle is over.
        """
        if self.disposed or self.busy:
            logger.debug("submit ignored: %s", "disposed" if self.disposed else "busy")
            return False
        if isinstance(action, BossTurn):
            return False

        delta, events = self.engine.apply_action(action)
        if not delta.accepted:
            return False

        self._dispatch(events)
        if not self.engine.is_combat_over():
            self._reply_task = self.scheduler.post_delta(
                self.config.boss_reply_delay_ms, BOSS_REPLY_TASK, self._boss_reply)
        return True

    def _boss_reply(self) -> None:
        self._reply_task = None
        if self.disposed:
            return
        _, events = self.engine.apply_action(BossTurn())
        self._dispatch(events)

    # ── Time ─────────────────────────────────────────────────────────

    def advance(self, delta_ms: float) -> int:
        """Advance virtual time; returns the number of scheduled steps run."""
        return self.scheduler.advance(delta_ms)

    def run_pending(self) -> int:
        """Run every scheduled step now, regardless of pacing."""
        return self.scheduler.run_all()

    # ── Teardown ─────────────────────────────────────────────────────

    def close(self) -> None:
        """Leave the screen (flee, or continue after the battle). Fires on_close once."""
        if self.closed:
            return
        self.closed = True
        if self.on_close is not None:
            self.on_close()
        self.dispose()

    def dispose(self) -> None:
        """Cancel every pending step. Nothing scheduled runs afterwards."""
        if self.disposed:
            return
        self.disposed = True
        cancelled = self.scheduler.cancel_all()
        self._reply_task = None
        logger.info("session disposed (%d pending step(s) cancelled, terminal=%s)",
                    cancelled, self.state.terminal.value)

    # ── Output ───────────────────────────────────────────────────────

    def _dispatch(self, events: List[CombatEvent]) -> None:
        for event in events:
            if isinstance(event, LogLine):
                self.combat_log.add(event.text)
                if self.on_log is not None:
                    self.on_log(event.text)
            elif isinstance(event, FloatingValue):
                if self.on_floating is not None:
                    self.on_floating(event)
            elif isinstance(event, BattleEnded):
                logger.debug("battle ended, victory=%s", event.victory)
            if self.on_event is not None:
                self.on_event(event)
