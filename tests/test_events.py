"""
Event Tests

Tests the bounded combat log and event serialization.
"""

from bossfight.engine.events import (
    BattleEnded, CombatLog, FloatingValue, LogLine, event_to_dict, POSITION_BOSS,
)
from bossfight.engine.generation.rewards import RewardBundle, RewardStack


class TestCombatLog:

    def test_keeps_last_lines(self):
        log = CombatLog(limit=3)
        for i in range(5):
            log.add(f"line {i}")
        assert log.lines == ["line 2", "line 3", "line 4"]
        assert len(log) == 3

    def test_default_limit(self):
        log = CombatLog()
        for i in range(10):
            log.add(str(i))
        assert log.lines == ["5", "6", "7", "8", "9"]


class TestEventToDict:

    def test_floating_value(self):
        event = FloatingValue(amount=12, position=POSITION_BOSS, color="white", is_crit=True)
        assert event_to_dict(event) == {
            "type": "FloatingValue",
            "amount": 12,
            "position": "boss",
            "color": "white",
            "is_crit": True,
            "label": "",
        }

    def test_log_line(self):
        assert event_to_dict(LogLine("hi")) == {"type": "LogLine", "text": "hi"}

    def test_battle_ended_with_rewards(self):
        rewards = RewardBundle(experience=450, gold=300, gems=(RewardStack("Wooden Gem", 1),))
        data = event_to_dict(BattleEnded(victory=True, final_player_hp=40, rewards=rewards))
        assert data["rewards"]["gold"] == 300
        assert data["final_player_hp"] == 40
