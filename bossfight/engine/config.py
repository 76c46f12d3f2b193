"""
Engine configuration.

Defaults reproduce the shipped game. Every field can be overridden through
BOSSFIGHT_* environment variables, optionally loaded from a .env file:

    BOSSFIGHT_LOG_LIMIT=5
    BOSSFIGHT_MIN_DAMAGE=1
    BOSSFIGHT_LIFESTEAL_ON_ELEMENTAL=false
    BOSSFIGHT_DEFEAT_FINAL_HP=1
    BOSSFIGHT_BOSS_REPLY_DELAY_MS=2000
"""

import os
from dataclasses import dataclass, fields
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "BOSSFIGHT_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """
    Tunables for one boss fight.

    Attributes:
        log_limit: Combat-log lines kept by the session
        min_damage: Floor on player hit damage (0 keeps the raw formula)
        lifesteal_on_elemental: Heal from elemental hits too. Off by default,
            lifesteal has only ever applied to the plain attack.
        defeat_final_hp: HP reported to on_complete after a defeat (the
            player limps back to town rather than staying at 0)
        boss_reply_delay_ms: Pacing between the player's action and the boss reply
    """
    log_limit: int = 5
    min_damage: int = 1
    lifesteal_on_elemental: bool = False
    defeat_final_hp: int = 1
    boss_reply_delay_ms: int = 2000

    def __post_init__(self):
        if self.log_limit < 1:
            raise ValueError(f"log_limit must be >= 1, got {self.log_limit}")
        if self.min_damage < 0:
            raise ValueError(f"min_damage must be >= 0, got {self.min_damage}")
        if self.defeat_final_hp < 0:
            raise ValueError(f"defeat_final_hp must be >= 0, got {self.defeat_final_hp}")
        if self.boss_reply_delay_ms < 0:
            raise ValueError(f"boss_reply_delay_ms must be >= 0, got {self.boss_reply_delay_ms}")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ValueError(f"{name}: expected a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{name}: expected an integer, got {value!r}") from None


def config_from_mapping(env: Mapping[str, str]) -> EngineConfig:
    """Build a config from BOSSFIGHT_* keys in `env`; missing keys keep defaults."""
    overrides = {}
    for f in fields(EngineConfig):
        key = ENV_PREFIX + f.name.upper()
        if key not in env:
            continue
        if f.type in (bool, "bool"):
            overrides[f.name] = _parse_bool(key, env[key])
        else:
            overrides[f.name] = _parse_int(key, env[key])
    return EngineConfig(**overrides)


def load_config(env_file: Optional[str] = None) -> EngineConfig:
    """
    Load configuration from the process environment.

    A .env file (the given path, or one found from the working directory)
    is loaded first without overriding variables already set.
    """
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))
    return config_from_mapping(os.environ)
