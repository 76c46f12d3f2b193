#!/usr/bin/env python3
"""
Boss Fight - Command Line Interface

CLI for replaying boss fights from a seed and checking the pieces behind
them: reward rolls and the raw RNG stream.

Usage:
    bossfight simulate --seed BOSS42 --boss-level 12
    bossfight simulate --seed 7 --policy fire --json
    bossfight rewards --seed BOSS42 --level 12
    bossfight rng --seed BOSS42 --count 20
"""

import argparse
import json
import logging
import sys
from typing import Callable, Dict, List

from .engine.combat_engine import CombatEngine, create_boss_fight
from .engine.config import load_config
from .engine.events import LogLine, event_to_dict
from .engine.generation.rewards import RewardBundle, generate_boss_rewards
from .engine.state.combat import (
    Action,
    BossTurn,
    Defend,
    Element,
    ElementalAttack,
    NormalAttack,
    create_boss,
    create_player,
)
from .engine.state.rng import BattleRNG, Random, XorShift128, seed_to_long


# =============================================================================
# POLICIES
# =============================================================================

def _policy_attack(engine: CombatEngine) -> Action:
    return NormalAttack()


def _policy_defend(engine: CombatEngine) -> Action:
    """Defend whenever below a third of max hp, attack otherwise."""
    state = engine.state
    if state.player_hp * 3 < state.player.max_hp:
        return Defend()
    return NormalAttack()


def _elemental_policy(element: Element) -> Callable[[CombatEngine], Action]:
    def policy(engine: CombatEngine) -> Action:
        action = ElementalAttack(element)
        if action in engine.get_legal_actions():
            return action
        return NormalAttack()
    return policy


POLICIES: Dict[str, Callable[[CombatEngine], Action]] = {
    "attack": _policy_attack,
    "defend": _policy_defend,
    "fire": _elemental_policy(Element.FIRE),
    "ice": _elemental_policy(Element.ICE),
    "lightning": _elemental_policy(Element.LIGHTNING),
    "poison": _elemental_policy(Element.POISON),
}


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_seed_info(seed_string: str, numeric_seed: int) -> str:
    """Format seed information header."""
    return f"Seed: {seed_string} (numeric: {numeric_seed})"


def format_rewards(rewards: RewardBundle) -> List[str]:
    lines = [
        f"  Experience: {rewards.experience}",
        f"  Gold: {rewards.gold}",
    ]
    for stack in rewards.items + rewards.gems:
        lines.append(f"  {stack.name} x{stack.quantity}")
    return lines


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_simulate(args) -> int:
    """Play a whole boss fight with a fixed policy."""
    seed_string = args.seed.upper()
    seed = seed_to_long(seed_string)
    config = load_config(args.env_file)
    streams = BattleRNG.from_seed_string(seed_string)

    player = create_player(
        hp=args.hp,
        max_hp=args.max_hp or args.hp,
        attack=args.attack,
        defense=args.defense,
        fire_attack=args.fire,
        ice_attack=args.ice,
        lightning_attack=args.lightning,
        poison_attack=args.poison,
        crit_chance=args.crit_chance,
        crit_damage=args.crit_damage,
        life_steal=args.life_steal,
        dodge_chance=args.dodge_chance,
    )
    boss = create_boss(
        name=args.boss_name,
        level=args.boss_level,
        max_hp=args.boss_hp,
        attack=args.boss_attack,
        defense=args.boss_defense,
    )

    outcome = {}

    def on_complete(success, final_hp, rewards):
        outcome.update(success=success, final_hp=final_hp)

    engine = create_boss_fight(player, boss, dungeon_name=args.dungeon, config=config,
                               on_complete=on_complete, rng=streams)
    policy = POLICIES[args.policy]

    while not engine.is_combat_over() and engine.state.turn <= args.max_turns:
        engine.apply_action(policy(engine))
        engine.apply_action(BossTurn())

    result = engine.get_result()

    if args.json:
        data = {
            "seed": seed_string,
            "numeric_seed": seed,
            "policy": args.policy,
            "finished": engine.is_combat_over(),
            "victory": result.victory,
            "final_hp": outcome.get("final_hp", engine.state.player_hp),
            "turns": result.turns,
            "damage_dealt": result.damage_dealt,
            "damage_taken": result.damage_taken,
            "dot_damage": result.dot_damage,
            "healed": result.healed,
            "crits": result.crits,
            "dodges": result.dodges,
            "rewards": result.rewards.to_dict() if result.rewards else None,
            "rng_counters": streams.get_counters(),
        }
        if args.events:
            data["events"] = [event_to_dict(e) for e in engine.history]
        print(json.dumps(data, indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    print(f"{player.hp}/{player.max_hp} hp vs {boss.name} (lv {boss.level}, {boss.max_hp} hp), "
          f"policy={args.policy}")
    print()
    for event in engine.history:
        if isinstance(event, LogLine):
            print(f"  {event.text}")
    print()

    if not engine.is_combat_over():
        print(f"Unfinished after {args.max_turns} turns "
              f"(player {engine.state.player_hp}, boss {engine.state.boss_hp})")
        return 0

    print(f"{'VICTORY' if result.victory else 'DEFEAT'} in {result.turns} turn(s), "
          f"final hp {outcome['final_hp']}")
    print(f"Dealt {result.damage_dealt} ({result.dot_damage} from effects), "
          f"took {result.damage_taken}, healed {result.healed}, "
          f"{result.crits} crit(s), {result.dodges} dodge(s)")
    if result.rewards:
        print("Rewards:")
        for line in format_rewards(result.rewards):
            print(line)
    return 0


def cmd_rewards(args) -> int:
    """Show the victory rewards a seed would roll for a boss level."""
    seed_string = args.seed.upper()
    seed = seed_to_long(seed_string)
    reward_rng = BattleRNG.from_seed_string(seed_string).reward_rng

    bundles = [generate_boss_rewards(args.level, reward_rng) for _ in range(args.count)]

    if args.json:
        print(json.dumps({
            "seed": seed_string,
            "numeric_seed": seed,
            "level": args.level,
            "rewards": [b.to_dict() for b in bundles],
        }, indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    print(f"Boss level {args.level}")
    for i, bundle in enumerate(bundles):
        print(f"\nVictory #{i + 1}:")
        for line in format_rewards(bundle):
            print(line)
    return 0


def cmd_rng(args) -> int:
    """Display RNG sequence for verification."""
    seed_string = args.seed.upper()
    seed = seed_to_long(seed_string)
    count = args.count

    raw = XorShift128(seed)
    rng = Random(seed)
    values = [rng.random_float_range(0.9, 1.1) for _ in range(count)]

    if args.json:
        print(json.dumps({
            "seed": seed_string,
            "numeric_seed": seed,
            "state": [raw.seed0, raw.seed1],
            "variance_rolls": values,
            "counter": rng.counter,
        }, indent=2))
        return 0

    print(format_seed_info(seed_string, seed))
    print()
    print("XorShift128 Initial State:")
    print(f"  seed0: {raw.seed0}")
    print(f"  seed1: {raw.seed1}")
    print()
    print(f"First {count} variance rolls (combat stream):")
    for i, val in enumerate(values):
        print(f"  {i}: {val:.6f}")
    print(f"\nRNG counter after {count} calls: {rng.counter}")
    return 0


# =============================================================================
# MAIN
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bossfight",
        description="Boss Fight - replay and inspect seeded boss battles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s simulate --seed BOSS42 --boss-level 12
  %(prog)s simulate --seed 7 --fire 20 --policy fire --json
  %(prog)s rewards --seed BOSS42 --level 12 --count 3
  %(prog)s rng --seed BOSS42 --count 20
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Simulate command
    sim_parser = subparsers.add_parser("simulate", help="Play a boss fight with a fixed policy")
    sim_parser.add_argument("--seed", "-s", required=True, help="Battle seed (e.g., BOSS42)")
    sim_parser.add_argument("--policy", "-p", choices=sorted(POLICIES), default="attack",
                            help="Action picked each player turn")
    sim_parser.add_argument("--max-turns", type=int, default=200, help="Stop after this many turns")
    sim_parser.add_argument("--dungeon", default="", help="Dungeon name shown in snapshots")
    sim_parser.add_argument("--env-file", help="Load BOSSFIGHT_* settings from this .env file")
    sim_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")
    sim_parser.add_argument("--events", action="store_true", help="Include every event in JSON output")

    player = sim_parser.add_argument_group("player")
    player.add_argument("--hp", type=int, default=100)
    player.add_argument("--max-hp", type=int, default=0, help="Defaults to --hp")
    player.add_argument("--attack", type=int, default=30)
    player.add_argument("--defense", type=int, default=10)
    player.add_argument("--fire", type=int, default=0)
    player.add_argument("--ice", type=int, default=0)
    player.add_argument("--lightning", type=int, default=0)
    player.add_argument("--poison", type=int, default=0)
    player.add_argument("--crit-chance", type=float, default=5.0)
    player.add_argument("--crit-damage", type=float, default=50.0)
    player.add_argument("--life-steal", type=float, default=0.0)
    player.add_argument("--dodge-chance", type=float, default=0.0)

    boss = sim_parser.add_argument_group("boss")
    boss.add_argument("--boss-name", default="Slime King")
    boss.add_argument("--boss-level", type=int, default=5)
    boss.add_argument("--boss-hp", type=int, default=500)
    boss.add_argument("--boss-attack", type=int, default=40)
    boss.add_argument("--boss-defense", type=int, default=15)

    # Rewards command
    rewards_parser = subparsers.add_parser("rewards", help="Show victory rewards for a seed")
    rewards_parser.add_argument("--seed", "-s", required=True, help="Battle seed")
    rewards_parser.add_argument("--level", "-l", type=int, default=1, help="Boss level")
    rewards_parser.add_argument("--count", "-n", type=int, default=1, help="Number of victories to roll")
    rewards_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    # RNG command
    rng_parser = subparsers.add_parser("rng", help="Verify RNG sequence")
    rng_parser.add_argument("--seed", "-s", required=True, help="Battle seed")
    rng_parser.add_argument("--count", "-n", type=int, default=20, help="Number of values to show")
    rng_parser.add_argument("--json", "-j", action="store_true", help="Output in JSON format")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    # Dispatch to command handler
    commands = {
        "simulate": cmd_simulate,
        "rewards": cmd_rewards,
        "rng": cmd_rng,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
