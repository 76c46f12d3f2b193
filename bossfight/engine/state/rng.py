"""
XorShift128 RNG - the seedable random source for boss fights.

Every roll the engine makes (damage variance, crit, dodge, reward
quantities, drop chances) goes through a `Random` instance handed in by the
caller. Nothing touches the `random` module, so a battle replays exactly from
its seed.

Streams (see BattleRNG):
- combat_rng: damage variance, crit rolls, dodge rolls
- reward_rng: victory reward quantities and drop chances

Keeping rewards on their own stream means the loot for a seed does not shift
when a fight takes a different number of turns.
"""

from dataclasses import dataclass


MASK_64 = 0xFFFFFFFFFFFFFFFF

# Offset added to the battle seed for the reward stream
REWARD_SEED_OFFSET = 1

SEED_CHARACTERS = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"


def _mix64(x: int) -> int:
    """MurmurHash3 64-bit finalizer, spreads a seed over a state word."""
    x &= MASK_64
    x = ((x ^ (x >> 33)) * 0xff51afd7ed558ccd) & MASK_64
    x = ((x ^ (x >> 33)) * 0xc4ceb9fe1a85ec53) & MASK_64
    return x ^ (x >> 33)


class XorShift128:
    """
    XorShift128+ generator over two unsigned 64-bit state words.

    Each next_* call consumes exactly one 64-bit output, so a roll counter
    is also the stream position.
    """

    def __init__(self, seed: int):
        # An all-zero state would stay zero forever
        if seed == 0:
            seed = -0x8000000000000000
        self.seed0 = _mix64(seed)
        self.seed1 = _mix64(self.seed0)

    def next_bits(self) -> int:
        """Advance the state and return the next unsigned 64-bit output."""
        s1, s0 = self.seed0, self.seed1
        s1 ^= (s1 << 23) & MASK_64
        self.seed0 = s0
        self.seed1 = s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)
        return (self.seed0 + self.seed1) & MASK_64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound)."""
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return (self.next_bits() >> 1) % bound

    def next_float(self) -> float:
        """Random float in [0, 1) with 24 bits of precision."""
        return (self.next_bits() >> 40) / (1 << 24)


class Random:
    """
    Counted wrapper around XorShift128.

    The counter records how many rolls were taken; engines expose it in
    their state snapshots so a replay can be checked roll for roll.

    Methods used by the engine:
    - random_int_range(start, end) -> [start, end] inclusive
    - random_float_range(start, end) -> [start, end)
    - random_boolean_chance(chance) -> float roll < chance
    """

    def __init__(self, seed: int):
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0

    def random_int_range(self, start: int, end: int) -> int:
        """Random int in [start, end] INCLUSIVE."""
        self.counter += 1
        return start + self._rng.next_int(end - start + 1)

    def random_boolean_chance(self, chance: float) -> bool:
        """
        True with probability `chance`.

        A chance of 0 is never true and a chance of 1 is always true, since
        the underlying float roll lies in [0, 1).
        """
        self.counter += 1
        return self._rng.next_float() < chance

    def random_float_range(self, start: float, end: float) -> float:
        """Random float in [start, end)."""
        self.counter += 1
        return start + self._rng.next_float() * (end - start)


def seed_to_long(seed_string: str) -> int:
    """
    Convert seed string (e.g., "BOSS42") to long value.

    Base-35 encoding: 0-9 + A-Z excluding O, with O read as 0.
    A purely numeric string is taken as a plain integer.
    """
    if seed_string.lstrip('-').isdigit():
        return int(seed_string)

    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = SEED_CHARACTERS.find(char)
        if remainder == -1:
            continue  # Skip invalid characters
        result *= len(SEED_CHARACTERS)
        result += remainder

    return result


@dataclass
class BattleRNG:
    """
    All RNG streams for one boss fight.

    Both streams are derived from a single battle seed.
    """
    seed: int
    combat_rng: Random = None
    reward_rng: Random = None

    def __post_init__(self):
        if self.combat_rng is None:
            self.combat_rng = Random(self.seed)
        if self.reward_rng is None:
            self.reward_rng = Random(self.seed + REWARD_SEED_OFFSET)

    @classmethod
    def from_seed_string(cls, seed_string: str) -> 'BattleRNG':
        return cls(seed=seed_to_long(seed_string))

    def get_counters(self) -> dict:
        """Rolls taken so far on each stream."""
        return {
            "combat_seed_count": self.combat_rng.counter,
            "reward_seed_count": self.reward_rng.counter,
        }

