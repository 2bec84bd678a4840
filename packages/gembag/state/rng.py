"""
Injectable RNG for the gem engine.

Every random decision (bag shuffles, success rolls, starting-bag fill, random
gem purchases) is drawn from one RandomSource passed in by the caller. The
module-level `random` is never used, so a seeded Random reproduces a whole run.

Default implementation is a XorShift128 generator (same algorithm as libGDX
RandomXS128) wrapped with a call counter, so saved runs can record how far a
stream has advanced.
"""

from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")

_MASK64 = 0xFFFFFFFFFFFFFFFF


class RandomSource(Protocol):
    """Interface the engine needs from a random generator."""

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] inclusive."""
        ...

    def random_float(self) -> float:
        """Random float in [0, 1)."""
        ...


class XorShift128:
    """
    XorShift128 PRNG.

    State is two 64-bit integers (seed0, seed1).
    """

    def __init__(self, seed: int, seed1: Optional[int] = None):
        if seed1 is not None:
            # Explicit state (used by copy())
            self.seed0 = seed & _MASK64
            self.seed1 = seed1 & _MASK64
        else:
            if seed == 0:
                seed = -0x8000000000000000
            self.seed0 = self._murmur_hash3(seed)
            self.seed1 = self._murmur_hash3(self.seed0)

    @staticmethod
    def _murmur_hash3(x: int) -> int:
        x &= _MASK64
        x ^= x >> 33
        x = (x * 0xff51afd7ed558ccd) & _MASK64
        x ^= x >> 33
        x = (x * 0xc4ceb9fe1a85ec53) & _MASK64
        x ^= x >> 33
        return x

    def _next_long(self) -> int:
        """Next unsigned 64-bit value."""
        s1 = self.seed0
        s0 = self.seed1
        self.seed0 = s0
        s1 ^= (s1 << 23) & _MASK64
        self.seed1 = (s1 ^ s0 ^ (s1 >> 17) ^ (s0 >> 26)) & _MASK64
        return (self.seed0 + self.seed1) & _MASK64

    def next_int(self, bound: int) -> int:
        """Random int in [0, bound)."""
        if bound <= 0:
            raise ValueError("bound must be positive")
        while True:
            bits = self._next_long() >> 1
            val = bits % bound
            if bits - val + (bound - 1) < (1 << 63):
                return val

    def next_float(self) -> float:
        """Random float in [0, 1) with 24 bits of precision."""
        return (self._next_long() >> 40) / (1 << 24)

    def next_double(self) -> float:
        """Random float in [0, 1) with 53 bits of precision."""
        return (self._next_long() >> 11) / (1 << 53)

    def copy(self) -> "XorShift128":
        return XorShift128(self.seed0, self.seed1)


class Random:
    """
    Seeded generator used by the pool manager, factory helpers and shop.

    Tracks `counter` (number of draws) so a stream can be restored by
    replaying the same number of calls.
    """

    def __init__(self, seed: int, counter: int = 0):
        self.seed = seed
        self._rng = XorShift128(seed)
        self.counter = 0
        for _ in range(counter):
            self.random_int(999)

    def random_int(self, range_val: int) -> int:
        """Random int in [0, range_val] INCLUSIVE."""
        self.counter += 1
        return self._rng.next_int(range_val + 1)

    def random_int_range(self, start: int, end: int) -> int:
        """Random int in [start, end] INCLUSIVE."""
        self.counter += 1
        return start + self._rng.next_int(end - start + 1)

    def random_float(self) -> float:
        """Random float in [0, 1)."""
        self.counter += 1
        return self._rng.next_double()

    def random_boolean(self, chance: float = 0.5) -> bool:
        self.counter += 1
        return self._rng.next_float() < chance

    def copy(self) -> "Random":
        new = Random.__new__(Random)
        new.seed = self.seed
        new._rng = self._rng.copy()
        new.counter = self.counter
        return new

    def to_dict(self) -> dict:
        """Seed, counter and raw generator state, for saving."""
        return {
            "seed": self.seed,
            "counter": self.counter,
            "state": [self._rng.seed0, self._rng.seed1],
        }

    def load(self, data: dict) -> None:
        """Restore to_dict() output in place (other holders keep this object)."""
        seed0, seed1 = data["state"]
        self.seed = int(data["seed"])
        self.counter = int(data["counter"])
        self._rng = XorShift128(int(seed0), int(seed1))


# ============ HELPERS (work with any RandomSource) ============

def roll_percent(rng: RandomSource) -> float:
    """Uniform roll in [0, 100) for success checks."""
    return rng.random_float() * 100.0


def shuffle_in_place(items: List[T], rng: RandomSource) -> None:
    """Fisher-Yates shuffle driven by the injected generator."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.random_int(i)
        items[i], items[j] = items[j], items[i]


def choice(items: Sequence[T], rng: RandomSource) -> T:
    if not items:
        raise ValueError("cannot choose from an empty sequence")
    return items[rng.random_int(len(items) - 1)]


def weighted_choice(items: Sequence[T], weights: Sequence[float], rng: RandomSource) -> T:
    """Pick one item with probability proportional to its weight."""
    if not items or len(items) != len(weights):
        raise ValueError("items and weights must be non-empty and the same length")
    total = sum(weights)
    if total <= 0:
        raise ValueError("weights must sum to a positive value")
    roll = rng.random_float() * total
    cumulative = 0.0
    for item, weight in zip(items, weights):
        cumulative += weight
        if roll < cumulative:
            return item
    return items[-1]


def seed_to_long(seed_string: str) -> int:
    """
    Convert a seed string (e.g. "ABC123") to an integer seed.

    Base-35 over 0-9 + A-Z without O (O reads as 0). Purely numeric strings
    are taken as plain integers.
    """
    if seed_string.lstrip("-").isdigit():
        return int(seed_string)

    characters = "0123456789ABCDEFGHIJKLMNPQRSTUVWXYZ"
    seed_string = seed_string.upper().replace("O", "0")

    result = 0
    for char in seed_string:
        remainder = characters.find(char)
        if remainder == -1:
            continue
        result = result * len(characters) + remainder
    return result
