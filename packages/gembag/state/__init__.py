"""
State module - mutable engine state and RNG.

Contains:
- RNG system (XorShift128, seeded Random)
- Gem instances
- Mastery ledger, pool manager, wallet, unlock registry
"""

from .rng import XorShift128, Random, RandomSource, seed_to_long
from .gem import GemInstance
from .mastery import MasteryLedger
from .pool import PoolManager, PoolSnapshot, PlayOutcome, Zone
from .wallet import Wallet
from .unlocks import UnlockRegistry

__all__ = [
    "XorShift128", "Random", "RandomSource", "seed_to_long",
    "GemInstance",
    "MasteryLedger",
    "PoolManager", "PoolSnapshot", "PlayOutcome", "Zone",
    "Wallet",
    "UnlockRegistry",
]
