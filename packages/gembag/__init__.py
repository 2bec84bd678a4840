"""
Gem Bag Engine

Bag-building core for a gem-based RPG: a pool of gem instances moving between
bag, hand, discard and played zones, per-template mastery that grows with
successful plays, augmented upgrades, and zenny-priced unlocks.

Core subsystems:
- content: gem templates, augmentations, player class tables
- state: RNG, gem instances, mastery ledger, pool manager, wallet, unlocks
- generation: instance factory, upgrade options, starting bag
- handlers: unlock gate, shop

Usage:
    from packages.gembag import GemSession, PlayerClass

    session = GemSession(seed="GEMS1")
    session.new_run(PlayerClass.MAGE)
    session.start_battle()
    hand = session.pool.hand
    outcomes = session.play([hand[0].instance_id], available_stamina=3)
"""

__version__ = "0.1.0"

# Configuration / errors / events
from .config import EngineConfig, DEFAULT_CONFIG, MAX_HAND_SIZE
from .errors import (
    GemEngineError,
    UnknownTemplateError,
    UnknownAugmentationError,
    InsufficientResourceError,
    NotEligibleError,
    AlreadyUnlockedError,
    InsufficientFundsError,
    CollectionFullError,
    SnapshotError,
)
from .events import EventBus, Event, GemEvent

# Content
from .content import (
    GemTemplate, GemColor, GemKind, SpecialEffect, GEM_TEMPLATES, get_template,
    AugmentationTemplate, AUGMENTATIONS, get_augmentation,
    PlayerClass, get_player_class,
)

# State
from .state.rng import Random, XorShift128, seed_to_long
from .state.gem import GemInstance
from .state.mastery import MasteryLedger
from .state.pool import PoolManager, PoolSnapshot, PlayOutcome, Zone
from .state.wallet import Wallet
from .state.unlocks import UnlockRegistry

# Generation
from .generation.factory import GemFactory
from .generation.upgrades import UpgradeOptionGenerator, UpgradeOption, UpgradeKind
from .generation.bag import build_starting_bag, roll_random_template

# Handlers
from .handlers.unlock_handler import UnlockGate, UnlockResult
from .handlers.shop_handler import ShopHandler, ShopAction, ShopActionType, ShopResult

# Persistence / session
from .persistence import export_state, import_state, save_state, load_state
from .session import GemSession

__all__ = [
    "EngineConfig", "DEFAULT_CONFIG", "MAX_HAND_SIZE",
    "GemEngineError", "UnknownTemplateError", "UnknownAugmentationError",
    "InsufficientResourceError", "NotEligibleError", "AlreadyUnlockedError",
    "InsufficientFundsError", "CollectionFullError", "SnapshotError",
    "EventBus", "Event", "GemEvent",
    "GemTemplate", "GemColor", "GemKind", "SpecialEffect", "GEM_TEMPLATES", "get_template",
    "AugmentationTemplate", "AUGMENTATIONS", "get_augmentation",
    "PlayerClass", "get_player_class",
    "Random", "XorShift128", "seed_to_long",
    "GemInstance", "MasteryLedger", "PoolManager", "PoolSnapshot", "PlayOutcome", "Zone",
    "Wallet", "UnlockRegistry",
    "GemFactory", "UpgradeOptionGenerator", "UpgradeOption", "UpgradeKind",
    "build_starting_bag", "roll_random_template",
    "UnlockGate", "UnlockResult",
    "ShopHandler", "ShopAction", "ShopActionType", "ShopResult",
    "export_state", "import_state", "save_state", "load_state",
    "GemSession",
]
