"""
Gem Session - one player's gem engine, fully wired.

Owns a single EventBus shared by the ledger, pool and unlock gate, so
listeners see every notification in order and only after each operation
settles. All randomness flows through one seeded Random.

Usage:
    session = GemSession(seed=42)
    session.new_run(PlayerClass.KNIGHT)
    session.start_battle()
    outcomes = session.play([session.pool.hand[0].instance_id], available_stamina=3)
    session.end_period()
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from .config import EngineConfig, DEFAULT_CONFIG, MAX_HAND_SIZE
from .content.augmentations import AugmentationTemplate
from .content.classes import PlayerClass
from .content.gems import GemTemplate
from .errors import CollectionFullError, SnapshotError
from .events import EventBus
from .generation.bag import build_starting_bag, roll_random_template
from .generation.factory import GemFactory
from .generation.upgrades import UpgradeOption, UpgradeOptionGenerator
from .handlers.unlock_handler import UnlockGate, UnlockResult
from .persistence import export_state, import_state
from .state.gem import GemInstance
from .state.mastery import MasteryLedger
from .state.pool import PlayOutcome, PoolManager
from .state.rng import Random, seed_to_long
from .state.unlocks import UnlockRegistry
from .state.wallet import Wallet

logger = logging.getLogger(__name__)


class GemSession:
    """Facade over the pool, ledger, factory, unlocks and wallet of one player."""

    def __init__(
        self,
        seed: Union[int, str] = 0,
        config: Optional[EngineConfig] = None,
        templates: Optional[Dict[str, GemTemplate]] = None,
        augmentations: Optional[Dict[str, AugmentationTemplate]] = None,
        registry: Optional[UnlockRegistry] = None,
        wallet: Optional[Wallet] = None,
    ):
        self.config = config if config is not None else DEFAULT_CONFIG
        self.seed = seed_to_long(seed) if isinstance(seed, str) else seed
        self.rng = Random(self.seed)
        self.bus = EventBus()

        self.ledger = MasteryLedger(templates=templates, config=self.config, bus=self.bus)
        self.factory = GemFactory(self.ledger, templates=templates, augmentations=augmentations, rng=self.rng)
        self.pool = PoolManager(self.rng, self.ledger, bus=self.bus, config=self.config)

        self.registry = registry if registry is not None else UnlockRegistry.with_starters()
        self.wallet = wallet if wallet is not None else Wallet()
        self.unlock_gate = UnlockGate(self.registry, templates=self.factory.templates, config=self.config, bus=self.bus)
        self.upgrades = UpgradeOptionGenerator(self.factory, self.registry)

        self.player_class: Optional[PlayerClass] = None
        # Hand gems (by new instance id) upgraded during the current shop visit
        self.upgraded_this_visit: Set[str] = set()

    # ----- RUN LIFECYCLE -----

    def new_run(self, player_class: PlayerClass) -> List[GemInstance]:
        """Start a run: build and shuffle the class's starting bag."""
        self.player_class = player_class
        self.upgraded_this_visit.clear()
        bag = build_starting_bag(self.factory, player_class, self.rng, size=self.config.starting_bag_size)
        self.pool.load_zones(bag=bag)
        return bag

    def start_battle(self) -> List[GemInstance]:
        """Fill the hand from the bag."""
        missing = MAX_HAND_SIZE - len(self.pool.hand)
        return self.pool.draw(missing)

    def refill_hand(self) -> List[GemInstance]:
        """Top the hand back up to three at the end of a turn."""
        return self.start_battle()

    def play(
        self,
        selected_ids: Iterable[str],
        available_stamina: int,
        debit: Optional[Callable[[int], None]] = None,
    ) -> List[PlayOutcome]:
        """
        Play gems, then apply draw-on-play effects.

        Each successful gem that draws on play pulls one extra gem from the bag.
        """
        outcomes = self.pool.play(selected_ids, available_stamina, debit=debit)
        extra = sum(1 for o in outcomes if o.success and o.instance.draws_on_play)
        if extra:
            logger.debug("Draw-on-play effects: drawing %d extra gems", extra)
            self.pool.draw(extra)
        return outcomes

    def discard(self, selected_ids: Iterable[str]) -> List[GemInstance]:
        return self.pool.discard(selected_ids)

    def flee(self) -> List[GemInstance]:
        """Abandon a battle: the hand goes to discard and a fresh hand is drawn."""
        self.pool.return_hand_to_discard()
        return self.pool.draw(MAX_HAND_SIZE)

    def end_period(self) -> int:
        """End the day: everything goes back into a reshuffled bag."""
        return self.pool.reset_for_new_period()

    # ----- UPGRADES / UNLOCKS / PURCHASES -----

    def upgrade_options(self, hand_instance_id: str) -> List[UpgradeOption]:
        return self.upgrades.get_upgrade_options(self.pool, hand_instance_id, self._require_class())

    def commit_upgrade(self, hand_instance_id: str, option: UpgradeOption) -> Optional[GemInstance]:
        """Replace a hand gem with the chosen candidate. Returns the replaced gem."""
        return self.pool.replace_in_hand(hand_instance_id, option.candidate)

    def unlock(self, template_id: str, cost: Optional[int] = None) -> UnlockResult:
        return self.unlock_gate.unlock(template_id, self._require_class(), self.wallet, cost=cost)

    def buy_random_gem(self) -> Optional[GemInstance]:
        """
        Add a random unlocked gem to the bag.

        Returns None when the class has nothing unlocked.

        Raises:
            CollectionFullError: the collection is already at its maximum size
        """
        if self.pool.collection_size >= self.config.max_collection_size:
            raise CollectionFullError(
                f"Gem collection is full ({self.config.max_collection_size} gems)"
            )
        template_id = roll_random_template(
            self._require_class(), self.registry, self.rng, templates=self.factory.templates
        )
        if template_id is None:
            logger.warning("No unlocked gems available for %s", self.player_class.value)
            return None
        gem = self.factory.create_instance(template_id)
        self.pool.add_to_bag(gem)
        return gem

    def remove_gem(self, instance_id: str) -> Optional[GemInstance]:
        return self.pool.remove_from_bag(instance_id)

    # ----- PERSISTENCE -----

    def export_state(self) -> dict:
        data = export_state(self.pool, self.ledger)
        data["wallet"] = self.wallet.to_dict()
        data["unlocks"] = self.registry.to_dict()
        data["rng"] = self.rng.to_dict()
        if self.player_class is not None:
            data["player_class"] = self.player_class.value
        return data

    def import_state(self, data: dict) -> None:
        """
        Restore pool, ledger, wallet, unlocks, class and RNG from
        export_state() output.

        Every section is parsed before anything is replaced, so a bad
        snapshot leaves the whole session unchanged.

        Raises:
            SnapshotError: any section is malformed
        """
        session_parts = self._parse_session_parts(data)
        import_state(data, self.pool, self.ledger)

        if "wallet" in session_parts:
            self.wallet.zenny = session_parts["wallet"].zenny
        if "unlocks" in session_parts:
            restored = session_parts["unlocks"]
            self.registry.by_class = restored.by_class
            self.registry.global_unlocks = restored.global_unlocks
        if "player_class" in session_parts:
            self.player_class = session_parts["player_class"]
        if "rng" in data:
            self.rng.load(data["rng"])
        self.upgraded_this_visit.clear()

    @staticmethod
    def _parse_session_parts(data: dict) -> Dict[str, Any]:
        parts: Dict[str, Any] = {}
        try:
            if "wallet" in data:
                wallet = Wallet.from_dict(data["wallet"])
                if not isinstance(wallet.zenny, int) or wallet.zenny < 0:
                    raise SnapshotError(f"Invalid wallet balance: {wallet.zenny!r}")
                parts["wallet"] = wallet
            if "unlocks" in data:
                parts["unlocks"] = UnlockRegistry.from_dict(data["unlocks"])
            if data.get("player_class"):
                parts["player_class"] = PlayerClass(data["player_class"])
            if "rng" in data:
                Random(0).load(data["rng"])
        except SnapshotError:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SnapshotError(f"Invalid session snapshot: {e}") from e
        return parts

    def _require_class(self) -> PlayerClass:
        if self.player_class is None:
            raise RuntimeError("No run in progress; call new_run() first")
        return self.player_class

    def __repr__(self) -> str:
        cls = self.player_class.value if self.player_class else None
        return f"GemSession(class={cls}, zenny={self.wallet.zenny}, pool={self.pool!r})"
