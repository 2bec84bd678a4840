"""
Pool Manager - owns the four gem zones and every transition between them.

Zones:
- bag: ordered draw pile, front = next draw
- hand: up to 3 playable gems
- discard: gems removed from hand unplayed, waiting to be recycled
- played: gems consumed by plays this period, held until the period reset

Invariants:
- every instance is in exactly one zone (no duplicate instance_id anywhere)
- len(hand) <= 3 after every operation
- draw/play/discard/recycle/reset never create or destroy instances

Every operation runs inside `bus.batch()`: zones are fully updated before any
listener sees an event. Ids passed to play/discard that are not in the hand
are ignored rather than rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from enum import Enum

from ..config import EngineConfig, DEFAULT_CONFIG, MAX_HAND_SIZE
from ..content.gems import get_template
from ..errors import CollectionFullError, InsufficientResourceError, SnapshotError
from ..events import EventBus, GemEvent
from .gem import GemInstance
from .mastery import MasteryLedger
from .rng import RandomSource, roll_percent, shuffle_in_place

logger = logging.getLogger(__name__)


class Zone(Enum):
    BAG = "bag"
    HAND = "hand"
    DISCARD = "discard"
    PLAYED = "played"


@dataclass(frozen=True)
class PlayOutcome:
    """Result of playing one gem."""
    instance: GemInstance
    success: bool
    roll: float  # Uniform in [0, 100); success when roll < mastery_snapshot


@dataclass(frozen=True)
class PoolSnapshot:
    """Read-only view of the zones."""
    bag: Tuple[GemInstance, ...]
    hand: Tuple[GemInstance, ...]
    discard: Tuple[GemInstance, ...]
    played: Tuple[GemInstance, ...]

    def zone_ids(self) -> Dict[str, List[str]]:
        return {
            Zone.BAG.value: [g.instance_id for g in self.bag],
            Zone.HAND.value: [g.instance_id for g in self.hand],
            Zone.DISCARD.value: [g.instance_id for g in self.discard],
            Zone.PLAYED.value: [g.instance_id for g in self.played],
        }

    def all_ids(self) -> List[str]:
        """Sorted ids across every zone (the conserved multiset)."""
        return sorted(
            g.instance_id for zone in (self.bag, self.hand, self.discard, self.played) for g in zone
        )

    @property
    def total(self) -> int:
        return len(self.bag) + len(self.hand) + len(self.discard) + len(self.played)


class PoolManager:
    """
    Bag/hand/discard/played state machine for one player.

    Usage:
        pool = PoolManager(rng, ledger, bus)
        pool.add_to_bag(factory.create_instance("red-attack"))
        pool.draw(3)
        outcomes = pool.play([gem.instance_id], available_stamina=3, debit=player.spend)
    """

    def __init__(
        self,
        rng: RandomSource,
        ledger: MasteryLedger,
        bus: Optional[EventBus] = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ):
        self.rng = rng
        self.ledger = ledger
        self.bus = bus if bus is not None else EventBus()
        self.config = config
        self._bag: List[GemInstance] = []
        self._hand: List[GemInstance] = []
        self._discard: List[GemInstance] = []
        self._played: List[GemInstance] = []

    # ----- READ ACCESS -----

    @property
    def bag(self) -> Tuple[GemInstance, ...]:
        return tuple(self._bag)

    @property
    def hand(self) -> Tuple[GemInstance, ...]:
        return tuple(self._hand)

    @property
    def discard_pile(self) -> Tuple[GemInstance, ...]:
        return tuple(self._discard)

    @property
    def played(self) -> Tuple[GemInstance, ...]:
        return tuple(self._played)

    @property
    def collection_size(self) -> int:
        return len(self._bag) + len(self._hand) + len(self._discard) + len(self._played)

    @property
    def hand_is_full(self) -> bool:
        return len(self._hand) >= MAX_HAND_SIZE

    def snapshot(self) -> PoolSnapshot:
        return PoolSnapshot(
            bag=tuple(self._bag),
            hand=tuple(self._hand),
            discard=tuple(self._discard),
            played=tuple(self._played),
        )

    def all_instances(self) -> List[GemInstance]:
        return [*self._bag, *self._hand, *self._discard, *self._played]

    def find(self, instance_id: str) -> Optional[Tuple[Zone, GemInstance]]:
        """Locate an instance and the zone holding it."""
        for zone, pile in self._zones():
            for gem in pile:
                if gem.instance_id == instance_id:
                    return zone, gem
        return None

    def get_hand_gem(self, instance_id: str) -> Optional[GemInstance]:
        for gem in self._hand:
            if gem.instance_id == instance_id:
                return gem
        return None

    # ----- CORE TRANSITIONS -----

    def draw(self, n: int = 1) -> List[GemInstance]:
        """
        Draw up to n gems from the front of the bag into the hand.

        Recycles the discard pile first whenever the bag is empty. Never
        overfills the hand; drawing with a full hand or an exhausted pool is a
        no-op.
        """
        drawn: List[GemInstance] = []
        if n <= 0 or self.hand_is_full:
            return drawn

        with self.bus.batch():
            remaining = n
            while remaining > 0 and len(self._hand) < MAX_HAND_SIZE:
                if not self._bag:
                    if not self._discard:
                        break
                    self._recycle()
                take = min(remaining, MAX_HAND_SIZE - len(self._hand), len(self._bag))
                chunk = self._bag[:take]
                del self._bag[:take]
                self._hand.extend(chunk)
                drawn.extend(chunk)
                remaining -= take

            for gem in drawn:
                self.bus.emit(GemEvent.DRAWN, instance=gem)

        if drawn:
            logger.debug("Drew %d gems (bag=%d, hand=%d)", len(drawn), len(self._bag), len(self._hand))
        return drawn

    def play(
        self,
        selected_ids: Iterable[str],
        available_stamina: int,
        debit: Optional[Callable[[int], None]] = None,
    ) -> List[PlayOutcome]:
        """
        Play gems from the hand.

        Each gem rolls independently against its mastery snapshot. Successful
        gems raise the template's mastery in the ledger.

        Args:
            selected_ids: instance ids to play; ids not in the hand are ignored
            available_stamina: caller's current stamina
            debit: called once with the total cost when the play goes through

        Raises:
            InsufficientResourceError: total cost exceeds available_stamina
            UnknownTemplateError: a selected gem names a template the ledger
                does not know
            (in both cases zones, ledger and stamina are left unchanged)
        """
        selected = self._resolve_hand(selected_ids)
        if not selected:
            return []
        for gem in selected:
            get_template(gem.template_id, self.ledger.templates)

        total_cost = sum(gem.cost for gem in selected)
        if total_cost > available_stamina:
            raise InsufficientResourceError(total_cost, available_stamina)

        outcomes: List[PlayOutcome] = []
        with self.bus.batch():
            if debit is not None:
                debit(total_cost)

            self._remove_from_hand(selected)
            self._played.extend(selected)

            for gem in selected:
                roll = roll_percent(self.rng)
                success = roll < gem.mastery_snapshot
                outcomes.append(PlayOutcome(instance=gem, success=success, roll=roll))
                self.bus.emit(GemEvent.PLAYED, instance=gem, success=success)
                if success:
                    self.ledger.record_success(gem.template_id)

            if not self._bag and self._discard:
                self._recycle()

        logger.debug(
            "Played %d gems for %d stamina (%d succeeded)",
            len(outcomes), total_cost, sum(1 for o in outcomes if o.success),
        )
        return outcomes

    def discard(self, selected_ids: Iterable[str]) -> List[GemInstance]:
        """Move gems from the hand to the discard pile."""
        selected = self._resolve_hand(selected_ids)
        if not selected:
            return []

        with self.bus.batch():
            self._remove_from_hand(selected)
            self._discard.extend(selected)
            for gem in selected:
                self.bus.emit(GemEvent.DISCARDED, instance=gem)
            if self.config.recycle_on_discard:
                self._recycle()
        return selected

    def recycle(self) -> int:
        """Shuffle the discard pile back into the bag. Returns gems moved."""
        with self.bus.batch():
            return self._recycle()

    def reset_for_new_period(self) -> int:
        """
        Gather gems back into a freshly shuffled bag for a new period (day).

        Gathers bag, discard and played, plus the hand unless the config keeps
        it. Returns the new bag size.
        """
        with self.bus.batch():
            gathered = [*self._bag, *self._discard, *self._played]
            preserve_hand = self.config.reset_preserves_hand
            if not preserve_hand:
                gathered.extend(self._hand)
                self._hand.clear()
            self._discard.clear()
            self._played.clear()
            shuffle_in_place(gathered, self.rng)
            self._bag = gathered
            self.bus.emit(GemEvent.PERIOD_RESET, bag_size=len(self._bag), hand_preserved=preserve_hand)

        logger.info("Period reset: %d gems in bag, %d in hand", len(self._bag), len(self._hand))
        return len(self._bag)

    def return_hand_to_discard(self) -> List[GemInstance]:
        """Send the whole hand to the discard pile (fleeing a battle)."""
        returned = list(self._hand)
        if not returned:
            return returned
        with self.bus.batch():
            self._hand.clear()
            self._discard.extend(returned)
            for gem in returned:
                self.bus.emit(GemEvent.DISCARDED, instance=gem)
        return returned

    # ----- COLLECTION CHANGES (create / purchase / remove / upgrade) -----

    def add_to_bag(self, instance: GemInstance) -> None:
        """Add a newly created gem to the back of the bag."""
        if self.collection_size >= self.config.max_collection_size:
            raise CollectionFullError(
                f"Gem collection is full ({self.config.max_collection_size} gems)"
            )
        if self.find(instance.instance_id) is not None:
            raise ValueError(f"Duplicate instance id: {instance.instance_id}")
        with self.bus.batch():
            self._bag.append(instance)
            self.bus.emit(GemEvent.GEM_ADDED, instance=instance)

    def remove_from_bag(self, instance_id: str) -> Optional[GemInstance]:
        """Permanently remove a gem from the bag. Returns None if not in the bag."""
        for idx, gem in enumerate(self._bag):
            if gem.instance_id == instance_id:
                with self.bus.batch():
                    del self._bag[idx]
                    self.bus.emit(GemEvent.GEM_REMOVED, instance=gem)
                return gem
        logger.warning("Gem not found in bag for removal: %s", instance_id)
        return None

    def replace_in_hand(self, instance_id: str, new_instance: GemInstance) -> Optional[GemInstance]:
        """
        Swap a hand gem for an upgraded instance in the same slot.

        Returns the replaced gem, or None if instance_id is not in the hand.
        """
        for idx, gem in enumerate(self._hand):
            if gem.instance_id != instance_id:
                continue
            if self.find(new_instance.instance_id) is not None:
                raise ValueError(f"Duplicate instance id: {new_instance.instance_id}")
            with self.bus.batch():
                self._hand[idx] = new_instance
                self.bus.emit(GemEvent.GEM_UPGRADED, old_instance=gem, new_instance=new_instance)
            logger.debug("Upgraded %r -> %r", gem, new_instance)
            return gem
        logger.warning("Gem not found in hand for upgrade: %s", instance_id)
        return None

    # ----- INTERNALS -----

    def _zones(self) -> List[Tuple[Zone, List[GemInstance]]]:
        return [
            (Zone.BAG, self._bag),
            (Zone.HAND, self._hand),
            (Zone.DISCARD, self._discard),
            (Zone.PLAYED, self._played),
        ]

    def _resolve_hand(self, selected_ids: Iterable[str]) -> List[GemInstance]:
        """Hand gems matching the ids, in hand order, each at most once."""
        wanted = set(selected_ids)
        return [gem for gem in self._hand if gem.instance_id in wanted]

    def _remove_from_hand(self, gems: List[GemInstance]) -> None:
        ids = {gem.instance_id for gem in gems}
        self._hand = [gem for gem in self._hand if gem.instance_id not in ids]

    def _recycle(self) -> int:
        if not self._discard:
            return 0
        count = len(self._discard)
        self._bag.extend(self._discard)
        self._discard.clear()
        shuffle_in_place(self._bag, self.rng)
        self.bus.emit(GemEvent.RECYCLED, count=count, bag_size=len(self._bag))
        logger.debug("Recycled %d discarded gems into the bag", count)
        return count

    # ----- PERSISTENCE -----

    def to_dict(self) -> Dict[str, object]:
        """Zone ids plus the instance records needed to rebuild them."""
        data: Dict[str, object] = dict(self.snapshot().zone_ids())
        data["instances"] = {g.instance_id: g.to_dict() for g in self.all_instances()}
        return data

    def load_zones(
        self,
        bag: Iterable[GemInstance] = (),
        hand: Iterable[GemInstance] = (),
        discard: Iterable[GemInstance] = (),
        played: Iterable[GemInstance] = (),
    ) -> None:
        """
        Replace all zones at once (restoring a save or setting up a scenario).

        Raises:
            SnapshotError: hand larger than 3 or an instance id appears twice
        """
        zones = [list(bag), list(hand), list(discard), list(played)]
        if len(zones[1]) > MAX_HAND_SIZE:
            raise SnapshotError(f"Hand holds {len(zones[1])} gems, maximum is {MAX_HAND_SIZE}")
        seen = set()
        for pile in zones:
            for gem in pile:
                if gem.instance_id in seen:
                    raise SnapshotError(f"Instance {gem.instance_id} appears more than once")
                seen.add(gem.instance_id)
        self._bag, self._hand, self._discard, self._played = zones

    def load_dict(self, data: Dict[str, object]) -> None:
        """
        Restore zones from `to_dict()` output.

        Raises:
            SnapshotError: missing instance table, dangling zone ids, unknown
                templates, duplicates or an oversize hand
        """
        records = data.get("instances")
        if not isinstance(records, dict):
            raise SnapshotError("Snapshot has no 'instances' table")
        instances = {iid: GemInstance.from_dict(rec) for iid, rec in records.items()}
        unknown = sorted({
            g.template_id for g in instances.values() if g.template_id not in self.ledger.templates
        })
        if unknown:
            raise SnapshotError(f"Snapshot references unknown gem templates: {unknown}")

        def zone(name: str) -> List[GemInstance]:
            ids = data.get(name, [])
            if not isinstance(ids, list):
                raise SnapshotError(f"Zone '{name}' must be a list of instance ids")
            missing = [iid for iid in ids if iid not in instances]
            if missing:
                raise SnapshotError(f"Zone '{name}' references unknown instances: {missing}")
            return [instances[iid] for iid in ids]

        self.load_zones(
            bag=zone(Zone.BAG.value),
            hand=zone(Zone.HAND.value),
            discard=zone(Zone.DISCARD.value),
            played=zone(Zone.PLAYED.value),
        )

    def __repr__(self) -> str:
        return (
            f"PoolManager(bag={len(self._bag)}, hand={len(self._hand)}, "
            f"discard={len(self._discard)}, played={len(self._played)})"
        )
