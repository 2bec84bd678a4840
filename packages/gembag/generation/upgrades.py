"""
Upgrade Option Generator.

Produces candidate replacement gems for one gem in the hand. Options are
offered in a fixed order, each rule adding at most one option:

    (a) powerful    - always
    (b) piercing    - attack gems
    (c) efficient   - cost above 1
    (d) lasting     - gems with a duration
    (e) swift       - gems that do not already draw on play
    (f) class       - class replacement for this base template
    (g) unlocked    - first unlocked advanced gem of the same color for the class

Generating options never touches the pool zones or the catalogs. Committing a
choice goes through PoolManager.replace_in_hand.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional
from enum import Enum

from ..content.classes import ADVANCED_GEMS, PlayerClass, get_class_upgrade
from ..content.gems import GemKind
from ..state.gem import GemInstance
from ..state.pool import PoolManager
from ..state.unlocks import UnlockRegistry
from .factory import GemFactory

logger = logging.getLogger(__name__)


class UpgradeKind(Enum):
    AUGMENTATION = "augmentation"
    CLASS_SPECIFIC = "class_specific"
    UNLOCKED = "unlocked"


@dataclass(frozen=True)
class UpgradeOption:
    candidate: GemInstance
    upgrade_kind: UpgradeKind


class UpgradeOptionGenerator:
    def __init__(self, factory: GemFactory, registry: UnlockRegistry):
        self.factory = factory
        self.registry = registry

    def get_upgrade_options(
        self,
        pool: PoolManager,
        hand_instance_id: str,
        player_class: PlayerClass,
    ) -> List[UpgradeOption]:
        """Ordered upgrade options for a hand gem ([] if it is not in the hand)."""
        gem = pool.get_hand_gem(hand_instance_id)
        if gem is None:
            logger.warning("Gem not found in hand for upgrade options: %s", hand_instance_id)
            return []
        return self.options_for(gem, player_class)

    def options_for(self, gem: GemInstance, player_class: PlayerClass) -> List[UpgradeOption]:
        options: List[UpgradeOption] = []

        for augmentation_id in self._augmentations_for(gem):
            candidate = self.factory.create_instance(gem.template_id, augmentation_id)
            options.append(UpgradeOption(candidate, UpgradeKind.AUGMENTATION))

        class_template = get_class_upgrade(player_class, gem.template_id)
        if class_template is not None and class_template in self.factory.templates:
            candidate = self.factory.create_instance(class_template)
            options.append(UpgradeOption(candidate, UpgradeKind.CLASS_SPECIFIC))

        advanced = self._unlocked_advanced(gem, player_class)
        if advanced is not None:
            options.append(UpgradeOption(self.factory.create_instance(advanced), UpgradeKind.UNLOCKED))

        logger.debug("Generated %d upgrade options for %s", len(options), gem.name)
        return options

    @staticmethod
    def _augmentations_for(gem: GemInstance) -> List[str]:
        ids = ["powerful"]
        if gem.kind == GemKind.ATTACK:
            ids.append("piercing")
        if gem.cost > 1:
            ids.append("efficient")
        if gem.duration is not None:
            ids.append("lasting")
        if not gem.draws_on_play:
            ids.append("swift")
        return ids

    def _unlocked_advanced(self, gem: GemInstance, player_class: PlayerClass) -> Optional[str]:
        for template_id in ADVANCED_GEMS.get(player_class, []):
            template = self.factory.templates.get(template_id)
            if template is None or template.color != gem.color:
                continue
            if template_id == gem.template_id:
                continue
            if self.registry.is_unlocked(template_id, player_class):
                return template_id
        return None
