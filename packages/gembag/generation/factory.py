"""
Gem Instance Factory.

Builds GemInstance objects from a template plus an optional augmentation.
Composition is pure: catalogs are read, never written, and each call returns a
fresh instance with an id that is never reused. With an injected RandomSource
the id suffix is drawn from it, so a seeded run reproduces its ids.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from uuid import uuid4

from ..content.augmentations import AUGMENTATIONS, AugmentationTemplate, get_augmentation
from ..content.gems import GEM_TEMPLATES, GemTemplate, get_template
from ..state.gem import GemInstance
from ..state.mastery import MasteryLedger
from ..state.rng import RandomSource

logger = logging.getLogger(__name__)


_ID_SUFFIX_MAX = (1 << 48) - 1


def new_instance_id(template_id: str, rng: Optional[RandomSource] = None) -> str:
    if rng is None:
        return f"{template_id}-{uuid4().hex[:12]}"
    return f"{template_id}-{rng.random_int(_ID_SUFFIX_MAX):012x}"


class GemFactory:
    """Creates gem instances, snapshotting mastery from the ledger."""

    def __init__(
        self,
        ledger: MasteryLedger,
        templates: Optional[Dict[str, GemTemplate]] = None,
        augmentations: Optional[Dict[str, AugmentationTemplate]] = None,
        rng: Optional[RandomSource] = None,
    ):
        self.ledger = ledger
        self.rng = rng
        self.templates = GEM_TEMPLATES if templates is None else templates
        self.augmentations = AUGMENTATIONS if augmentations is None else augmentations

    def get_template(self, template_id: str) -> GemTemplate:
        return get_template(template_id, self.templates)

    def create_instance(self, template_id: str, augmentation_id: Optional[str] = None) -> GemInstance:
        """
        Create a new gem.

        Raises:
            UnknownTemplateError: template_id is not in the catalog
            UnknownAugmentationError: augmentation_id is not in the catalog
        """
        template = get_template(template_id, self.templates)
        augmentation = None
        if augmentation_id is not None:
            augmentation = get_augmentation(augmentation_id, self.augmentations)

        fields: Dict[str, Any] = {
            "value": template.value,
            "cost": template.cost,
            "duration": template.duration,
            "special_effect": template.special_effect,
            "defense_bypass": 0.0,
        }
        name = template.name
        tooltip = template.description
        badge = None

        if augmentation is not None:
            fields = augmentation.compose(fields)
            name = augmentation.name_prefix + template.name
            tooltip = f"{template.description} {augmentation.description}".strip()
            badge = augmentation.badge_icon

        instance = GemInstance(
            instance_id=new_instance_id(template.id, self.rng),
            template_id=template.id,
            name=name,
            color=template.color,
            kind=template.kind,
            value=fields["value"],
            cost=fields["cost"],
            mastery_snapshot=self.ledger.get_mastery(template.id),
            duration=fields["duration"],
            special_effect=fields["special_effect"],
            defense_bypass=fields["defense_bypass"],
            augmentation_id=augmentation.id if augmentation else None,
            icon=template.icon,
            badge_icon=badge,
            tooltip=tooltip,
        )
        logger.debug("Created %r", instance)
        return instance
