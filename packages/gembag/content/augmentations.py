"""
Augmentation Definitions.

An augmentation is a small list of effect descriptors composed onto a gem
template by the factory. Each descriptor names the instance field it touches
and the operation applied to it, so a new augmentation is pure data:

    AugmentEffect("value", EffectOp.MULTIPLY_FLOOR, 1.5)   # floor(value * 1.5)
    AugmentEffect("cost", EffectOp.SUBTRACT_MIN_ONE, 1)    # max(1, cost - 1)
    AugmentEffect("defense_bypass", EffectOp.SET, 0.5)
    AugmentEffect("special_effect", EffectOp.SET, SpecialEffect.DRAW)
    AugmentEffect("duration", EffectOp.ADD_IF_PRESENT, 1)  # only if base has one
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
from enum import Enum

from .gems import SpecialEffect
from ..errors import UnknownAugmentationError


class EffectOp(Enum):
    """How an effect descriptor changes its field."""
    MULTIPLY_FLOOR = "multiply_floor"
    SUBTRACT_MIN_ONE = "subtract_min_one"
    SET = "set"
    ADD_IF_PRESENT = "add_if_present"


@dataclass(frozen=True)
class AugmentEffect:
    """One {field, operation} descriptor."""
    field: str
    op: EffectOp
    amount: Any

    def apply(self, current: Any) -> Any:
        if self.op == EffectOp.MULTIPLY_FLOOR:
            return math.floor(current * self.amount)
        if self.op == EffectOp.SUBTRACT_MIN_ONE:
            return max(1, current - self.amount)
        if self.op == EffectOp.SET:
            return self.amount
        if self.op == EffectOp.ADD_IF_PRESENT:
            return None if current is None else current + self.amount
        raise ValueError(f"Unknown effect op: {self.op}")


@dataclass(frozen=True)
class AugmentationTemplate:
    """An augmentation definition."""
    id: str
    name_prefix: str
    badge_icon: str
    description: str
    effects: Tuple[AugmentEffect, ...]

    def __post_init__(self):
        if not self.effects:
            raise ValueError(f"Augmentation {self.id} defines no effects")

    def compose(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Return a new field dict with every effect applied in order."""
        result = dict(fields)
        for effect in self.effects:
            result[effect.field] = effect.apply(result.get(effect.field))
        return result

    @property
    def grants_draw_on_play(self) -> bool:
        return any(
            e.field == "special_effect" and e.amount == SpecialEffect.DRAW
            for e in self.effects
        )


POWERFUL = AugmentationTemplate(
    id="powerful",
    name_prefix="Powerful ",
    badge_icon="💪",
    description="Powerful: 50% more value.",
    effects=(AugmentEffect("value", EffectOp.MULTIPLY_FLOOR, 1.5),),
)

PIERCING = AugmentationTemplate(
    id="piercing",
    name_prefix="Piercing ",
    badge_icon="🎯",
    description="Piercing: bypasses 50% of enemy defense.",
    effects=(AugmentEffect("defense_bypass", EffectOp.SET, 0.5),),
)

EFFICIENT = AugmentationTemplate(
    id="efficient",
    name_prefix="Efficient ",
    badge_icon="🔋",
    description="Efficient: costs 1 less stamina (minimum 1).",
    effects=(AugmentEffect("cost", EffectOp.SUBTRACT_MIN_ONE, 1),),
)

LASTING = AugmentationTemplate(
    id="lasting",
    name_prefix="Lasting ",
    badge_icon="⏳",
    description="Lasting: effect lasts 1 more turn.",
    effects=(AugmentEffect("duration", EffectOp.ADD_IF_PRESENT, 1),),
)

SWIFT = AugmentationTemplate(
    id="swift",
    name_prefix="Swift ",
    badge_icon="💨",
    description="Swift: draw a gem when played.",
    effects=(AugmentEffect("special_effect", EffectOp.SET, SpecialEffect.DRAW),),
)


AUGMENTATIONS: Dict[str, AugmentationTemplate] = {
    a.id: a for a in [POWERFUL, PIERCING, EFFICIENT, LASTING, SWIFT]
}


def get_augmentation(
    augmentation_id: str,
    augmentations: Optional[Dict[str, AugmentationTemplate]] = None,
) -> AugmentationTemplate:
    """Look up an augmentation by id."""
    catalog = AUGMENTATIONS if augmentations is None else augmentations
    if augmentation_id not in catalog:
        raise UnknownAugmentationError(augmentation_id)
    return catalog[augmentation_id]
