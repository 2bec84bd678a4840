"""
Gem Template Definitions.

Templates are static: the factory derives concrete GemInstance objects from
them and never writes back. Template structure:
- value: damage, heal, shield or poison amount depending on kind
- cost: stamina cost to play
- duration: turns a shield/poison effect lasts (None for instant gems)
- special_effect: extra effect on play (DRAW = draw one more gem)
- base_mastery: success percentage before any successful use

Base and class starter gems start fully mastered. Advanced (unlockable) gems
start at 90%.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
from enum import Enum

from ..errors import UnknownTemplateError


class GemColor(Enum):
    """Gem colors. Red/blue/green map to a class, grey is shared."""
    RED = "red"
    BLUE = "blue"
    GREEN = "green"
    GREY = "grey"


class GemKind(Enum):
    """What a gem does when the battle resolver applies it."""
    ATTACK = "attack"
    HEAL = "heal"
    SHIELD = "shield"
    POISON = "poison"


class SpecialEffect(Enum):
    """Extra effects triggered when a gem is played."""
    DRAW = "draw"  # Draw an extra gem


@dataclass(frozen=True)
class GemTemplate:
    """A gem definition."""
    id: str
    name: str
    color: GemColor
    kind: GemKind
    value: int
    cost: int
    duration: Optional[int] = None
    special_effect: Optional[SpecialEffect] = None
    base_mastery: int = 100
    icon: str = ""
    description: str = ""

    @property
    def is_grey(self) -> bool:
        return self.color == GemColor.GREY


# ============ BASE GEMS (shared by every class) ============

RED_ATTACK = GemTemplate(
    id="red-attack", name="Red Attack", color=GemColor.RED, kind=GemKind.ATTACK,
    value=10, cost=2, icon="🗡️",
    description="Deal 10 damage to the enemy.",
)

BLUE_MAGIC = GemTemplate(
    id="blue-magic", name="Blue Magic", color=GemColor.BLUE, kind=GemKind.ATTACK,
    value=10, cost=2, icon="✨",
    description="Deal 10 magic damage to the enemy.",
)

GREEN_ATTACK = GemTemplate(
    id="green-attack", name="Green Attack", color=GemColor.GREEN, kind=GemKind.ATTACK,
    value=8, cost=1, icon="🗡️",
    description="Deal 8 damage to the enemy.",
)

GREY_HEAL = GemTemplate(
    id="grey-heal", name="Heal", color=GemColor.GREY, kind=GemKind.HEAL,
    value=8, cost=1, icon="💚",
    description="Heal 8 health points.",
)

# ============ CLASS STARTER GEMS ============

RED_STRONG = GemTemplate(
    id="red-strong", name="Strong Attack", color=GemColor.RED, kind=GemKind.ATTACK,
    value=15, cost=2, icon="⚔️",
    description="Deal 15 damage to the enemy.",
)

BLUE_STRONG_HEAL = GemTemplate(
    id="blue-strong-heal", name="Strong Heal", color=GemColor.BLUE, kind=GemKind.HEAL,
    value=12, cost=2, icon="❤️",
    description="Heal 12 health points.",
)

GREEN_QUICK = GemTemplate(
    id="green-quick", name="Quick Attack", color=GemColor.GREEN, kind=GemKind.ATTACK,
    value=8, cost=1, special_effect=SpecialEffect.DRAW, icon="🏃",
    description="Deal 8 damage and draw a gem.",
)

# ============ ADVANCED GEMS (unlockable) ============

RED_BURST = GemTemplate(
    id="red-burst", name="Burst Attack", color=GemColor.RED, kind=GemKind.ATTACK,
    value=20, cost=3, base_mastery=90, icon="💥",
    description="Deal 20 damage to the enemy.",
)

BLUE_SHIELD = GemTemplate(
    id="blue-shield", name="Shield", color=GemColor.BLUE, kind=GemKind.SHIELD,
    value=15, cost=2, duration=2, base_mastery=90, icon="🛡️",
    description="Gain 15 defense for 2 turns.",
)

GREEN_POISON = GemTemplate(
    id="green-poison", name="Poison", color=GemColor.GREEN, kind=GemKind.POISON,
    value=4, cost=2, duration=3, base_mastery=90, icon="☠️",
    description="Apply 4 poison damage per turn for 3 turns.",
)

GREEN_BACKSTAB = GemTemplate(
    id="green-backstab", name="Backstab", color=GemColor.GREEN, kind=GemKind.ATTACK,
    value=12, cost=2, base_mastery=90, icon="🗡️",
    description="Deal 12 damage. Double damage against a poisoned enemy.",
)


GEM_TEMPLATES: Dict[str, GemTemplate] = {
    t.id: t for t in [
        RED_ATTACK, BLUE_MAGIC, GREEN_ATTACK, GREY_HEAL,
        RED_STRONG, BLUE_STRONG_HEAL, GREEN_QUICK,
        RED_BURST, BLUE_SHIELD, GREEN_POISON, GREEN_BACKSTAB,
    ]
}


def get_template(template_id: str, templates: Optional[Dict[str, GemTemplate]] = None) -> GemTemplate:
    """Look up a template by id."""
    catalog = GEM_TEMPLATES if templates is None else templates
    if template_id not in catalog:
        raise UnknownTemplateError(template_id)
    return catalog[template_id]


def get_templates_by_color(color: GemColor, templates: Optional[Dict[str, GemTemplate]] = None) -> List[GemTemplate]:
    catalog = GEM_TEMPLATES if templates is None else templates
    return [t for t in catalog.values() if t.color == color]
