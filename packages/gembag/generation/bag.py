"""
Bag generation - the starting bag of a run and random gems bought in the shop.

Starting bag:
- 2 copies of each base starter gem
- 3 copies of each class starter gem
- random base/class starter gems until the bag reaches its size
- shuffled

Random gems favour the class color (weight 0.55 against 0.25 for each other
color, normalized) among templates the class has unlocked.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ..content.classes import BASE_STARTER_GEMS, CLASS_STARTER_GEMS, PlayerClass
from ..content.gems import GEM_TEMPLATES, GemColor, GemTemplate
from ..state.gem import GemInstance
from ..state.rng import RandomSource, choice, shuffle_in_place, weighted_choice
from ..state.unlocks import UnlockRegistry
from .factory import GemFactory

logger = logging.getLogger(__name__)

BASE_STARTER_COPIES = 2
CLASS_STARTER_COPIES = 3

CLASS_COLOR_WEIGHT = 0.55
OTHER_COLOR_WEIGHT = 0.25


def build_starting_bag(
    factory: GemFactory,
    player_class: PlayerClass,
    rng: RandomSource,
    size: int = 20,
) -> List[GemInstance]:
    """Create and shuffle the starting gems for a class."""
    class_gems = CLASS_STARTER_GEMS[player_class]
    bag: List[GemInstance] = []

    for template_id in BASE_STARTER_GEMS:
        for _ in range(BASE_STARTER_COPIES):
            bag.append(factory.create_instance(template_id))
    for template_id in class_gems:
        for _ in range(CLASS_STARTER_COPIES):
            bag.append(factory.create_instance(template_id))

    filler_types = BASE_STARTER_GEMS + class_gems
    while len(bag) < size:
        bag.append(factory.create_instance(choice(filler_types, rng)))

    shuffle_in_place(bag, rng)
    logger.info("Built starting bag for %s with %d gems", player_class.value, len(bag))
    return bag


def get_color_weights(player_class: PlayerClass) -> Dict[GemColor, float]:
    weights = {color: OTHER_COLOR_WEIGHT for color in GemColor}
    weights[player_class.color] = CLASS_COLOR_WEIGHT
    return weights


def roll_random_template(
    player_class: PlayerClass,
    registry: UnlockRegistry,
    rng: RandomSource,
    templates: Optional[Dict[str, GemTemplate]] = None,
) -> Optional[str]:
    """
    Pick a template for a random gem purchase.

    Only templates unlocked for the class are candidates. Returns None if the
    class has nothing unlocked.
    """
    catalog = GEM_TEMPLATES if templates is None else templates
    unlocked = registry.unlocked_for(player_class)
    by_color: Dict[GemColor, List[str]] = {}
    for template_id in sorted(unlocked):
        template = catalog.get(template_id)
        if template is not None:
            by_color.setdefault(template.color, []).append(template_id)

    if not by_color:
        return None

    weights = get_color_weights(player_class)
    colors = [c for c in GemColor if c in by_color]
    color = weighted_choice(colors, [weights[c] for c in colors], rng)
    return choice(by_color[color], rng)
