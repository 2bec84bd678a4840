"""
Content module - Static gem data definitions.

Contains gem templates, augmentations, and player class tables.
"""

# Gems
from .gems import (
    GemTemplate, GemColor, GemKind, SpecialEffect,
    GEM_TEMPLATES, get_template, get_templates_by_color,
)

# Augmentations
from .augmentations import (
    AugmentationTemplate, AugmentEffect, EffectOp,
    AUGMENTATIONS, POWERFUL, PIERCING, EFFICIENT, LASTING, SWIFT,
    get_augmentation,
)

# Classes
from .classes import (
    PlayerClass, CLASS_COLORS,
    BASE_STARTER_GEMS, CLASS_STARTER_GEMS, CLASS_UPGRADES, ADVANCED_GEMS,
    get_player_class, get_class_gems, get_class_upgrade,
)

__all__ = [
    # Gems
    "GemTemplate", "GemColor", "GemKind", "SpecialEffect",
    "GEM_TEMPLATES", "get_template", "get_templates_by_color",
    # Augmentations
    "AugmentationTemplate", "AugmentEffect", "EffectOp",
    "AUGMENTATIONS", "POWERFUL", "PIERCING", "EFFICIENT", "LASTING", "SWIFT",
    "get_augmentation",
    # Classes
    "PlayerClass", "CLASS_COLORS",
    "BASE_STARTER_GEMS", "CLASS_STARTER_GEMS", "CLASS_UPGRADES", "ADVANCED_GEMS",
    "get_player_class", "get_class_gems", "get_class_upgrade",
]
