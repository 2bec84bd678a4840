"""
Player class tables.

Each class has an aligned gem color. Class tables drive:
- the starting bag (base starters + class starters)
- the class-specific upgrade offered for a base gem
- the advanced gems a class can unlock and later swap into
"""

from typing import Dict, List, Optional
from enum import Enum

from .gems import GemColor


class PlayerClass(Enum):
    KNIGHT = "knight"
    MAGE = "mage"
    ROGUE = "rogue"

    @property
    def color(self) -> GemColor:
        return CLASS_COLORS[self]


CLASS_COLORS: Dict[PlayerClass, GemColor] = {
    PlayerClass.KNIGHT: GemColor.RED,
    PlayerClass.MAGE: GemColor.BLUE,
    PlayerClass.ROGUE: GemColor.GREEN,
}

# Two copies of each in a fresh bag
BASE_STARTER_GEMS: List[str] = ["red-attack", "blue-magic", "green-attack", "grey-heal"]

# Three copies of each in a fresh bag
CLASS_STARTER_GEMS: Dict[PlayerClass, List[str]] = {
    PlayerClass.KNIGHT: ["red-strong"],
    PlayerClass.MAGE: ["blue-strong-heal"],
    PlayerClass.ROGUE: ["green-quick"],
}

# Base template -> class replacement offered at upgrade time
CLASS_UPGRADES: Dict[PlayerClass, Dict[str, str]] = {
    PlayerClass.KNIGHT: {"red-attack": "red-strong"},
    PlayerClass.MAGE: {"blue-magic": "blue-strong-heal"},
    PlayerClass.ROGUE: {"green-attack": "green-quick"},
}

# Advanced templates each class can unlock, in offer order
ADVANCED_GEMS: Dict[PlayerClass, List[str]] = {
    PlayerClass.KNIGHT: ["red-burst"],
    PlayerClass.MAGE: ["blue-shield"],
    PlayerClass.ROGUE: ["green-poison", "green-backstab"],
}


def get_player_class(name: str) -> PlayerClass:
    """Parse a class name (case-insensitive)."""
    try:
        return PlayerClass(name.lower())
    except ValueError:
        raise ValueError(f"Unknown player class: {name}") from None


def get_class_gems(player_class: PlayerClass) -> List[str]:
    """Templates a class starts with access to: base starters plus its own."""
    return BASE_STARTER_GEMS + CLASS_STARTER_GEMS[player_class]


def get_class_upgrade(player_class: PlayerClass, template_id: str) -> Optional[str]:
    return CLASS_UPGRADES.get(player_class, {}).get(template_id)
