"""
Gem instances - concrete gems that live in the bag, hand, discard or played pile.

Gems are tracked by instance, not just template id, because:
- Augmentations are per-gem
- Mastery is captured per-gem at creation time
- Shop removal and upgrades target one specific gem
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..content.gems import GemColor, GemKind, SpecialEffect


@dataclass(frozen=True)
class GemInstance:
    """A uniquely identified gem derived from a template (and maybe an augmentation)."""
    instance_id: str
    template_id: str
    name: str
    color: GemColor
    kind: GemKind
    value: int
    cost: int
    mastery_snapshot: int
    duration: Optional[int] = None
    special_effect: Optional[SpecialEffect] = None
    defense_bypass: float = 0.0
    augmentation_id: Optional[str] = None
    icon: str = ""
    badge_icon: Optional[str] = None
    tooltip: str = ""

    @property
    def draws_on_play(self) -> bool:
        return self.special_effect == SpecialEffect.DRAW

    @property
    def is_augmented(self) -> bool:
        return self.augmentation_id is not None

    def __repr__(self) -> str:
        return f"{self.name}[{self.instance_id}]"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary (for saving)."""
        return {
            "instance_id": self.instance_id,
            "template_id": self.template_id,
            "name": self.name,
            "color": self.color.value,
            "kind": self.kind.value,
            "value": self.value,
            "cost": self.cost,
            "mastery_snapshot": self.mastery_snapshot,
            "duration": self.duration,
            "special_effect": self.special_effect.value if self.special_effect else None,
            "defense_bypass": self.defense_bypass,
            "augmentation_id": self.augmentation_id,
            "icon": self.icon,
            "badge_icon": self.badge_icon,
            "tooltip": self.tooltip,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GemInstance":
        """Deserialize from dictionary (for loading)."""
        special = data.get("special_effect")
        return cls(
            instance_id=data["instance_id"],
            template_id=data["template_id"],
            name=data["name"],
            color=GemColor(data["color"]),
            kind=GemKind(data["kind"]),
            value=data["value"],
            cost=data["cost"],
            mastery_snapshot=data["mastery_snapshot"],
            duration=data.get("duration"),
            special_effect=SpecialEffect(special) if special else None,
            defense_bypass=data.get("defense_bypass", 0.0),
            augmentation_id=data.get("augmentation_id"),
            icon=data.get("icon", ""),
            badge_icon=data.get("badge_icon"),
            tooltip=data.get("tooltip", ""),
        )
