"""
Unlock registry - which templates each class may use.

Two explicit scopes:
- per class: PlayerClass -> set of template ids
- global: grey templates, shared by every class
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Set

from ..content.classes import PlayerClass, CLASS_STARTER_GEMS, BASE_STARTER_GEMS
from ..content.gems import GEM_TEMPLATES


@dataclass
class UnlockRegistry:
    by_class: Dict[PlayerClass, Set[str]] = field(default_factory=dict)
    global_unlocks: Set[str] = field(default_factory=set)

    def is_unlocked(self, template_id: str, player_class: PlayerClass) -> bool:
        return template_id in self.global_unlocks or template_id in self.by_class.get(player_class, set())

    def unlocked_for(self, player_class: PlayerClass) -> Set[str]:
        return self.global_unlocks | self.by_class.get(player_class, set())

    def record_class(self, template_id: str, player_class: PlayerClass) -> None:
        self.by_class.setdefault(player_class, set()).add(template_id)

    def record_global(self, template_id: str) -> None:
        self.global_unlocks.add(template_id)

    def copy(self) -> "UnlockRegistry":
        return UnlockRegistry(
            by_class={cls: set(ids) for cls, ids in self.by_class.items()},
            global_unlocks=set(self.global_unlocks),
        )

    def to_dict(self) -> dict:
        return {
            "by_class": {cls.value: sorted(ids) for cls, ids in self.by_class.items()},
            "global": sorted(self.global_unlocks),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "UnlockRegistry":
        return cls(
            by_class={PlayerClass(name): set(ids) for name, ids in data.get("by_class", {}).items()},
            global_unlocks=set(data.get("global", [])),
        )

    @classmethod
    def with_starters(cls, classes: Iterable[PlayerClass] = tuple(PlayerClass)) -> "UnlockRegistry":
        """Registry where every class has its starting gems unlocked."""
        registry = cls()
        for player_class in classes:
            for template_id in BASE_STARTER_GEMS + CLASS_STARTER_GEMS[player_class]:
                template = GEM_TEMPLATES[template_id]
                if template.is_grey:
                    registry.record_global(template_id)
                else:
                    registry.record_class(template_id, player_class)
        return registry
