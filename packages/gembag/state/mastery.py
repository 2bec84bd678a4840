"""
Mastery Ledger - learned success percentage per gem template.

Mastery only grows: each successful play of a template raises it by a fixed
step until the cap. Instances capture mastery when they are created
(GemInstance.mastery_snapshot), so ledger changes only affect gems created
afterwards.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, TYPE_CHECKING

from ..config import EngineConfig, DEFAULT_CONFIG
from ..content.gems import GEM_TEMPLATES, GemTemplate, get_template
from ..events import GemEvent

if TYPE_CHECKING:
    from ..events import EventBus

logger = logging.getLogger(__name__)


class MasteryLedger:
    """template_id -> mastery percentage."""

    def __init__(
        self,
        templates: Optional[Dict[str, GemTemplate]] = None,
        config: EngineConfig = DEFAULT_CONFIG,
        bus: Optional[EventBus] = None,
    ):
        self.templates = GEM_TEMPLATES if templates is None else templates
        self.config = config
        self.step = config.mastery_step
        self.cap = config.mastery_cap
        self.bus = bus
        self._values: Dict[str, int] = {}

    def get_mastery(self, template_id: str) -> int:
        """Current mastery, defaulting to the template's base mastery."""
        if template_id in self._values:
            return self._values[template_id]
        return get_template(template_id, self.templates).base_mastery

    def record_success(self, template_id: str) -> Optional[int]:
        """
        Raise mastery by one step after a successful play.

        Returns the new value, or None when already at or above the cap.
        """
        current = self.get_mastery(template_id)
        if current >= self.cap:
            return None

        new_value = min(self.cap, current + self.step)
        self._values[template_id] = new_value
        logger.debug("Mastery for %s: %d -> %d", template_id, current, new_value)

        if self.bus is not None:
            self.bus.emit(
                GemEvent.MASTERY_CHANGED,
                template_id=template_id,
                old_value=current,
                new_value=new_value,
            )
        return new_value

    def is_mastered(self, template_id: str) -> bool:
        return self.get_mastery(template_id) >= self.cap

    def recorded(self) -> Dict[str, int]:
        """Copy of explicitly recorded values (templates at base are omitted)."""
        return dict(self._values)

    # ----- PERSISTENCE -----

    def to_dict(self) -> Dict[str, int]:
        return dict(self._values)

    def load(self, data: Dict[str, int]) -> None:
        """
        Replace recorded values. Unknown templates are rejected.

        Values are clamped to 0..cap (or the template base, if that is higher).
        """
        values = {}
        for template_id, value in data.items():
            template = get_template(template_id, self.templates)
            ceiling = max(self.cap, template.base_mastery)
            values[template_id] = max(0, min(ceiling, int(value)))
        self._values = values

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, int],
        templates: Optional[Dict[str, GemTemplate]] = None,
        config: EngineConfig = DEFAULT_CONFIG,
        bus: Optional[EventBus] = None,
    ) -> MasteryLedger:
        ledger = cls(templates=templates, config=config, bus=bus)
        ledger.load(data)
        return ledger

    def __repr__(self) -> str:
        return f"MasteryLedger(step={self.step}, cap={self.cap}, recorded={self._values})"
