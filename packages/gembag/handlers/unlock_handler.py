"""
Unlock Gate - permanent template unlocks paid for with zenny.

Checks run in order and the first failure raises; nothing is debited or
recorded unless all of them pass:
1. eligibility: grey templates suit any class, colored ones need the class color
2. not already unlocked in the template's scope (global for grey, else class)
3. wallet balance covers the cost
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional, TYPE_CHECKING

from ..config import EngineConfig, DEFAULT_CONFIG
from ..content.classes import PlayerClass
from ..content.gems import GEM_TEMPLATES, GemTemplate, get_template
from ..errors import AlreadyUnlockedError, InsufficientFundsError, NotEligibleError
from ..events import GemEvent
from ..state.unlocks import UnlockRegistry
from ..state.wallet import Wallet

if TYPE_CHECKING:
    from ..events import EventBus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnlockResult:
    template_id: str
    player_class: PlayerClass
    cost: int
    is_global: bool
    remaining_zenny: int


class UnlockGate:
    """Validates and records template unlocks."""

    def __init__(
        self,
        registry: UnlockRegistry,
        templates: Optional[Dict[str, GemTemplate]] = None,
        config: EngineConfig = DEFAULT_CONFIG,
        bus: Optional[EventBus] = None,
    ):
        self.registry = registry
        self.templates = GEM_TEMPLATES if templates is None else templates
        self.config = config
        self.bus = bus

    def is_eligible(self, template: GemTemplate, player_class: PlayerClass) -> bool:
        return template.is_grey or template.color == player_class.color

    def can_unlock(self, template_id: str, player_class: PlayerClass, wallet: Wallet, cost: Optional[int] = None) -> bool:
        try:
            self._validate(template_id, player_class, wallet, self._cost(cost))
        except (NotEligibleError, AlreadyUnlockedError, InsufficientFundsError):
            return False
        return True

    def unlock(
        self,
        template_id: str,
        player_class: PlayerClass,
        wallet: Wallet,
        cost: Optional[int] = None,
    ) -> UnlockResult:
        """
        Unlock a template for a class (or globally for grey templates).

        Raises:
            UnknownTemplateError: template_id not in the catalog
            NotEligibleError: colored template outside the class color
            AlreadyUnlockedError: already unlocked in scope
            InsufficientFundsError: wallet.zenny < cost
        """
        cost = self._cost(cost)
        template = self._validate(template_id, player_class, wallet, cost)

        wallet.spend(cost)
        if template.is_grey:
            self.registry.record_global(template_id)
        else:
            self.registry.record_class(template_id, player_class)

        logger.info("Unlocked %s for %s (cost %d)", template_id, player_class.value, cost)
        if self.bus is not None:
            self.bus.emit(
                GemEvent.UNLOCKED,
                template_id=template_id,
                player_class=player_class,
                cost=cost,
                is_global=template.is_grey,
            )

        return UnlockResult(
            template_id=template_id,
            player_class=player_class,
            cost=cost,
            is_global=template.is_grey,
            remaining_zenny=wallet.zenny,
        )

    def _cost(self, cost: Optional[int]) -> int:
        cost = self.config.unlock_cost if cost is None else cost
        if cost < 0:
            raise ValueError("unlock cost cannot be negative")
        return cost

    def _validate(self, template_id: str, player_class: PlayerClass, wallet: Wallet, cost: int) -> GemTemplate:
        template = get_template(template_id, self.templates)

        if not self.is_eligible(template, player_class):
            raise NotEligibleError(f"{template.name} cannot be unlocked by {player_class.value}")

        if template.is_grey:
            already = template_id in self.registry.global_unlocks
        else:
            already = template_id in self.registry.by_class.get(player_class, set())
        if already:
            raise AlreadyUnlockedError(f"{template.name} is already unlocked")

        if not wallet.can_afford(cost):
            raise InsufficientFundsError(cost, wallet.zenny)

        return template
