"""
Shop Handler - gem shop visited between battles.

Services (prices from EngineConfig, in zenny):
- Buy a random gem of the class's unlocked templates (3)
- Remove a gem from the bag permanently (3)
- Upgrade a gem in the hand with one of its upgrade options (5); each
  upgraded gem can be upgraded again only on a later visit

Failures (not enough zenny, full collection, unknown gem) come back as a
ShopResult with success=False; nothing is spent unless the action goes through.

Usage:
    actions = ShopHandler.get_available_actions(session)
    result = ShopHandler.execute_action(actions[0], session)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, TYPE_CHECKING
from enum import Enum, auto

from ..errors import CollectionFullError

if TYPE_CHECKING:
    from ..session import GemSession

logger = logging.getLogger(__name__)


class ShopActionType(Enum):
    """Types of actions available in the shop."""
    BUY_RANDOM_GEM = auto()
    REMOVE_GEM = auto()
    UPGRADE_GEM = auto()
    LEAVE = auto()


@dataclass(frozen=True)
class ShopAction:
    """
    An action that can be taken in the shop.

    instance_id: gem to remove (bag) or upgrade (hand)
    option_index: which upgrade option to commit
    """
    action_type: ShopActionType
    instance_id: str = ""
    option_index: int = -1


@dataclass
class ShopResult:
    """Result of a shop transaction."""
    success: bool
    action_type: ShopActionType
    instance_id: str = ""
    gem_name: str = ""
    zenny_spent: int = 0
    message: str = ""
    left_shop: bool = False


class ShopHandler:
    """Handles all gem shop interactions."""

    @staticmethod
    def get_available_actions(session: "GemSession") -> List[ShopAction]:
        """
        All shop actions the player can currently afford.

        Upgrade actions are listed per hand gem and option, skipping gems
        already upgraded during this visit.
        """
        config = session.config
        zenny = session.wallet.zenny
        actions = [ShopAction(action_type=ShopActionType.LEAVE)]

        if zenny >= config.shop_buy_cost and session.pool.collection_size < config.max_collection_size:
            actions.append(ShopAction(action_type=ShopActionType.BUY_RANDOM_GEM))

        if zenny >= config.shop_remove_cost:
            for gem in session.pool.bag:
                actions.append(ShopAction(
                    action_type=ShopActionType.REMOVE_GEM,
                    instance_id=gem.instance_id,
                ))

        if zenny >= config.shop_upgrade_cost and session.player_class is not None:
            for gem in session.pool.hand:
                if gem.instance_id in session.upgraded_this_visit:
                    continue
                options = session.upgrade_options(gem.instance_id)
                for idx in range(len(options)):
                    actions.append(ShopAction(
                        action_type=ShopActionType.UPGRADE_GEM,
                        instance_id=gem.instance_id,
                        option_index=idx,
                    ))

        return actions

    @staticmethod
    def execute_action(action: ShopAction, session: "GemSession") -> ShopResult:
        if action.action_type == ShopActionType.LEAVE:
            session.upgraded_this_visit.clear()
            return ShopResult(
                success=True,
                action_type=action.action_type,
                message="Left the shop",
                left_shop=True,
            )

        elif action.action_type == ShopActionType.BUY_RANDOM_GEM:
            return ShopHandler._buy_random_gem(action, session)

        elif action.action_type == ShopActionType.REMOVE_GEM:
            return ShopHandler._remove_gem(action, session)

        elif action.action_type == ShopActionType.UPGRADE_GEM:
            return ShopHandler._upgrade_gem(action, session)

        return ShopResult(
            success=False,
            action_type=action.action_type,
            message="Unknown action type",
        )

    @staticmethod
    def _buy_random_gem(action: ShopAction, session: "GemSession") -> ShopResult:
        cost = session.config.shop_buy_cost
        if not session.wallet.can_afford(cost):
            return ShopHandler._not_enough_zenny(action)

        try:
            gem = session.buy_random_gem()
        except CollectionFullError as e:
            return ShopResult(success=False, action_type=action.action_type, message=str(e))

        if gem is None:
            return ShopResult(
                success=False,
                action_type=action.action_type,
                message="No gems available to buy",
            )

        session.wallet.spend(cost)
        logger.info("Bought %s for %d zenny", gem.name, cost)
        return ShopResult(
            success=True,
            action_type=action.action_type,
            instance_id=gem.instance_id,
            gem_name=gem.name,
            zenny_spent=cost,
            message=f"Bought {gem.name}",
        )

    @staticmethod
    def _remove_gem(action: ShopAction, session: "GemSession") -> ShopResult:
        cost = session.config.shop_remove_cost
        if not session.wallet.can_afford(cost):
            return ShopHandler._not_enough_zenny(action)

        gem = session.remove_gem(action.instance_id)
        if gem is None:
            return ShopResult(
                success=False,
                action_type=action.action_type,
                instance_id=action.instance_id,
                message="Gem not found in bag",
            )

        session.wallet.spend(cost)
        logger.info("Removed %s for %d zenny", gem.name, cost)
        return ShopResult(
            success=True,
            action_type=action.action_type,
            instance_id=gem.instance_id,
            gem_name=gem.name,
            zenny_spent=cost,
            message=f"Removed {gem.name}",
        )

    @staticmethod
    def _upgrade_gem(action: ShopAction, session: "GemSession") -> ShopResult:
        cost = session.config.shop_upgrade_cost
        if not session.wallet.can_afford(cost):
            return ShopHandler._not_enough_zenny(action)

        if action.instance_id in session.upgraded_this_visit:
            return ShopResult(
                success=False,
                action_type=action.action_type,
                instance_id=action.instance_id,
                message="Gem already upgraded this visit",
            )

        options = session.upgrade_options(action.instance_id)
        option = options[action.option_index] if 0 <= action.option_index < len(options) else None
        if option is None:
            return ShopResult(
                success=False,
                action_type=action.action_type,
                instance_id=action.instance_id,
                message="Upgrade option not available",
            )

        old = session.commit_upgrade(action.instance_id, option)
        if old is None:
            return ShopResult(
                success=False,
                action_type=action.action_type,
                instance_id=action.instance_id,
                message="Gem not found in hand",
            )

        session.wallet.spend(cost)
        new_gem = option.candidate
        session.upgraded_this_visit.add(new_gem.instance_id)
        logger.info("Upgraded %s to %s for %d zenny", old, new_gem.name, cost)
        return ShopResult(
            success=True,
            action_type=action.action_type,
            instance_id=new_gem.instance_id,
            gem_name=new_gem.name,
            zenny_spent=cost,
            message=f"Upgraded to {new_gem.name}",
        )

    @staticmethod
    def _not_enough_zenny(action: ShopAction) -> ShopResult:
        return ShopResult(
            success=False,
            action_type=action.action_type,
            instance_id=action.instance_id,
            message="Not enough zenny",
        )
