"""
Shop Handler Tests
"""

import pytest

from packages.gembag.content.classes import PlayerClass
from packages.gembag.handlers.shop_handler import ShopAction, ShopActionType, ShopHandler
from packages.gembag.session import GemSession


@pytest.fixture
def session():
    session = GemSession(seed=21)
    session.new_run(PlayerClass.MAGE)
    return session


def action_types(actions):
    return {a.action_type for a in actions}


class TestAvailableActions:

    def test_broke_player_can_only_leave(self, session):
        actions = ShopHandler.get_available_actions(session)
        assert actions == [ShopAction(action_type=ShopActionType.LEAVE)]

    def test_full_collection_hides_buy(self, session):
        session.wallet.earn(10)
        types = action_types(ShopHandler.get_available_actions(session))
        assert ShopActionType.REMOVE_GEM in types
        assert ShopActionType.BUY_RANDOM_GEM not in types

    def test_remove_listed_per_bag_gem(self, session):
        session.wallet.earn(3)
        removals = [
            a for a in ShopHandler.get_available_actions(session)
            if a.action_type == ShopActionType.REMOVE_GEM
        ]
        assert len(removals) == 20

    def test_upgrades_listed_for_hand(self, session):
        session.start_battle()
        session.wallet.earn(5)
        upgrades = [
            a for a in ShopHandler.get_available_actions(session)
            if a.action_type == ShopActionType.UPGRADE_GEM
        ]
        hand_ids = {g.instance_id for g in session.pool.hand}
        assert upgrades
        assert {a.instance_id for a in upgrades} == hand_ids


class TestExecute:

    def test_leave(self, session):
        result = ShopHandler.execute_action(ShopAction(ShopActionType.LEAVE), session)
        assert result.success
        assert result.left_shop

    def test_remove_gem(self, session):
        session.wallet.earn(4)
        target = session.pool.bag[0]
        result = ShopHandler.execute_action(
            ShopAction(ShopActionType.REMOVE_GEM, instance_id=target.instance_id), session
        )
        assert result.success
        assert result.zenny_spent == 3
        assert session.wallet.zenny == 1
        assert session.pool.find(target.instance_id) is None

    def test_remove_missing_gem_costs_nothing(self, session):
        session.wallet.earn(3)
        result = ShopHandler.execute_action(
            ShopAction(ShopActionType.REMOVE_GEM, instance_id="ghost"), session
        )
        assert not result.success
        assert session.wallet.zenny == 3

    def test_buy_full_collection(self, session):
        session.wallet.earn(3)
        result = ShopHandler.execute_action(ShopAction(ShopActionType.BUY_RANDOM_GEM), session)
        assert not result.success
        assert "full" in result.message
        assert session.wallet.zenny == 3

    def test_buy_after_removal(self, session):
        session.wallet.earn(6)
        session.remove_gem(session.pool.bag[0].instance_id)
        result = ShopHandler.execute_action(ShopAction(ShopActionType.BUY_RANDOM_GEM), session)
        assert result.success
        assert session.wallet.zenny == 3
        assert session.pool.collection_size == 20
        assert session.pool.find(result.instance_id) is not None

    def test_not_enough_zenny(self, session):
        session.wallet.earn(2)
        target = session.pool.bag[0]
        result = ShopHandler.execute_action(
            ShopAction(ShopActionType.REMOVE_GEM, instance_id=target.instance_id), session
        )
        assert not result.success
        assert result.message == "Not enough zenny"
        assert session.pool.find(target.instance_id) is not None

    def test_upgrade_gem(self, session):
        session.start_battle()
        session.wallet.earn(5)
        target = session.pool.hand[0]
        result = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=target.instance_id, option_index=0),
            session,
        )
        assert result.success
        assert result.zenny_spent == 5
        assert session.wallet.zenny == 0
        upgraded = session.pool.hand[0]
        assert upgraded.instance_id == result.instance_id
        assert upgraded.augmentation_id == "powerful"
        assert upgraded.template_id == target.template_id

    def test_upgrade_bad_option(self, session):
        session.start_battle()
        session.wallet.earn(5)
        target = session.pool.hand[0]
        result = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=target.instance_id, option_index=99),
            session,
        )
        assert not result.success
        assert session.wallet.zenny == 5
        assert session.pool.hand[0] == target

    def test_upgrade_once_per_visit(self, session):
        session.start_battle()
        session.wallet.earn(10)
        target = session.pool.hand[0]
        first = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=target.instance_id, option_index=0),
            session,
        )
        assert first.success

        listed = {
            a.instance_id for a in ShopHandler.get_available_actions(session)
            if a.action_type == ShopActionType.UPGRADE_GEM
        }
        assert first.instance_id not in listed

        again = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=first.instance_id, option_index=0),
            session,
        )
        assert not again.success
        assert again.message == "Gem already upgraded this visit"
        assert session.wallet.zenny == 5

    def test_leaving_allows_upgrade_next_visit(self, session):
        session.start_battle()
        session.wallet.earn(10)
        target = session.pool.hand[0]
        first = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=target.instance_id, option_index=0),
            session,
        )
        ShopHandler.execute_action(ShopAction(ShopActionType.LEAVE), session)
        second = ShopHandler.execute_action(
            ShopAction(ShopActionType.UPGRADE_GEM, instance_id=first.instance_id, option_index=0),
            session,
        )
        assert second.success
        assert session.wallet.zenny == 0
