"""
Unlock Gate Tests

Eligibility, scope (class vs global) and zenny accounting.
"""

import pytest

from packages.gembag.config import EngineConfig
from packages.gembag.content.classes import PlayerClass
from packages.gembag.content.gems import GemColor, GemKind, GemTemplate, GEM_TEMPLATES
from packages.gembag.errors import (
    AlreadyUnlockedError, InsufficientFundsError, NotEligibleError, UnknownTemplateError,
)
from packages.gembag.events import EventBus, GemEvent
from packages.gembag.handlers.unlock_handler import UnlockGate
from packages.gembag.state.unlocks import UnlockRegistry
from packages.gembag.state.wallet import Wallet


@pytest.fixture
def registry():
    return UnlockRegistry.with_starters()


@pytest.fixture
def gate(registry):
    return UnlockGate(registry)


class TestRegistry:

    def test_starters(self, registry):
        assert registry.is_unlocked("red-strong", PlayerClass.KNIGHT)
        assert not registry.is_unlocked("red-strong", PlayerClass.MAGE)
        assert registry.is_unlocked("grey-heal", PlayerClass.ROGUE)
        assert "grey-heal" in registry.global_unlocks

    def test_base_colored_starters_are_per_class(self, registry):
        assert "red-attack" in registry.by_class[PlayerClass.MAGE]
        assert "red-attack" not in registry.global_unlocks

    def test_round_trip(self, registry):
        registry.record_class("red-burst", PlayerClass.KNIGHT)
        restored = UnlockRegistry.from_dict(registry.to_dict())
        assert restored == registry

    def test_copy_is_deep(self, registry):
        clone = registry.copy()
        clone.record_class("red-burst", PlayerClass.KNIGHT)
        assert not registry.is_unlocked("red-burst", PlayerClass.KNIGHT)


class TestUnlock:

    def test_unlock_class_gem(self, gate, registry):
        wallet = Wallet(zenny=60)
        result = gate.unlock("red-burst", PlayerClass.KNIGHT, wallet)
        assert result.cost == 50
        assert result.remaining_zenny == 10
        assert not result.is_global
        assert wallet.zenny == 10
        assert registry.is_unlocked("red-burst", PlayerClass.KNIGHT)
        assert not registry.is_unlocked("red-burst", PlayerClass.MAGE)

    def test_custom_cost(self, gate):
        wallet = Wallet(zenny=20)
        gate.unlock("red-burst", PlayerClass.KNIGHT, wallet, cost=20)
        assert wallet.zenny == 0

    def test_config_cost(self, registry):
        gate = UnlockGate(registry, config=EngineConfig(unlock_cost=5))
        wallet = Wallet(zenny=5)
        assert gate.unlock("red-burst", PlayerClass.KNIGHT, wallet).cost == 5

    def test_grey_unlock_is_global(self):
        templates = dict(GEM_TEMPLATES)
        templates["grey-ward"] = GemTemplate(
            id="grey-ward", name="Ward", color=GemColor.GREY, kind=GemKind.SHIELD,
            value=5, cost=1, duration=1,
        )
        registry = UnlockRegistry()
        gate = UnlockGate(registry, templates=templates)
        result = gate.unlock("grey-ward", PlayerClass.ROGUE, Wallet(zenny=50))
        assert result.is_global
        for player_class in PlayerClass:
            assert registry.is_unlocked("grey-ward", player_class)
        with pytest.raises(AlreadyUnlockedError):
            gate.unlock("grey-ward", PlayerClass.MAGE, Wallet(zenny=50))

    def test_not_eligible(self, gate, registry):
        wallet = Wallet(zenny=100)
        with pytest.raises(NotEligibleError):
            gate.unlock("blue-shield", PlayerClass.KNIGHT, wallet)
        assert wallet.zenny == 100
        assert not registry.is_unlocked("blue-shield", PlayerClass.KNIGHT)

    def test_already_unlocked(self, gate):
        wallet = Wallet(zenny=100)
        with pytest.raises(AlreadyUnlockedError):
            gate.unlock("red-strong", PlayerClass.KNIGHT, wallet)
        assert wallet.zenny == 100

    def test_insufficient_funds(self, gate, registry):
        wallet = Wallet(zenny=49)
        with pytest.raises(InsufficientFundsError) as exc_info:
            gate.unlock("red-burst", PlayerClass.KNIGHT, wallet)
        assert exc_info.value.required == 50
        assert exc_info.value.available == 49
        assert wallet.zenny == 49
        assert not registry.is_unlocked("red-burst", PlayerClass.KNIGHT)

    def test_eligibility_checked_before_funds(self, gate):
        with pytest.raises(NotEligibleError):
            gate.unlock("blue-shield", PlayerClass.KNIGHT, Wallet(zenny=0))

    def test_unknown_template(self, gate):
        with pytest.raises(UnknownTemplateError):
            gate.unlock("nope", PlayerClass.KNIGHT, Wallet(zenny=100))

    def test_negative_cost(self, gate):
        with pytest.raises(ValueError, match="negative"):
            gate.unlock("red-burst", PlayerClass.KNIGHT, Wallet(zenny=100), cost=-1)

    def test_can_unlock(self, gate):
        assert gate.can_unlock("red-burst", PlayerClass.KNIGHT, Wallet(zenny=50))
        assert not gate.can_unlock("red-burst", PlayerClass.KNIGHT, Wallet(zenny=10))
        assert not gate.can_unlock("blue-shield", PlayerClass.KNIGHT, Wallet(zenny=50))

    def test_unlocked_event(self, registry):
        bus = EventBus()
        seen = []
        bus.subscribe(GemEvent.UNLOCKED, seen.append)
        UnlockGate(registry, bus=bus).unlock("green-poison", PlayerClass.ROGUE, Wallet(zenny=50))
        assert seen[0].payload["template_id"] == "green-poison"
        assert seen[0].payload["player_class"] == PlayerClass.ROGUE


class TestWallet:

    def test_spend_and_earn(self):
        wallet = Wallet()
        wallet.earn(10)
        assert wallet.spend(4) == 4
        assert wallet.zenny == 6

    def test_overspend(self):
        wallet = Wallet(zenny=2)
        with pytest.raises(InsufficientFundsError):
            wallet.spend(3)
        assert wallet.zenny == 2

    def test_negative_amounts(self):
        with pytest.raises(ValueError):
            Wallet().earn(-1)
        with pytest.raises(ValueError):
            Wallet(zenny=5).spend(-1)
