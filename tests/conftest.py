"""
Shared pytest fixtures for the gem engine test suite.

This module provides reusable fixtures for:
- RNG with known seeds
- An event recorder attached to the bus
- Small template catalogs with chosen base mastery
- Wired ledger / factory / pool objects
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.gembag.config import EngineConfig
from packages.gembag.content.gems import GemColor, GemKind, GemTemplate, SpecialEffect
from packages.gembag.events import EventBus
from packages.gembag.generation.factory import GemFactory
from packages.gembag.state.mastery import MasteryLedger
from packages.gembag.state.pool import PoolManager
from packages.gembag.state.rng import Random


# =============================================================================
# RNG Fixtures
# =============================================================================


@pytest.fixture
def rng_seed_42():
    """RNG initialized with seed 42 for deterministic tests."""
    return Random(42)


@pytest.fixture
def rng_seed_12345():
    """RNG initialized with seed 12345 for deterministic tests."""
    return Random(12345)


# =============================================================================
# Event Fixtures
# =============================================================================


class EventRecorder:
    """Collects delivered events, optionally capturing pool state at delivery."""

    def __init__(self, bus, pool=None):
        self.events = []
        self.snapshots = []
        self.pool = pool
        bus.subscribe(None, self._record)

    def _record(self, event):
        self.events.append(event)
        if self.pool is not None:
            self.snapshots.append(self.pool.snapshot())

    def types(self):
        return [e.type for e in self.events]

    def of(self, event_type):
        return [e for e in self.events if e.type == event_type]

    def clear(self):
        self.events.clear()
        self.snapshots.clear()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    """Records every event on the shared bus."""
    return EventRecorder(bus)


# =============================================================================
# Catalog Fixtures
# =============================================================================


@pytest.fixture
def small_templates():
    """
    Minimal catalog:
    - "learner": base mastery 15 (for step/cap progression)
    - "sure": base mastery 100 (always succeeds)
    - "dud": base mastery 0 (always fails)
    - "drawer": always succeeds and draws on play
    """
    return {
        "learner": GemTemplate(
            id="learner", name="Learner", color=GemColor.RED, kind=GemKind.ATTACK,
            value=10, cost=1, base_mastery=15, description="Deal 10 damage.",
        ),
        "sure": GemTemplate(
            id="sure", name="Sure Shot", color=GemColor.RED, kind=GemKind.ATTACK,
            value=10, cost=1, base_mastery=100, description="Deal 10 damage.",
        ),
        "dud": GemTemplate(
            id="dud", name="Dud", color=GemColor.GREY, kind=GemKind.HEAL,
            value=5, cost=1, base_mastery=0, description="Heal 5.",
        ),
        "drawer": GemTemplate(
            id="drawer", name="Drawer", color=GemColor.GREEN, kind=GemKind.ATTACK,
            value=8, cost=1, special_effect=SpecialEffect.DRAW, base_mastery=100,
            description="Deal 8 damage and draw a gem.",
        ),
        "big": GemTemplate(
            id="big", name="Big Hit", color=GemColor.BLUE, kind=GemKind.ATTACK,
            value=30, cost=3, base_mastery=100, description="Deal 30 damage.",
        ),
    }


@pytest.fixture
def capped_config():
    """Step 15 with the 70-point cap variant."""
    return EngineConfig(mastery_step=15, mastery_cap=70)


# =============================================================================
# Engine Fixtures
# =============================================================================


@pytest.fixture
def ledger(small_templates, bus):
    return MasteryLedger(templates=small_templates, bus=bus)


@pytest.fixture
def factory(ledger, small_templates):
    return GemFactory(ledger, templates=small_templates)


@pytest.fixture
def pool(rng_seed_42, ledger, bus):
    return PoolManager(rng_seed_42, ledger, bus=bus)


@pytest.fixture
def make_gems(factory):
    """Factory helper: make_gems("sure", "dud") -> [GemInstance, GemInstance]."""
    def _make(*template_ids):
        return [factory.create_instance(t) for t in template_ids]
    return _make


@pytest.fixture
def pool_recorder(bus, pool):
    """Records events along with the pool snapshot at delivery time."""
    return EventRecorder(bus, pool)
