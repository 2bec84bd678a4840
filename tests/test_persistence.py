"""
Persistence Tests

Export/import of pool zones and mastery, plus JSON save files.
"""

import json
from dataclasses import replace

import pytest

from packages.gembag.errors import SnapshotError, UnknownTemplateError
from packages.gembag.persistence import (
    SNAPSHOT_VERSION, export_state, import_state, load_state, save_state,
)
from packages.gembag.state.mastery import MasteryLedger
from packages.gembag.state.pool import PoolManager
from packages.gembag.state.rng import Random


@pytest.fixture
def populated(pool, make_gems, ledger):
    gems = make_gems("sure", "dud", "learner", "big", "drawer")
    pool.load_zones(bag=gems[:2], hand=gems[2:3], discard=gems[3:4], played=gems[4:])
    ledger.record_success("learner")
    return gems


@pytest.fixture
def fresh(small_templates):
    ledger = MasteryLedger(templates=small_templates)
    return PoolManager(Random(0), ledger), ledger


class TestExport:

    def test_shape(self, pool, ledger, populated):
        data = export_state(pool, ledger)
        assert data["bag"] == [g.instance_id for g in populated[:2]]
        assert data["hand"] == [populated[2].instance_id]
        assert data["discard"] == [populated[3].instance_id]
        assert data["played"] == [populated[4].instance_id]
        assert data["mastery_ledger"] == {"learner": 30}
        assert set(data["instances"]) == {g.instance_id for g in populated}
        assert data["version"] == SNAPSHOT_VERSION

    def test_json_serializable(self, pool, ledger, populated):
        json.dumps(export_state(pool, ledger))


class TestImport:

    def test_restores_pool_and_ledger(self, pool, ledger, populated, fresh):
        other_pool, other_ledger = fresh
        import_state(export_state(pool, ledger), other_pool, other_ledger)
        assert other_pool.snapshot() == pool.snapshot()
        assert other_ledger.get_mastery("learner") == 30

    def test_missing_keys(self, fresh):
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError, match="missing keys"):
            import_state({"bag": []}, other_pool, other_ledger)

    def test_duplicate_ids_rejected(self, pool, ledger, populated, fresh):
        data = export_state(pool, ledger)
        data["discard"].append(data["bag"][0])
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError):
            import_state(data, other_pool, other_ledger)

    def test_unknown_template_in_ledger(self, pool, ledger, populated, fresh):
        data = export_state(pool, ledger)
        data["mastery_ledger"]["ghost"] = 50
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError):
            import_state(data, other_pool, other_ledger)

    def test_bad_import_leaves_state_alone(self, pool, ledger, populated, make_gems):
        before = pool.snapshot()
        data = export_state(pool, ledger)
        data["hand"] = data["bag"] + data["hand"] + data["discard"]
        data["bag"] = []
        data["discard"] = []
        with pytest.raises(SnapshotError):
            import_state(data, pool, ledger)
        assert pool.snapshot() == before
        assert ledger.get_mastery("learner") == 30

    def test_unknown_template_in_instance_record(self, pool, ledger, populated, fresh):
        data = export_state(pool, ledger)
        hand_id = data["hand"][0]
        data["instances"][hand_id]["template_id"] = "no-such-template"
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError, match="no-such-template"):
            import_state(data, other_pool, other_ledger)
        assert other_pool.snapshot().total == 0
        assert other_ledger.recorded() == {}

    def test_ledger_clamped_to_configured_cap(self, pool, ledger, populated, small_templates, capped_config):
        data = export_state(pool, ledger)
        data["mastery_ledger"] = {"learner": 100}
        capped_ledger = MasteryLedger(templates=small_templates, config=capped_config)
        other_pool = PoolManager(Random(0), capped_ledger, config=capped_config)
        import_state(data, other_pool, capped_ledger)
        assert capped_ledger.get_mastery("learner") == 70

    def test_malformed_instance_record(self, pool, ledger, populated, fresh):
        data = export_state(pool, ledger)
        first = data["bag"][0]
        del data["instances"][first]["template_id"]
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError):
            import_state(data, other_pool, other_ledger)

    def test_play_rejects_unknown_template_before_debit(self, pool, make_gems):
        gem, = make_gems("sure")
        stray = replace(gem, template_id="no-such-template")
        pool.load_zones(hand=[stray])
        spent = []
        with pytest.raises(UnknownTemplateError):
            pool.play([stray.instance_id], available_stamina=5, debit=spent.append)
        assert spent == []
        assert pool.hand == (stray,)
        assert pool.played == ()


class TestFiles:

    def test_save_and_load(self, tmp_path, pool, ledger, populated, fresh):
        path = save_state(tmp_path / "saves" / "run.json", pool, ledger)
        assert path.exists()
        other_pool, other_ledger = fresh
        load_state(path, other_pool, other_ledger)
        assert other_pool.snapshot() == pool.snapshot()

    def test_invalid_json(self, tmp_path, fresh):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        other_pool, other_ledger = fresh
        with pytest.raises(SnapshotError, match="not valid JSON"):
            load_state(path, other_pool, other_ledger)
