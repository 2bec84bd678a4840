"""
Import/export of pool and mastery state.

Snapshot shape:
    {
        "bag": [instance_id, ...],
        "hand": [...],
        "discard": [...],
        "played": [...],
        "mastery_ledger": {template_id: value},
        "instances": {instance_id: {...instance fields...}},
    }

export_state/import_state are pure dict conversions; save_state/load_state add
JSON file I/O on top.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from .errors import SnapshotError
from .state.mastery import MasteryLedger
from .state.pool import PoolManager

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

_REQUIRED_KEYS = ("bag", "hand", "discard", "played", "mastery_ledger")


def export_state(pool: PoolManager, ledger: MasteryLedger) -> Dict[str, Any]:
    data = pool.to_dict()
    data["mastery_ledger"] = ledger.to_dict()
    data["version"] = SNAPSHOT_VERSION
    return data


def import_state(data: Dict[str, Any], pool: PoolManager, ledger: MasteryLedger) -> None:
    """
    Restore pool zones and ledger values from a snapshot.

    Validation happens before either object is touched, so a bad snapshot
    leaves both unchanged.

    Raises:
        SnapshotError: missing keys, unknown ids, duplicates, oversize hand,
            or unknown templates in the instance records or the ledger
    """
    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise SnapshotError(f"Snapshot missing keys: {missing}")

    staged_pool = PoolManager(pool.rng, pool.ledger, config=pool.config)
    try:
        staged_pool.load_dict(data)
        staged_ledger = MasteryLedger(templates=ledger.templates, config=ledger.config)
        staged_ledger.load(data["mastery_ledger"])
    except SnapshotError:
        raise
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Invalid snapshot: {e}") from e

    snap = staged_pool.snapshot()
    pool.load_zones(bag=snap.bag, hand=snap.hand, discard=snap.discard, played=snap.played)
    ledger.load(data["mastery_ledger"])
    logger.info("Imported snapshot with %d gems", snap.total)


def save_state(path: Union[str, Path], pool: PoolManager, ledger: MasteryLedger) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(export_state(pool, ledger), f, indent=2)
    logger.info("Saved gem state to %s", path)
    return path


def load_state(path: Union[str, Path], pool: PoolManager, ledger: MasteryLedger) -> None:
    path = Path(path)
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    import_state(data, pool, ledger)
