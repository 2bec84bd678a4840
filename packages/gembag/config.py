"""
Engine configuration.

Defaults follow the shipped game rules. Every value can be overridden from the
environment (or a `.env` file) with a GEMBAG_ prefix, e.g.:

    GEMBAG_MASTERY_CAP=70
    GEMBAG_RECYCLE_ON_DISCARD=true
"""

import os
from dataclasses import dataclass, fields
from typing import Optional

from dotenv import load_dotenv

ENV_PREFIX = "GEMBAG_"

MAX_HAND_SIZE = 3

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class EngineConfig:
    """Tunable rules for mastery, recycling, resets and shop prices."""

    # Mastery
    mastery_step: int = 15
    mastery_cap: int = 100

    # Pool policies
    recycle_on_discard: bool = False  # False = recycle lazily when the bag runs dry
    reset_preserves_hand: bool = False  # False = period reset gathers all four zones

    # Collection
    max_collection_size: int = 20
    starting_bag_size: int = 20

    # Prices (zenny)
    unlock_cost: int = 50
    shop_buy_cost: int = 3
    shop_remove_cost: int = 3
    shop_upgrade_cost: int = 5

    def __post_init__(self):
        if self.mastery_step <= 0:
            raise ValueError(f"mastery_step must be positive, got {self.mastery_step}")
        if not 0 <= self.mastery_cap <= 100:
            raise ValueError(f"mastery_cap must be within 0..100, got {self.mastery_cap}")
        if self.starting_bag_size > self.max_collection_size:
            raise ValueError("starting_bag_size cannot exceed max_collection_size")
        for name in ("unlock_cost", "shop_buy_cost", "shop_remove_cost", "shop_upgrade_cost"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "EngineConfig":
        """Build a config from GEMBAG_* environment variables."""
        load_dotenv(dotenv_path)
        overrides = {}
        for f in fields(cls):
            raw = os.environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            overrides[f.name] = _parse(f.name, raw, f.type)
        return cls(**overrides)


def _parse(name: str, raw: str, type_hint) -> object:
    value = raw.strip()
    if type_hint in (bool, "bool"):
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"{ENV_PREFIX}{name.upper()} must be a boolean, got {raw!r}")
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}") from None


DEFAULT_CONFIG = EngineConfig()
