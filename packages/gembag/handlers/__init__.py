"""
Handlers for the gem engine.

- UnlockGate: permanent template unlocks paid in zenny
- ShopHandler: random gem purchase, gem removal and upgrades
"""

from .unlock_handler import UnlockGate, UnlockResult
from .shop_handler import ShopHandler, ShopAction, ShopActionType, ShopResult

__all__ = [
    "UnlockGate", "UnlockResult",
    "ShopHandler", "ShopAction", "ShopActionType", "ShopResult",
]
