"""
Meta-currency wallet (zenny) used by the unlock gate and the shop.
"""

from dataclasses import dataclass

from ..errors import InsufficientFundsError


@dataclass
class Wallet:
    """Zenny balance. Never goes negative."""
    zenny: int = 0

    def can_afford(self, amount: int) -> bool:
        return self.zenny >= amount

    def spend(self, amount: int) -> int:
        """
        Deduct amount.

        Raises:
            InsufficientFundsError: balance below amount (balance unchanged)
        """
        if amount < 0:
            raise ValueError("amount cannot be negative")
        if self.zenny < amount:
            raise InsufficientFundsError(amount, self.zenny)
        self.zenny -= amount
        return amount

    def earn(self, amount: int) -> None:
        if amount < 0:
            raise ValueError("amount cannot be negative")
        self.zenny += amount

    def to_dict(self) -> dict:
        return {"zenny": self.zenny}

    @classmethod
    def from_dict(cls, data: dict) -> "Wallet":
        return cls(zenny=data.get("zenny", 0))
