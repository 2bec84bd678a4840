"""
Error taxonomy for the gem engine.

All errors are local and non-fatal. Operations that raise leave every zone,
the mastery ledger, the wallet and the unlock registry untouched.
"""


class GemEngineError(Exception):
    """Base class for all gem engine errors."""


class UnknownTemplateError(GemEngineError, ValueError):
    """A gem template id is not in the catalog."""

    def __init__(self, template_id: str):
        super().__init__(f"Unknown gem template: {template_id}")
        self.template_id = template_id


class UnknownAugmentationError(GemEngineError, ValueError):
    """An augmentation id is not in the augmentation catalog."""

    def __init__(self, augmentation_id: str):
        super().__init__(f"Unknown augmentation: {augmentation_id}")
        self.augmentation_id = augmentation_id


class InsufficientResourceError(GemEngineError):
    """Play cost exceeds the stamina budget."""

    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough stamina: need {required}, have {available}")
        self.required = required
        self.available = available


class NotEligibleError(GemEngineError):
    """The acting class cannot unlock this template."""


class AlreadyUnlockedError(GemEngineError):
    """The template is already unlocked for the class (or globally)."""


class InsufficientFundsError(GemEngineError):
    """Wallet balance is below the requested cost."""

    def __init__(self, required: int, available: int):
        super().__init__(f"Not enough zenny: need {required}, have {available}")
        self.required = required
        self.available = available


class CollectionFullError(GemEngineError):
    """The gem collection already holds the maximum number of gems."""


class SnapshotError(GemEngineError, ValueError):
    """A persisted snapshot is malformed or violates pool invariants."""
