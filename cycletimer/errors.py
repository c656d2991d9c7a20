"""Error types raised by the cycle timer core."""

from typing import Dict, Optional


class CycleTimerError(Exception):
    """Base class for cycle timer errors."""


class ValidationError(CycleTimerError):
    """New cycle input violates the form constraints.

    Attributes:
        errors: Field name -> user-facing message.
    """

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {text}" for field, text in self.errors.items())
        super().__init__(message)

    def for_field(self, field: str) -> Optional[str]:
        """Message for a single field, if it failed."""
        return self.errors.get(field)
