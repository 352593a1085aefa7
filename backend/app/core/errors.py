"""Domain errors raised by AquaBill services.

Routes turn these into HTTP responses; services never raise HTTPException.
"""


class AquaBillError(Exception):
    """Base class for AquaBill domain errors."""


class BillingValidationError(AquaBillError, ValueError):
    """Invoice or settings input that cannot be billed (e.g. a non-positive rate)."""


class SettingsImportError(AquaBillError):
    """A settings file that is not valid JSON or carries invalid values."""
