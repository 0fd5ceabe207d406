"""Exception hierarchy for the ATM engine."""


class ATMError(Exception):
    """Base class for every error raised by the engine."""


class AuthFailure(ATMError):
    """Wrong PIN, unknown owner with auto-registration off, or bad technician login."""


class AccountNotFound(ATMError):
    """Raised when an operation names an owner the store does not know."""


class DuplicateAccount(ATMError):
    """Raised when registering an owner that already exists."""


class ValidationFailure(ATMError):
    """Amount is not a positive multiple of the smallest note, or a bad selection."""


class CapacityFailure(ATMError):
    """Amount exceeds the account balance or the cash held in the vault."""


class ResourceDepletion(ATMError):
    """Paper or ink is exhausted, or the device has been taken offline."""


class PersistenceError(ATMError):
    """Device state could not be read from or written to storage."""


class ConfigurationError(ATMError):
    """Raised when settings from the environment are invalid."""


class ReceiptNotSaved(PersistenceError):
    """The cash operation went through but the printer levels could not be saved."""
