"""Rejected transitions raised by Account.apply."""


class ProcessingError(Exception):
    """Base class for transactions that could not be applied to an account."""


class AccountLockedError(ProcessingError):
    """Raised for any transaction against an account frozen by a chargeback."""


class MalformedTransactionError(ProcessingError):
    """Raised when a deposit or withdrawal has no usable amount."""


class InsufficientFundsError(ProcessingError):
    """Raised when a withdrawal exceeds the available balance."""


class AmountOverflowError(ProcessingError):
    """Raised when a balance can no longer be represented exactly."""
