"""Exception hierarchy for per-record processing failures."""


class PaymentsError(Exception):
    """Base exception for every declined record."""


class ValidationError(PaymentsError):
    """Raised when a deposit or withdrawal carries a missing or zero amount."""


class DuplicateTransaction(PaymentsError):
    """Raised when a deposit or withdrawal reuses an already stored id."""


class AccountLocked(PaymentsError):
    """Raised when a locked account is asked to move funds."""


class InsufficientFunds(PaymentsError):
    """Raised when a withdrawal exceeds the available balance."""


class BalanceOverflow(PaymentsError):
    """Raised when a deposit would exceed the largest representable balance."""


class TransactionNotFound(PaymentsError):
    """Raised when an event references a transaction that was never stored."""


class OwnershipMismatch(PaymentsError):
    """Raised when an event's client differs from the referenced transaction's client."""


class IllegalTransition(PaymentsError):
    """Raised when a transaction cannot move into the state the handler requires."""
