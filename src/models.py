from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional

from amounts import MAX_UNITS, format_amount
from errors import AccountLocked, BalanceOverflow, InsufficientFunds, ValidationError


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def moves_funds(self) -> bool:
        """Deposits and withdrawals move money and are stored; the rest are events."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionState(Enum):
    RECEIVED = "received"
    EXECUTED = "executed"
    DISPUTED = "disputed"
    REVERTED = "reverted"


class TransactionEvent(Enum):
    EXECUTE = "execute"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    REVERT = "revert"


_TRANSITIONS = {
    (TransactionState.RECEIVED, TransactionEvent.EXECUTE): TransactionState.EXECUTED,
    (TransactionState.EXECUTED, TransactionEvent.DISPUTE): TransactionState.DISPUTED,
    (TransactionState.DISPUTED, TransactionEvent.RESOLVE): TransactionState.EXECUTED,
    (TransactionState.DISPUTED, TransactionEvent.REVERT): TransactionState.REVERTED,
}


def transition(state: Optional[TransactionState], event: TransactionEvent) -> Optional[TransactionState]:
    """
    Return the state reached by applying event to state.

    Events that do not apply to the current state leave it unchanged.
    Callers detect a declined transition by comparing the result with
    the state they expected.
    """
    if state is None:
        return None
    return _TRANSITIONS.get((state, event), state)


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[int] = None
    state: Optional[TransactionState] = None

    def __repr__(self) -> str:
        return (
            f"Transaction({self.transaction_type.value}, client={self.client_id}, "
            f"tx={self.transaction_id}, amount={self.amount}, state={self.state and self.state.value})"
        )

    def load(self) -> None:
        """Validate the record and place it in the RECEIVED state."""
        if self.transaction_type.moves_funds and not self.amount:
            raise ValidationError(
                f"{self.transaction_type.value} tx {self.transaction_id}: missing or zero amount"
            )
        self.state = TransactionState.RECEIVED

    def apply(self, event: TransactionEvent) -> Optional[TransactionState]:
        self.state = transition(self.state, event)
        return self.state

    def execute(self) -> Optional[TransactionState]:
        return self.apply(TransactionEvent.EXECUTE)

    def dispute(self) -> Optional[TransactionState]:
        return self.apply(TransactionEvent.DISPUTE)

    def resolve(self) -> Optional[TransactionState]:
        return self.apply(TransactionEvent.RESOLVE)

    def revert(self) -> Optional[TransactionState]:
        return self.apply(TransactionEvent.REVERT)


class AccountSnapshot(NamedTuple):
    client: int
    available: str
    held: str
    total: str
    locked: bool


@dataclass
class ClientAccount:
    """
    Balances of a single client in fixed-point units.

    All mutations are refused once the account is locked.
    Balances never go negative and never exceed MAX_UNITS.
    """

    client_id: int
    total: int = 0
    held: int = 0
    locked: bool = False

    @property
    def available(self) -> int:
        return max(self.total - self.held, 0)

    def _ensure_unlocked(self) -> None:
        if self.locked:
            raise AccountLocked(f"account {self.client_id} is locked")

    def deposit(self, amount: int) -> int:
        """Credit amount to the account. Returns the new total."""
        self._ensure_unlocked()
        if self.total + amount > MAX_UNITS:
            raise BalanceOverflow(f"deposit of {amount} overflows account {self.client_id}")
        self.total += amount
        return self.total

    def withdraw(self, amount: int) -> int:
        """Debit amount from the account. Returns the new total."""
        self._ensure_unlocked()
        if self.available < amount:
            raise InsufficientFunds(
                f"account {self.client_id}: available {self.available} is less than {amount}"
            )
        self.total -= amount
        return self.total

    def hold(self, amount: int) -> int:
        """Move amount under dispute. Returns the new available balance."""
        self._ensure_unlocked()
        self.held = min(self.held + amount, MAX_UNITS)
        return self.available

    def release(self, amount: int) -> int:
        """Release a held amount. Returns the new available balance."""
        self._ensure_unlocked()
        self.held = max(self.held - amount, 0)
        return self.available

    def chargeback(self, amount: int) -> int:
        """Remove held funds for good and lock the account. Returns the new available balance."""
        self._ensure_unlocked()
        self.total = max(self.total - amount, 0)
        self.held = max(self.held - amount, 0)
        self.lock()
        return self.available

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client=self.client_id,
            available=format_amount(self.available),
            held=format_amount(self.held),
            total=format_amount(self.total),
            locked=self.locked,
        )


class ProcessingStats:
    """Counters for a single processing run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.rejected = 0
        self.dropped = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_rejection(self):
        self.rejected += 1

    def record_drop(self):
        self.dropped += 1

    def __repr__(self) -> str:
        return (
            f"ProcessingStats(processed={self.processed}, failed={self.failed}, "
            f"rejected={self.rejected}, dropped={self.dropped})"
        )
