import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amounts import MAX_UNITS
from errors import AccountLocked, BalanceOverflow, InsufficientFunds, ValidationError
from models import (
    ClientAccount,
    ProcessingStats,
    Transaction,
    TransactionEvent,
    TransactionState,
    TransactionType,
    transition,
)


class TestTransition:
    @pytest.mark.parametrize(
        "state, event, expected",
        [
            (TransactionState.RECEIVED, TransactionEvent.EXECUTE, TransactionState.EXECUTED),
            (TransactionState.RECEIVED, TransactionEvent.DISPUTE, TransactionState.RECEIVED),
            (TransactionState.RECEIVED, TransactionEvent.RESOLVE, TransactionState.RECEIVED),
            (TransactionState.RECEIVED, TransactionEvent.REVERT, TransactionState.RECEIVED),
            (TransactionState.EXECUTED, TransactionEvent.EXECUTE, TransactionState.EXECUTED),
            (TransactionState.EXECUTED, TransactionEvent.DISPUTE, TransactionState.DISPUTED),
            (TransactionState.EXECUTED, TransactionEvent.RESOLVE, TransactionState.EXECUTED),
            (TransactionState.EXECUTED, TransactionEvent.REVERT, TransactionState.EXECUTED),
            (TransactionState.DISPUTED, TransactionEvent.EXECUTE, TransactionState.DISPUTED),
            (TransactionState.DISPUTED, TransactionEvent.DISPUTE, TransactionState.DISPUTED),
            (TransactionState.DISPUTED, TransactionEvent.RESOLVE, TransactionState.EXECUTED),
            (TransactionState.DISPUTED, TransactionEvent.REVERT, TransactionState.REVERTED),
            (TransactionState.REVERTED, TransactionEvent.EXECUTE, TransactionState.REVERTED),
            (TransactionState.REVERTED, TransactionEvent.DISPUTE, TransactionState.REVERTED),
            (TransactionState.REVERTED, TransactionEvent.RESOLVE, TransactionState.REVERTED),
            (TransactionState.REVERTED, TransactionEvent.REVERT, TransactionState.REVERTED),
        ],
    )
    def test_transition_table(self, state, event, expected):
        assert transition(state, event) == expected

    def test_unloaded_state_stays_unloaded(self):
        assert transition(None, TransactionEvent.EXECUTE) is None


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=1_000_000,
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == 1_000_000
        assert transaction.state is None

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_load_sets_received(self):
        transaction = Transaction(TransactionType.WITHDRAWAL, client_id=1, transaction_id=2, amount=5)
        transaction.load()
        assert transaction.state == TransactionState.RECEIVED

    def test_load_event_without_amount(self):
        transaction = Transaction(TransactionType.CHARGEBACK, client_id=1, transaction_id=2)
        transaction.load()
        assert transaction.state == TransactionState.RECEIVED

    @pytest.mark.parametrize("amount", [None, 0])
    @pytest.mark.parametrize("transaction_type", [TransactionType.DEPOSIT, TransactionType.WITHDRAWAL])
    def test_load_rejects_missing_or_zero_amount(self, transaction_type, amount):
        transaction = Transaction(transaction_type, client_id=1, transaction_id=1, amount=amount)
        with pytest.raises(ValidationError):
            transaction.load()
        assert transaction.state is None

    def test_lifecycle(self):
        transaction = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=10)
        transaction.load()

        assert transaction.execute() == TransactionState.EXECUTED
        assert transaction.dispute() == TransactionState.DISPUTED
        assert transaction.resolve() == TransactionState.EXECUTED
        assert transaction.dispute() == TransactionState.DISPUTED
        assert transaction.revert() == TransactionState.REVERTED
        assert transaction.dispute() == TransactionState.REVERTED

    def test_execute_twice_is_noop(self):
        transaction = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=10)
        transaction.load()
        transaction.execute()
        assert transaction.execute() == TransactionState.EXECUTED

    def test_moves_funds(self):
        assert TransactionType.DEPOSIT.moves_funds
        assert TransactionType.WITHDRAWAL.moves_funds
        assert not TransactionType.DISPUTE.moves_funds
        assert not TransactionType.RESOLVE.moves_funds
        assert not TransactionType.CHARGEBACK.moves_funds


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.total == 0
        assert account.held == 0
        assert account.available == 0
        assert account.locked is False

    def test_available_property(self):
        account = ClientAccount(client_id=1, total=150, held=50)
        assert account.available == 100

    def test_available_floored_at_zero(self):
        account = ClientAccount(client_id=1, total=70, held=100)
        assert account.available == 0

    def test_deposit(self):
        account = ClientAccount(client_id=1)
        assert account.deposit(100) == 100
        assert account.deposit(50) == 150

    def test_deposit_overflow(self):
        account = ClientAccount(client_id=1, total=MAX_UNITS)
        with pytest.raises(BalanceOverflow):
            account.deposit(1)
        assert account.total == MAX_UNITS

    def test_withdraw(self):
        account = ClientAccount(client_id=1, total=100)
        assert account.withdraw(60) == 40

    def test_withdraw_insufficient_funds(self):
        account = ClientAccount(client_id=1, total=100, held=60)
        with pytest.raises(InsufficientFunds):
            account.withdraw(50)
        assert account.total == 100
        assert account.held == 60

    def test_hold_and_release(self):
        account = ClientAccount(client_id=1, total=100)
        assert account.hold(30) == 70
        assert account.held == 30
        assert account.release(30) == 100
        assert account.held == 0

    def test_hold_saturates(self):
        account = ClientAccount(client_id=1, total=MAX_UNITS, held=MAX_UNITS - 1)
        account.hold(10)
        assert account.held == MAX_UNITS

    def test_release_saturates(self):
        account = ClientAccount(client_id=1, total=100, held=10)
        account.release(50)
        assert account.held == 0

    def test_chargeback_locks(self):
        account = ClientAccount(client_id=1, total=100, held=40)
        assert account.chargeback(40) == 60
        assert account.total == 60
        assert account.held == 0
        assert account.locked is True

    def test_chargeback_saturates(self):
        account = ClientAccount(client_id=1, total=30, held=20)
        account.chargeback(50)
        assert account.total == 0
        assert account.held == 0

    @pytest.mark.parametrize("operation", ["deposit", "withdraw", "hold", "release", "chargeback"])
    def test_locked_account_refuses_mutations(self, operation):
        account = ClientAccount(client_id=1, total=100, held=10)
        account.lock()
        with pytest.raises(AccountLocked):
            getattr(account, operation)(5)
        assert account.total == 100
        assert account.held == 10

    def test_unlock(self):
        account = ClientAccount(client_id=1)
        account.lock()
        account.unlock()
        assert account.deposit(5) == 5

    def test_snapshot(self):
        account = ClientAccount(client_id=7, total=30000, held=15000)
        snapshot = account.snapshot()
        assert snapshot.client == 7
        assert snapshot.available == "1.5"
        assert snapshot.held == "1.5"
        assert snapshot.total == "3"
        assert snapshot.locked is False


class TestProcessingStats:
    def test_counters(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_success()
        stats.record_failure()
        stats.record_rejection()
        stats.record_drop()
        assert stats.processed == 2
        assert stats.failed == 1
        assert stats.rejected == 1
        assert stats.dropped == 1
