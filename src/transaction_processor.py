import logging
from typing import Callable

from errors import (
    DuplicateTransaction,
    IllegalTransition,
    OwnershipMismatch,
    PaymentsError,
    TransactionNotFound,
)
from models import ClientAccount, Transaction, TransactionState, TransactionType
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies loaded transactions against state.
    Raises a PaymentsError subclass when a record is declined; a declined
    record leaves accounts and stored transactions untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_funds_movement(transaction, ClientAccount.deposit)
            case TransactionType.WITHDRAWAL:
                self._handle_funds_movement(transaction, ClientAccount.withdraw)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def _handle_funds_movement(
        self, transaction: Transaction, action: Callable[[ClientAccount, int], int]
    ) -> None:
        transaction.execute()
        if transaction.state != TransactionState.EXECUTED:
            raise IllegalTransition(
                f"{transaction.transaction_type.value} tx {transaction.transaction_id} declined in state {transaction.state}"
            )

        if self._state.has_transaction(transaction.transaction_id):
            raise DuplicateTransaction(
                f"{transaction.transaction_type.value} tx {transaction.transaction_id}: already processed"
            )

        account = self._state.get_or_create_account(transaction.client_id)
        action(account, transaction.amount)
        self._state.store_account(account)
        self._state.store_transaction(transaction)

        logger.debug(
            f"{transaction.transaction_type.value} tx {transaction.transaction_id}: "
            f"client {account.client_id} total={account.total} held={account.held}"
        )

    def _find_disputable(self, event: Transaction) -> Transaction:
        """Look up the deposit an event refers to and check it belongs to the event's client."""
        original = self._state.get_transaction(event.transaction_id)

        if original is None:
            raise TransactionNotFound(
                f"{event.transaction_type.value} for tx {event.transaction_id}: transaction not found"
            )

        if original.client_id != event.client_id:
            raise OwnershipMismatch(
                f"{event.transaction_type.value} for tx {event.transaction_id}: client mismatch "
                f"(expected {original.client_id}, got {event.client_id})"
            )

        # TODO: withdrawal disputes need a product decision on recalling funds that already left the account
        if original.transaction_type != TransactionType.DEPOSIT:
            raise IllegalTransition(
                f"{event.transaction_type.value} for tx {event.transaction_id}: "
                f"only deposits can be disputed (got {original.transaction_type.value})"
            )

        return original

    def _apply_event(
        self,
        event: Transaction,
        drive: Callable[[Transaction], object],
        expected: TransactionState,
        action: Callable[[ClientAccount, int], int],
    ) -> None:
        original = self._find_disputable(event)
        account = self._state.get_account(original.client_id)

        previous = original.state
        drive(original)
        # A no-op transition is declined even when it already sits in the expected state.
        if original.state == previous or original.state != expected:
            raise IllegalTransition(
                f"{event.transaction_type.value} for tx {event.transaction_id} declined in state {original.state}"
            )

        try:
            action(account, original.amount)
        except PaymentsError:
            original.state = previous
            raise

        logger.debug(
            f"{event.transaction_type.value} for tx {event.transaction_id}: "
            f"client {account.client_id} total={account.total} held={account.held} locked={account.locked}"
        )

    def _handle_dispute(self, event: Transaction) -> None:
        self._apply_event(event, Transaction.dispute, TransactionState.DISPUTED, ClientAccount.hold)

    def _handle_resolve(self, event: Transaction) -> None:
        self._apply_event(event, Transaction.resolve, TransactionState.EXECUTED, ClientAccount.release)

    def _handle_chargeback(self, event: Transaction) -> None:
        self._apply_event(event, Transaction.revert, TransactionState.REVERTED, ClientAccount.chargeback)
