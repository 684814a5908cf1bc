from typing import Dict, Iterator, Optional

from models import Transaction, ClientAccount


class StateManager:
    """
    Owns client accounts and the ledger of executed transactions.
    Only executed deposits and withdrawals are stored, for dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, Transaction] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Retrieve account by client ID."""
        return self._accounts.get(client_id)

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """
        Get existing account or a new, not yet registered one.
        Call store_account once the new account has been mutated successfully.
        """
        account = self._accounts.get(client_id)
        if account is None:
            account = ClientAccount(client_id=client_id)
        return account

    def store_account(self, account: ClientAccount) -> None:
        """Register an account. Existing registrations are kept."""
        self._accounts.setdefault(account.client_id, account)

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def store_transaction(self, transaction: Transaction) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[transaction.transaction_id] = transaction

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def accounts(self) -> Iterator[ClientAccount]:
        return iter(self._accounts.values())

    def transactions(self) -> Iterator[Transaction]:
        return iter(self._transactions.values())

    def transaction_count(self) -> int:
        return len(self._transactions)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
