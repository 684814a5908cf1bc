import csv
import logging
import re
from typing import Dict, Iterable, Iterator, Optional

from amounts import parse_amount
from config import EngineConfig
from errors import PaymentsError, ValidationError
from models import AccountSnapshot, ClientAccount, ProcessingStats, Transaction, TransactionType
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_ID = 2**32 - 1

_ID_PATTERN = re.compile(r"[0-9]+")


class PaymentsEngine:
    """
    Reads transaction records and applies them one at a time, in input order.
    Declined records are logged and skipped; processing always continues.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self._config = config or EngineConfig()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        with open(filepath, "r", newline="", errors="replace") as f:
            return self.process_lines(f)

    def process_lines(self, lines: Iterable[str]) -> Dict[int, ClientAccount]:
        """Process CSV text lines, header first, and return final account states."""
        logger.info("Starting processing")
        self.process_records(self._read_transactions(lines))
        logger.info(
            f"Processed: {self.stats.processed}, "
            f"Failed: {self.stats.failed}, "
            f"Rejected: {self.stats.rejected}, "
            f"Dropped: {self.stats.dropped}"
        )
        return self._state.get_all_accounts()

    def process_records(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            self.process_record(transaction)

    def process_record(self, transaction: Transaction) -> bool:
        """Load and apply a single record. Returns whether it succeeded."""
        try:
            transaction.load()
        except ValidationError as e:
            self.stats.record_rejection()
            logger.warning(f"Rejected {transaction}: {e}")
            return False

        try:
            self._processor.process_transaction(transaction)
        except PaymentsError as e:
            self.stats.record_failure()
            logger.warning(f"Declined {transaction}: {e}")
            return False

        self.stats.record_success()
        return True

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._state.get_account(client_id)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._state.get_transaction(transaction_id)

    def accounts(self) -> Iterator[ClientAccount]:
        return self._state.accounts()

    def transactions(self) -> Iterator[Transaction]:
        return self._state.transactions()

    def transaction_count(self) -> int:
        return self._state.transaction_count()

    def snapshots(self) -> Iterator[AccountSnapshot]:
        """Yield final account states with balances rendered as decimal text."""
        accounts = self._state.accounts()
        if self._config.sort_output:
            accounts = iter(sorted(accounts, key=lambda account: account.client_id))
        for account in accounts:
            yield account.snapshot()

    def _read_transactions(self, lines: Iterable[str]) -> Iterator[Transaction]:
        reader = csv.DictReader(lines)
        for row in reader:
            transaction = self._parse_csv_row(row)
            if transaction:
                yield transaction
            else:
                self.stats.record_drop()

    def _parse_csv_row(self, row: Dict[str, Optional[str]]) -> Optional[Transaction]:
        """Parse CSV row into Transaction. Unparseable amounts are read as missing."""
        try:
            normalized = {
                k.strip(): (v or "").strip() for k, v in row.items() if isinstance(k, str)
            }

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = _parse_id(normalized["client"])
            transaction_id = _parse_id(normalized["tx"])

            amount = None
            if transaction_type.moves_funds:
                amount = parse_amount(normalized.get("amount", ""))

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None


def _parse_id(text: str) -> int:
    if not _ID_PATTERN.fullmatch(text):
        raise ValueError(f"invalid identifier {text!r}")
    value = int(text)
    if value > MAX_ID:
        raise ValueError(f"identifier {value} out of range")
    return value
