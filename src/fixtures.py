import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def generate_fixture(directory: Path, accounts: int, transactions: int) -> Path:
    """
    Write a benchmark CSV with 4 * (transactions + 1) records per account.

    For every client: `transactions` rounds of deposit, dispute, resolve and
    withdrawal of the same amount, then a deposit that is disputed and charged
    back, then one more deposit that is declined on the locked account.
    Every client ends with a zero, locked balance and 2 * transactions + 1
    stored transactions. Existing files are reused.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"bench_{accounts}x4x{transactions + 1}.csv"
    if path.exists():
        return path

    logger.info(f"Generating {accounts * 4 * (transactions + 1)} records into {path}")
    with open(path, "w") as f:
        f.write("type, client, tx, amount\n")
        tx_id = 0
        for client_id in range(1, accounts + 1):
            for amount in range(client_id, client_id + transactions):
                tx_id += 1
                f.write(f"deposit, {client_id}, {tx_id}, {amount}\n")
                f.write(f"dispute, {client_id}, {tx_id}\n")
                f.write(f"resolve, {client_id}, {tx_id}\n")
                tx_id += 1
                f.write(f"withdrawal, {client_id}, {tx_id}, {amount}\n")

            amount = client_id + transactions
            tx_id += 1
            f.write(f"deposit, {client_id}, {tx_id}, {amount}\n")
            f.write(f"dispute, {client_id}, {tx_id}\n")
            f.write(f"chargeback, {client_id}, {tx_id}, 0\n")
            tx_id += 1
            f.write(f"deposit, {client_id}, {tx_id}, {amount}\n")
    return path
