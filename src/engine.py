import csv
import logging
from typing import Dict, Iterable, Iterator, Optional

from currency import parse_amount
from errors import ProcessingError
from ledger import Ledger
from models import MAX_CLIENT_ID, MAX_TRANSACTION_ID, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Feeds transactions from a CSV source into a ledger, one at a time.
    Rejected transactions and unparseable rows are logged and skipped.
    """

    def __init__(self, ledger: Optional[Ledger] = None):
        self.ledger = ledger if ledger is not None else Ledger()
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> Ledger:
        """
        Process a CSV file and return the ledger.
        OSError, csv.Error and UnicodeDecodeError propagate: the source itself is unusable.
        """
        logger.info(f"Processing transactions from {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            self.process(self._read_transactions(f))
        logger.info(f"Finished processing {filepath}: {self.stats}")
        return self.ledger

    def process(self, transactions: Iterable[Transaction]) -> Ledger:
        for transaction in transactions:
            try:
                self.ledger.submit(transaction)
            except ProcessingError as e:
                logger.warning(str(e))
                self.stats.record_rejection()
            else:
                self.stats.record_success()
        return self.ledger

    def _read_transactions(self, lines: Iterable[str]) -> Iterator[Transaction]:
        """Lazily parse rows; memory stays independent of the file size."""
        reader = csv.DictReader(lines)
        for row in reader:
            transaction = self._parse_row(row)
            if transaction is None:
                self.stats.record_skipped_row()
                continue
            yield transaction

    def _parse_row(self, row: Dict[str, str]) -> Optional[Transaction]:
        """Parse CSV row into Transaction."""
        try:
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = _parse_id(normalized["client"], MAX_CLIENT_ID)
            transaction_id = _parse_id(normalized["tx"], MAX_TRANSACTION_ID)

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = parse_amount(amount_str)

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError) as e:
            logger.warning(f"Failed to parse row {row}: {e}")
            return None


def _parse_id(text: str, maximum: int) -> int:
    value = int(text)
    if not 0 <= value <= maximum:
        raise ValueError(f"id {value} out of range 0..{maximum}")
    return value
