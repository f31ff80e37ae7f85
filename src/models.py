from dataclasses import dataclass
from enum import Enum
from typing import Optional

from currency import Currency

ClientId = int
TransactionId = int

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: ClientId
    transaction_id: TransactionId
    amount: Optional[Currency] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class StoredTransaction:
    """A deposit or withdrawal kept by an account so it can be disputed later."""

    transaction: Transaction
    under_dispute: bool = False

    @property
    def amount(self) -> Currency:
        return self.transaction.amount

    def start_dispute(self) -> None:
        self.under_dispute = True

    def stop_dispute(self) -> None:
        self.under_dispute = False


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: ClientId
    available: Currency
    held: Currency
    total: Currency
    locked: bool


@dataclass
class ProcessingStats:
    """Counters for a single run."""

    processed: int = 0
    rejected: int = 0
    skipped: int = 0

    def record_success(self) -> None:
        self.processed += 1

    def record_rejection(self) -> None:
        self.rejected += 1

    def record_skipped_row(self) -> None:
        self.skipped += 1

    def __str__(self) -> str:
        return f"Processed: {self.processed}, Rejected: {self.rejected}, Skipped: {self.skipped}"
