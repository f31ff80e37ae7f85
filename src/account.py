import logging
from decimal import Inexact, localcontext
from typing import Dict, Optional

import currency
from currency import Currency
from errors import AccountLockedError, AmountOverflowError, InsufficientFundsError, MalformedTransactionError
from models import AccountSnapshot, ClientId, StoredTransaction, Transaction, TransactionId, TransactionType

logger = logging.getLogger(__name__)


class Account:
    """
    Balances of a single client and the deposits/withdrawals it has seen.

    apply() either mutates the account or raises a ProcessingError and leaves
    it untouched. Disputes, resolves and chargebacks that reference an unknown
    transaction, or one in the wrong dispute state, are accepted as no-ops.
    """

    def __init__(self, client_id: ClientId):
        self.client_id = client_id
        self.available: Currency = currency.zero()
        self.held: Currency = currency.zero()
        self.locked = False
        self._transactions: Dict[TransactionId, StoredTransaction] = {}

    @property
    def total(self) -> Currency:
        return currency.ARITHMETIC.add(self.available, self.held)

    def get_transaction(self, transaction_id: TransactionId) -> Optional[StoredTransaction]:
        return self._transactions.get(transaction_id)

    def apply(self, transaction: Transaction) -> None:
        if self.locked:
            raise AccountLockedError(
                f"Account {self.client_id} is locked, rejecting {transaction.transaction_type.value} tx {transaction.transaction_id}"
            )

        try:
            with localcontext(currency.ARITHMETIC):
                self._dispatch(transaction)
        except Inexact:
            raise AmountOverflowError(
                f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: balance of account {self.client_id} out of range"
            ) from None

    def _dispatch(self, transaction: Transaction) -> None:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )

    def _validate_amount(self, transaction: Transaction) -> None:
        if transaction.amount is None or transaction.amount <= 0:
            raise MalformedTransactionError(
                f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: invalid amount {transaction.amount}"
            )

    def _is_duplicate(self, transaction: Transaction) -> bool:
        if transaction.transaction_id in self._transactions:
            logger.info(
                f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: already processed, skipping (idempotent)"
            )
            return True
        return False

    def _store(self, transaction: Transaction) -> None:
        self._transactions[transaction.transaction_id] = StoredTransaction(transaction)

    def _commit(self, available: Currency, held: Currency) -> None:
        # total must be representable too, so check it before touching state
        currency.ARITHMETIC.add(available, held)
        self.available = available
        self.held = held

    def _handle_deposit(self, transaction: Transaction) -> None:
        self._validate_amount(transaction)
        if self._is_duplicate(transaction):
            return

        self._commit(self.available + transaction.amount, self.held)
        self._store(transaction)

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        self._validate_amount(transaction)
        if self._is_duplicate(transaction):
            return

        available = self.available - transaction.amount
        if available < 0:
            raise InsufficientFundsError(
                f"Withdrawal tx {transaction.transaction_id}: amount {transaction.amount} exceeds available funds {self.available}"
            )

        self._commit(available, self.held)
        self._store(transaction)

    def _handle_dispute(self, transaction: Transaction) -> None:
        original = self._transactions.get(transaction.transaction_id)

        if original is None:
            logger.info(f"Dispute for tx {transaction.transaction_id}: no such transaction on account {self.client_id}, ignoring")
            return

        if original.under_dispute:
            logger.info(f"Dispute for tx {transaction.transaction_id}: already under dispute, ignoring")
            return

        self._commit(self.available - original.amount, self.held + original.amount)
        original.start_dispute()

    def _handle_resolve(self, transaction: Transaction) -> None:
        original = self._transactions.get(transaction.transaction_id)

        if original is None or not original.under_dispute:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction not under dispute, ignoring")
            return

        self._commit(self.available + original.amount, self.held - original.amount)
        original.stop_dispute()

    def _handle_chargeback(self, transaction: Transaction) -> None:
        original = self._transactions.get(transaction.transaction_id)

        if original is None or not original.under_dispute:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction not under dispute, ignoring")
            return

        # total follows held since it is derived from available + held
        self._commit(self.available, self.held - original.amount)
        self.locked = True
        original.stop_dispute()
