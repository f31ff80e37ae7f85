import sys
import os
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from errors import AccountLockedError, InsufficientFundsError
from ledger import Ledger
from models import Transaction, TransactionType


class TestLedger:
    def setup_method(self):
        self.ledger = Ledger()

    def test_empty(self):
        assert len(self.ledger) == 0
        assert list(self.ledger.accounts()) == []

    def test_account_created_on_first_reference(self):
        self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("10")))
        account = self.ledger.get_account(1)

        self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 2, Decimal("5")))

        assert len(self.ledger) == 1
        assert self.ledger.get_account(1) is account
        assert account.available == Decimal("15")

    def test_get_account_does_not_create(self):
        assert self.ledger.get_account(42) is None
        assert len(self.ledger) == 0

    def test_dispute_creates_empty_account(self):
        self.ledger.submit(Transaction(TransactionType.DISPUTE, 3, 1))

        account = self.ledger.get_account(3)
        assert account is not None
        assert account.total == Decimal("0")

    def test_rejected_transaction_still_creates_account(self):
        with pytest.raises(InsufficientFundsError):
            self.ledger.submit(Transaction(TransactionType.WITHDRAWAL, 9, 1, Decimal("1")))

        assert self.ledger.get_account(9).total == Decimal("0")

    def test_errors_propagate(self):
        self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("1.0")))
        self.ledger.submit(Transaction(TransactionType.DISPUTE, 1, 1))
        self.ledger.submit(Transaction(TransactionType.CHARGEBACK, 1, 1))

        with pytest.raises(AccountLockedError):
            self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 2, Decimal("1.0")))

    def test_clients_isolated(self):
        transactions = [
            Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("100")),
            Transaction(TransactionType.DEPOSIT, 2, 2, Decimal("50")),
            Transaction(TransactionType.WITHDRAWAL, 1, 3, Decimal("30")),
            Transaction(TransactionType.DISPUTE, 2, 2),
            Transaction(TransactionType.DISPUTE, 2, 1),
            Transaction(TransactionType.CHARGEBACK, 2, 2),
            Transaction(TransactionType.DEPOSIT, 1, 4, Decimal("1")),
        ]
        for transaction in transactions:
            self.ledger.submit(transaction)

        snapshots = {s.client_id: s for s in self.ledger.accounts()}

        assert set(snapshots) == {1, 2}
        assert snapshots[1].available == Decimal("71")
        assert snapshots[1].held == Decimal("0")
        assert snapshots[1].locked is False
        assert snapshots[2].available == Decimal("0")
        assert snapshots[2].total == Decimal("0")
        assert snapshots[2].locked is True

    def test_chargeback_scenario(self):
        self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 1, Decimal("1.0")))
        account = self.ledger.get_account(1)
        assert (account.available, account.held, account.total) == (Decimal("1"), Decimal("0"), Decimal("1"))

        self.ledger.submit(Transaction(TransactionType.DISPUTE, 1, 1))
        assert (account.available, account.held, account.total) == (Decimal("0"), Decimal("1"), Decimal("1"))

        self.ledger.submit(Transaction(TransactionType.CHARGEBACK, 1, 1))
        assert (account.available, account.held, account.total) == (Decimal("0"), Decimal("0"), Decimal("0"))
        assert account.locked is True

        with pytest.raises(AccountLockedError):
            self.ledger.submit(Transaction(TransactionType.DEPOSIT, 1, 2, Decimal("1.0")))
