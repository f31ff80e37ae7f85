from typing import Dict, Iterator, Optional

from account import Account
from models import AccountSnapshot, ClientId, Transaction


class Ledger:
    """
    All client accounts for one run.
    Accounts are created on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[ClientId, Account] = {}

    def submit(self, transaction: Transaction) -> None:
        """Apply a transaction to its client's account. ProcessingError propagates to the caller."""
        account = self._get_or_create_account(transaction.client_id)
        account.apply(transaction)

    def get_account(self, client_id: ClientId) -> Optional[Account]:
        return self._accounts.get(client_id)

    def accounts(self) -> Iterator[AccountSnapshot]:
        """Snapshots of every known account, in no particular order."""
        for account in self._accounts.values():
            yield account.snapshot()

    def _get_or_create_account(self, client_id: ClientId) -> Account:
        if client_id not in self._accounts:
            self._accounts[client_id] = Account(client_id)
        return self._accounts[client_id]

    def __len__(self) -> int:
        return len(self._accounts)
