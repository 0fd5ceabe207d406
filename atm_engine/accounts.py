import logging

from .domain import Account, Transaction, TransactionKind
from .errors import AccountNotFound, CapacityFailure, DuplicateAccount

log = logging.getLogger("accounts")


class AccountStore:
    """In-memory accounts keyed by exact, case-sensitive owner name."""

    def __init__(self):
        self._accounts: dict[str, Account] = {}

    def __len__(self) -> int:
        return len(self._accounts)

    def exists(self, owner: str) -> bool:
        return owner in self._accounts

    def find(self, owner: str) -> Account | None:
        return self._accounts.get(owner)

    def get(self, owner: str) -> Account:
        acct = self._accounts.get(owner)
        if acct is None:
            raise AccountNotFound(f"Account '{owner}' does not exist")
        return acct

    def register(self, owner: str, pin: str) -> Account:
        if owner in self._accounts:
            raise DuplicateAccount(f"Account '{owner}' already exists")
        acct = Account(owner=owner, pin=pin)
        self._accounts[owner] = acct
        log.info("register owner=%s", owner)
        return acct

    def credit(self, owner: str, amount: int) -> int:
        acct = self.get(owner)
        acct.balance += amount
        acct.transactions.append(Transaction(TransactionKind.DEPOSIT, amount))
        log.info("credit owner=%s amount=%s new_balance=%s", owner, amount, acct.balance)
        return acct.balance

    def debit(self, owner: str, amount: int) -> int:
        acct = self.get(owner)
        if amount > acct.balance:
            raise CapacityFailure("insufficient funds")
        acct.balance -= amount
        acct.transactions.append(Transaction(TransactionKind.WITHDRAW, amount))
        log.info("debit owner=%s amount=%s new_balance=%s", owner, amount, acct.balance)
        return acct.balance

    def history(self, owner: str) -> list[Transaction]:
        return list(self.get(owner).transactions)
