import logging
from dataclasses import dataclass
from threading import Lock

from pydantic import ValidationError

from .accounts import AccountStore
from .consumables import ConsumableBand, ConsumablesTracker
from .domain import Account, Money, Transaction
from .errors import AuthFailure, PersistenceError, ReceiptNotSaved, ResourceDepletion, ValidationFailure
from .repo import StateRepo
from .settings import ATMSettings

log = logging.getLogger("engine")


@dataclass(frozen=True)
class DeviceStatus:
    cash_available: int
    paper_level: int
    ink_level: int
    band: ConsumableBand
    offline: bool
    out_of_service: bool


class ATMEngine:
    """Single-owner transaction engine for one ATM.

    Owns the vault total and the out-of-service derivation. Deposits and
    withdrawals run under one lock: validate, persist vault, move balance
    and vault, print the receipt.
    """

    def __init__(self, settings: ATMSettings, accounts: AccountStore,
                 consumables: ConsumablesTracker, state: StateRepo):
        self.settings = settings
        self.accounts = accounts
        self.consumables = consumables
        self._state = state
        self._cash = state.load_cash(settings.initial_cash)
        self._offline = state.load_offline()
        self._current_user: str | None = None
        self._lock = Lock()
        log.info("engine ready cash=%s offline=%s", self._cash, self._offline)

    # ---- session ----

    @property
    def current_user(self) -> str | None:
        return self._current_user

    def authenticate_user(self, name: str, pin: str) -> Account:
        acct = self.accounts.find(name)
        if acct is None:
            if not self.settings.allow_auto_register:
                log.info("auth rejected: unknown owner=%s", name)
                raise AuthFailure("Unknown account.")
            acct = self.accounts.register(name, pin)
            log.info("auto-registered owner=%s", name)
        elif not acct.pin_matches(pin):
            log.info("auth rejected: wrong pin owner=%s", name)
            raise AuthFailure("Incorrect PIN.")
        self._current_user = acct.owner
        log.info("login owner=%s", acct.owner)
        return acct

    def authenticate_tech(self, tech_id: str, password: str) -> bool:
        ok = any(c.matches(tech_id, password) for c in self.settings.technicians)
        log.info("technician login id=%s ok=%s", tech_id, ok)
        return ok

    def logout(self) -> None:
        if self._current_user is not None:
            log.info("logout owner=%s", self._current_user)
        self._current_user = None

    # ---- queries ----

    def is_out_of_service(self) -> bool:
        return self._offline or self.consumables.is_depleted()

    def check_balance(self, owner: str) -> int:
        return self.accounts.get(owner).balance

    def get_cash_available(self) -> int:
        return self._cash

    def paper_ink_status(self) -> ConsumableBand:
        return self.consumables.warning_threshold()

    def check_paper_ink_warning(self) -> bool:
        """False when a receipt cannot be printed and the caller must abort."""
        band = self.consumables.warning_threshold()
        if band is ConsumableBand.DEPLETED:
            return False
        if band is ConsumableBand.LOW:
            log.warning("paper/ink low paper=%s ink=%s",
                        self.consumables.paper_level, self.consumables.ink_level)
        return True

    def transaction_history(self, owner: str) -> list[Transaction]:
        return self.accounts.history(owner)

    def status(self) -> DeviceStatus:
        return DeviceStatus(
            cash_available=self._cash,
            paper_level=self.consumables.paper_level,
            ink_level=self.consumables.ink_level,
            band=self.consumables.warning_threshold(),
            offline=self._offline,
            out_of_service=self.is_out_of_service(),
        )

    # ---- cash operations ----

    @staticmethod
    def _validate(amount) -> int:
        try:
            return Money(amount=amount).amount
        except ValidationError as e:
            msg = e.errors()[0].get("msg", "invalid amount")
            raise ValidationFailure(msg) from e

    def _ensure_in_service(self) -> None:
        if self.is_out_of_service():
            log.warning("operation blocked: out of service, forcing logout")
            self.logout()
            raise ResourceDepletion("ATM out of service.")

    def deposit(self, owner: str, amount: int) -> None:
        amount = self._validate(amount)
        with self._lock:
            self._ensure_in_service()
            self.accounts.get(owner)
            new_cash = self._cash + amount
            self._state.save_cash(new_cash)
            self.accounts.credit(owner, amount)
            self._cash = new_cash
            log.info("deposit owner=%s amount=%s cash=%s", owner, amount, self._cash)
            self._receipt_after_commit()

    def withdraw(self, owner: str, amount: int) -> bool:
        amount = self._validate(amount)
        with self._lock:
            self._ensure_in_service()
            balance = self.accounts.get(owner).balance
            if amount > balance:
                log.info("withdraw rejected owner=%s amount=%s balance=%s", owner, amount, balance)
                return False
            if amount > self._cash:
                log.info("withdraw rejected owner=%s amount=%s cash=%s", owner, amount, self._cash)
                return False
            new_cash = self._cash - amount
            self._state.save_cash(new_cash)
            self.accounts.debit(owner, amount)
            self._cash = new_cash
            log.info("withdraw owner=%s amount=%s cash=%s", owner, amount, self._cash)
            self._receipt_after_commit()
            return True

    def print_receipt(self) -> None:
        self.consumables.consume()

    def _receipt_after_commit(self) -> None:
        # balance and vault are already committed at this point
        try:
            self.print_receipt()
        except PersistenceError as e:
            log.error("receipt printed but levels not saved: %s", e)
            raise ReceiptNotSaved(str(e)) from e

    # ---- technician ----

    def refill_paper(self, amount: int | None = None) -> int:
        with self._lock:
            return self.consumables.refill_paper(amount)

    def refill_ink(self, amount: int | None = None) -> int:
        with self._lock:
            return self.consumables.refill_ink(amount)

    def replenish_cash(self, amount: int) -> int:
        amount = self._validate(amount)
        with self._lock:
            new_cash = self._cash + amount
            self._state.save_cash(new_cash)
            self._cash = new_cash
        log.info("vault replenished by %s cash=%s", amount, self._cash)
        return self._cash

    def set_offline(self, offline: bool) -> None:
        with self._lock:
            self._state.save_offline(offline)
            self._offline = offline
        log.info("device %s by technician", "offline" if offline else "online")
