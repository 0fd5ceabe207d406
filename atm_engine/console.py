"""Text front end: home screen, customer menu and technician panel.

All I/O goes through ``input_fn``/``output_fn`` so a session can be scripted.
"""

import logging
from typing import Callable

from .consumables import ConsumableBand
from .denominations import Selection, resolve_notes
from .domain import Account, CashBundle, as_euros
from .engine import ATMEngine
from .errors import ATMError, AuthFailure, ReceiptNotSaved, ResourceDepletion

log = logging.getLogger("console")

OUT_OF_SERVICE_MSG = "[!] ATM out of service. Returning to home."


class Console:
    def __init__(self, engine: ATMEngine,
                 input_fn: Callable[[str], str] | None = None,
                 output_fn: Callable[[str], None] | None = None):
        self.engine = engine
        self._input = input_fn or input
        self._out = output_fn or print

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_int(self, prompt: str) -> int | None:
        try:
            return int(self._ask(prompt))
        except ValueError:
            return None

    # ------------------- HOME SCREEN -------------------

    def run(self) -> None:
        while True:
            self._out("\n--- ATM HOME SCREEN ---")
            if self.engine.is_out_of_service():
                self._out("(ATM out of service: balance inquiries only)")
            self._out("1. Customer Login")
            self._out("2. Technician Login")
            self._out("3. Exit")
            choice = self._ask_int("Select: ")

            if choice == 1:
                self.customer_login()
            elif choice == 2:
                self.technician_login()
            elif choice == 3:
                self._out("Goodbye!")
                return
            elif choice is None:
                self._out("Invalid input.")
            else:
                self._out("Invalid option.")

    def customer_login(self) -> None:
        name = self._ask("Name: ")
        pin = self._ask("PIN: ")
        if not name or not pin:
            self._out("Name and PIN are required.")
            return
        try:
            account = self.engine.authenticate_user(name, pin)
        except AuthFailure as e:
            self._out(f"Access Denied. {e}")
            return
        self.user_menu(account)

    def technician_login(self) -> None:
        tech_id = self._ask("ID: ")
        password = self._ask("Pass: ")
        if self.engine.authenticate_tech(tech_id, password):
            TechnicianPanel(self.engine, self._input, self._out).run()
        else:
            self._out("Access Denied.")

    # ------------------- USER MENU -------------------

    def user_menu(self, account: Account) -> None:
        owner = account.owner
        logged_in = True
        while logged_in:
            self._out(f"\n--- USER MENU ({owner}) ---")
            self._out("1. Check Balance")
            self._out("2. Deposit")
            self._out("3. Withdraw")
            self._out("4. Logout")
            self._out("5. Transaction History")
            act = self._ask_int("Action: ")

            if act == 1:
                self._out(f"Balance: {as_euros(self.engine.check_balance(owner))}")
            elif act == 2:
                logged_in = self.deposit_flow(owner)
            elif act == 3:
                logged_in = self.withdraw_flow(owner)
            elif act == 4:
                self.engine.logout()
                logged_in = False
            elif act == 5:
                self.show_history(owner)
            elif act is None:
                self._out("Invalid input.")
            else:
                self._out("Invalid option.")

    def show_history(self, owner: str) -> None:
        history = self.engine.transaction_history(owner)
        if not history:
            self._out("No transactions yet.")
            return
        self._out("\n--- Transaction History ---")
        for txn in history:
            self._out(str(txn))

    # ------------------- CASH FLOWS -------------------
    # Each flow returns False when the session has to end.

    def _service_gate(self) -> bool:
        if self.engine.is_out_of_service() or not self.engine.check_paper_ink_warning():
            self._out(OUT_OF_SERVICE_MSG)
            self.engine.logout()
            return False
        return True

    def _confirm_paper_ink(self) -> bool:
        if self.engine.paper_ink_status() is ConsumableBand.LOW:
            self._out("[!] Paper or ink is running low.")
            return self._ask("Continue anyway? (y/n): ").lower() in {"y", "yes"}
        return True

    def _ask_amount(self, prompt: str) -> int | None:
        """Re-prompt until a positive multiple of 5 is entered; blank input cancels."""
        while True:
            raw = self._ask(prompt)
            if not raw:
                return None
            try:
                amount = int(raw)
            except ValueError:
                self._out("Invalid amount.")
                continue
            if amount <= 0 or amount % 5 != 0:
                self._out("Amount must be positive and in multiples of €5.")
                continue
            return amount

    def _collect_notes(self, target: int, verb: str, available: int | None = None) -> CashBundle | None:
        steps = resolve_notes(target, available)
        try:
            menu = next(steps)
            while True:
                if menu.rejected:
                    self._out(f"[!] {menu.rejected}")
                self._out(f"Choose a denomination to {verb} (remaining: €{menu.remaining}):")
                for i, opt in enumerate(menu.options, 1):
                    self._out(f"{i}. €{opt.value}")
                self._out("0. Cancel")
                sel = self._ask_int("Select: ")
                if sel == 0:
                    menu = steps.send(None)
                    continue
                if sel is None or not 1 <= sel <= len(menu.options):
                    self._out("Invalid selection.")
                    continue
                opt = menu.options[sel - 1]
                qty = self._ask_int(f"How many €{opt.value} notes? (max {opt.max_count}): ")
                if qty is None:
                    self._out("Invalid number.")
                    continue
                menu = steps.send(Selection(opt.value, qty))
                if not menu.rejected:
                    self._out(f"Added €{opt.value * qty} ({qty}x€{opt.value}) (total: €{menu.total})")
        except StopIteration as stop:
            return stop.value

    def _after_receipt(self) -> bool:
        if self.engine.is_out_of_service():
            self._out("[!] ATM out of service. Logging out...")
            self.engine.logout()
            return False
        return True

    def deposit_flow(self, owner: str) -> bool:
        if not self._service_gate():
            return False
        if not self._confirm_paper_ink():
            return True

        desired = self._ask_amount("Desired total deposit (€): ")
        if desired is None:
            self._out("Deposit cancelled.")
            return True
        bundle = self._collect_notes(desired, "add")
        if bundle is None:
            self._out("Deposit cancelled.")
            return True

        try:
            self.engine.deposit(owner, bundle.total)
        except ResourceDepletion:
            self._out(OUT_OF_SERVICE_MSG)
            return False
        except ReceiptNotSaved as e:
            self._out(f"Deposited {as_euros(bundle.total)} ({bundle}).")
            self._out(f"[!] Printer levels could not be saved: {e}")
            return self._after_receipt()
        except ATMError as e:
            log.error("deposit failed owner=%s: %s", owner, e)
            self._out(f"[!] {e}")
            return True
        self._out(f"Deposited {as_euros(bundle.total)} ({bundle}).")
        return self._after_receipt()

    def withdraw_flow(self, owner: str) -> bool:
        if not self._service_gate():
            return False
        if not self._confirm_paper_ink():
            return True

        desired = self._ask_amount("Desired total withdrawal (€): ")
        if desired is None:
            self._out("Withdrawal cancelled.")
            return True
        if desired > self.engine.check_balance(owner):
            self._out("[!] Insufficient account balance.")
            return True
        available = self.engine.get_cash_available()
        if desired > available:
            self._out("[!] ATM does not have enough cash.")
            return True

        bundle = self._collect_notes(desired, "withdraw", available)
        if bundle is None:
            self._out("Withdrawal cancelled.")
            return True

        try:
            ok = self.engine.withdraw(owner, bundle.total)
        except ResourceDepletion:
            self._out(OUT_OF_SERVICE_MSG)
            return False
        except ReceiptNotSaved as e:
            self._out(f"Dispensed {as_euros(bundle.total)} ({bundle}).")
            self._out(f"[!] Printer levels could not be saved: {e}")
            return self._after_receipt()
        except ATMError as e:
            log.error("withdraw failed owner=%s: %s", owner, e)
            self._out(f"[!] {e}")
            return True
        if not ok:
            self._out("[!] Withdrawal rejected.")
            return True
        self._out(f"Dispensed {as_euros(bundle.total)} ({bundle}).")
        return self._after_receipt()


class TechnicianPanel:
    def __init__(self, engine: ATMEngine,
                 input_fn: Callable[[str], str] | None = None,
                 output_fn: Callable[[str], None] | None = None):
        self.engine = engine
        self._input = input_fn or input
        self._out = output_fn or print

    def run(self) -> None:
        while True:
            self._out("\n--- TECHNICIAN PANEL ---")
            self._out("1. Device Status")
            self._out("2. Refill Paper")
            self._out("3. Refill Ink")
            self._out("4. Add Cash")
            self._out("5. Toggle Offline")
            self._out("6. Back")
            try:
                choice = int(self._input("Select: ").strip())
            except ValueError:
                self._out("Invalid input.")
                continue

            if choice == 6:
                return
            try:
                self.handle(choice)
            except ATMError as e:
                log.error("technician action %s failed: %s", choice, e)
                self._out(f"[!] {e}")

    def handle(self, choice: int) -> None:
        if choice == 1:
            s = self.engine.status()
            self._out(f"Cash available: {as_euros(s.cash_available)}")
            self._out(f"Paper: {s.paper_level}  Ink: {s.ink_level}  ({s.band.value})")
            self._out(f"Offline: {s.offline}  Out of service: {s.out_of_service}")
        elif choice == 2:
            self._out(f"Paper refilled to {self.engine.refill_paper()}.")
        elif choice == 3:
            self._out(f"Ink refilled to {self.engine.refill_ink()}.")
        elif choice == 4:
            self.add_cash()
        elif choice == 5:
            offline = not self.engine.status().offline
            self.engine.set_offline(offline)
            self._out("ATM is now offline." if offline else "ATM is now online.")
        else:
            self._out("Invalid option.")

    def add_cash(self) -> None:
        raw = self._input("Amount to load (€): ").strip()
        try:
            amount = int(raw)
        except ValueError:
            self._out("Invalid amount.")
            return
        total = self.engine.replenish_cash(amount)
        self._out(f"Cash available: {as_euros(total)}")
