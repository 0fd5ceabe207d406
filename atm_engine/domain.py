from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, StrictInt, field_validator


# smallest note the device accepts or dispenses
NOTE_STEP = 5


def as_euros(amount: int) -> str:
    return f"€{amount:.2f}"


class TransactionKind(str, Enum):
    DEPOSIT = "Deposit"
    WITHDRAW = "Withdraw"


@dataclass(frozen=True)
class Transaction:
    kind: TransactionKind
    amount: int
    created_at: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.created_at:%Y-%m-%d %H:%M:%S} {self.kind.value}: {as_euros(self.amount)}"


@dataclass
class Account:
    """A customer account. Transactions are kept in the order they happened."""

    owner: str
    pin: str
    balance: int = 0
    transactions: list[Transaction] = field(default_factory=list)

    def pin_matches(self, pin: str) -> bool:
        return self.pin == pin


class Money(BaseModel):
    amount: StrictInt = Field(..., description=f"Positive amount in whole euros, multiple of {NOTE_STEP}")

    @field_validator("amount")
    @classmethod
    def _positive_multiple(cls, v):
        if v <= 0:
            raise ValueError("amount must be > 0")
        if v % NOTE_STEP != 0:
            raise ValueError(f"amount must be a multiple of {NOTE_STEP}")
        return v


@dataclass(frozen=True)
class CashBundle:
    """Notes confirmed by the denomination resolver, as (denomination, count) pairs."""

    notes: tuple[tuple[int, int], ...]

    @property
    def total(self) -> int:
        return sum(denom * count for denom, count in self.notes)

    def as_dict(self) -> dict[int, int]:
        counts: dict[int, int] = {}
        for denom, count in self.notes:
            counts[denom] = counts.get(denom, 0) + count
        return counts

    def __str__(self) -> str:
        parts = [f"{count}x€{denom}" for denom, count in sorted(self.as_dict().items(), reverse=True)]
        return ", ".join(parts) or "no notes"
