"""Turn a requested total into an exact bundle of notes, one selection at a time.

The resolver is a generator. Each step yields a :class:`DenominationMenu`
describing what may be chosen next; the caller sends back a
:class:`Selection` or ``None`` to cancel. When the running total reaches
the target the generator returns a :class:`CashBundle`. A cancelled
resolution returns ``None``. Nothing outside the generator is mutated, so
abandoning one halfway is always safe::

    steps = resolve_notes(35)
    menu = next(steps)
    menu = steps.send(Selection(20, 1))
    ...
"""

import logging
from dataclasses import dataclass
from typing import Generator, Iterable

from .domain import CashBundle
from .errors import CapacityFailure, ValidationFailure

log = logging.getLogger("denominations")

DENOMINATIONS = (5, 10, 20, 50, 100)


@dataclass(frozen=True)
class DenominationOption:
    value: int
    max_count: int


@dataclass(frozen=True)
class DenominationMenu:
    target: int
    total: int
    options: tuple[DenominationOption, ...]
    rejected: str | None = None  # why the previous selection was refused

    @property
    def remaining(self) -> int:
        return self.target - self.total

    def max_count(self, denomination: int) -> int:
        for opt in self.options:
            if opt.value == denomination:
                return opt.max_count
        return 0


@dataclass(frozen=True)
class Selection:
    denomination: int
    count: int


def _max_count(denom: int, remaining: int, headroom: int | None) -> int:
    by_remaining = remaining // denom
    if headroom is None:
        return by_remaining
    return min(by_remaining, max(0, headroom) // denom)


def resolve_notes(
    target: int,
    available: int | None = None,
    denominations: Iterable[int] = DENOMINATIONS,
) -> Generator[DenominationMenu, Selection | None, CashBundle | None]:
    """Resolve ``target`` into notes. ``available`` caps withdrawals at the vault's cash."""
    denoms = tuple(sorted(set(denominations)))
    if not denoms or denoms[0] <= 0:
        raise ValidationFailure("denominations must be positive")
    step = denoms[0]
    if isinstance(target, bool) or not isinstance(target, int) or target <= 0 or target % step:
        raise ValidationFailure(f"Amount must be positive and in multiples of €{step}.")
    if available is not None and target > available:
        raise CapacityFailure("ATM does not have enough cash.")

    picked: list[tuple[int, int]] = []
    total = 0
    rejected = None
    while total < target:
        remaining = target - total
        headroom = None if available is None else available - total
        options = tuple(
            DenominationOption(d, _max_count(d, remaining, headroom))
            for d in denoms
            if d <= remaining and (headroom is None or d <= headroom)
        )
        menu = DenominationMenu(target=target, total=total, options=options, rejected=rejected)
        rejected = None

        selection = yield menu
        if selection is None:
            log.info("resolution cancelled target=%s at total=%s", target, total)
            return None

        denom, count = selection.denomination, selection.count
        if denom not in denoms:
            rejected = f"€{denom} is not an accepted note."
            continue
        max_qty = menu.max_count(denom)
        if max_qty == 0:
            rejected = f"Cannot add €{denom} note; exceeds remaining or ATM lacks cash."
            continue
        if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= max_qty:
            rejected = f"Enter a number between 1 and {max_qty}"
            continue

        picked.append((denom, count))
        total += denom * count
        log.debug("added %sx€%s total=%s target=%s", count, denom, total, target)

    return CashBundle(tuple(picked))


_EXHAUSTED = object()


def resolve_with(
    target: int,
    selections: Iterable[Selection | None],
    available: int | None = None,
    denominations: Iterable[int] = DENOMINATIONS,
) -> CashBundle | None:
    """Drive :func:`resolve_notes` from a prepared list of selections.

    Rejected selections are skipped the same way an interactive user would be
    re-prompted. Raises :class:`ValidationFailure` if the selections run out
    before the target is reached.
    """
    steps = resolve_notes(target, available, denominations)
    picks = iter(selections)
    try:
        next(steps)
        while True:
            pick = next(picks, _EXHAUSTED)
            if pick is _EXHAUSTED:
                steps.close()
                raise ValidationFailure(f"selections ran out before reaching €{target}")
            steps.send(pick)
    except StopIteration as stop:
        return stop.value
