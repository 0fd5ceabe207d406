"""Paper and ink stock for the receipt printer."""

import logging
from enum import Enum

from .repo import StateRepo

log = logging.getLogger("consumables")


class ConsumableBand(str, Enum):
    HEALTHY = "healthy"
    LOW = "low"          # warn, but printing may proceed
    DEPLETED = "depleted"


class ConsumablesTracker:
    """Holds paper/ink levels and writes every change through to the state repo.

    Levels live in ``[0, max_level]``. Each receipt costs ``paper_cost`` paper
    and ``ink_cost`` ink. A level of 0 means the printer cannot print.
    """

    def __init__(self, repo: StateRepo, paper: int, ink: int, *,
                 paper_cost: int = 1, ink_cost: int = 1,
                 low_threshold: int = 10, max_level: int = 100):
        self._repo = repo
        self._paper = self._clamp(paper, max_level)
        self._ink = self._clamp(ink, max_level)
        self.paper_cost = paper_cost
        self.ink_cost = ink_cost
        self.low_threshold = low_threshold
        self.max_level = max_level

    @classmethod
    def load(cls, repo: StateRepo, **kwargs) -> "ConsumablesTracker":
        max_level = kwargs.get("max_level", 100)
        paper = repo.load_paper_level(max_level)
        ink = repo.load_ink_level(max_level)
        log.info("loaded paper=%s ink=%s", paper, ink)
        return cls(repo, paper, ink, **kwargs)

    @staticmethod
    def _clamp(level: int, max_level: int) -> int:
        return max(0, min(level, max_level))

    @property
    def paper_level(self) -> int:
        return self._paper

    @property
    def ink_level(self) -> int:
        return self._ink

    def consume(self) -> None:
        """Charge one receipt. The in-memory levels are applied before saving."""
        self._paper = max(0, self._paper - self.paper_cost)
        self._ink = max(0, self._ink - self.ink_cost)
        log.info("receipt printed paper=%s ink=%s", self._paper, self._ink)
        if self.is_depleted():
            log.warning("consumables depleted paper=%s ink=%s", self._paper, self._ink)
        self._repo.save_paper_level(self._paper)
        self._repo.save_ink_level(self._ink)

    def warning_threshold(self) -> ConsumableBand:
        if self.is_depleted():
            return ConsumableBand.DEPLETED
        if min(self._paper, self._ink) <= self.low_threshold:
            return ConsumableBand.LOW
        return ConsumableBand.HEALTHY

    def is_depleted(self) -> bool:
        return self._paper == 0 or self._ink == 0

    def refill_paper(self, amount: int | None = None) -> int:
        self._paper = self.max_level if amount is None else self._clamp(self._paper + amount, self.max_level)
        log.info("paper refilled to %s", self._paper)
        self._repo.save_paper_level(self._paper)
        return self._paper

    def refill_ink(self, amount: int | None = None) -> int:
        self._ink = self.max_level if amount is None else self._clamp(self._ink + amount, self.max_level)
        log.info("ink refilled to %s", self._ink)
        self._repo.save_ink_level(self._ink)
        return self._ink
