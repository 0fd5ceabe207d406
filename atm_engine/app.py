import logging

from .accounts import AccountStore
from .consumables import ConsumablesTracker
from .engine import ATMEngine
from .repo import StateRepo
from .settings import ATMSettings

log = logging.getLogger("app")


def create_engine(settings: ATMSettings | None = None, accounts: AccountStore | None = None) -> ATMEngine:
    """Open state storage, load the saved levels and build the engine around them."""
    settings = settings or ATMSettings.from_env()
    state = StateRepo(settings.db_path)
    state.init()

    consumables = ConsumablesTracker.load(
        state,
        paper_cost=settings.paper_cost,
        ink_cost=settings.ink_cost,
        low_threshold=settings.low_threshold,
        max_level=settings.max_level,
    )
    engine = ATMEngine(settings, accounts or AccountStore(), consumables, state)
    log.info("ATM started db=%s", settings.db_path)
    return engine
