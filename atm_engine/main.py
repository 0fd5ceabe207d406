import argparse
import logging
import os

from .app import create_engine
from .console import Console
from .errors import ATMError
from .logger_config import setup_logging
from .settings import ATMSettings

log = logging.getLogger("main")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Run the ATM console.")
    parser.add_argument("--db", help="state database path (overrides ATM_DB_PATH)")
    args = parser.parse_args(argv)
    if args.db:
        os.environ["ATM_DB_PATH"] = args.db

    try:
        settings = ATMSettings.from_env()
        setup_logging(settings.log_dir, settings.log_level)
        engine = create_engine(settings)
    except ATMError as e:
        log.error("startup failed: %s", e)
        return 1

    try:
        Console(engine).run()
    except (KeyboardInterrupt, EOFError):
        engine.logout()
        print("\nGoodbye!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
