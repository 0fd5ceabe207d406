import logging
import os
from logging.handlers import TimedRotatingFileHandler
import sys


def setup_logging(log_dir: str | None = None, level: str = "INFO"):
    """Configure application-wide logging with console + rotating file."""
    root = logging.getLogger()
    if root.handlers:
        # Avoid double configuration if reloaded
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] [%(name)s] %(message)s")

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            os.path.join(log_dir, "atm.log"), when="midnight", backupCount=7, encoding="utf-8"
        )
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)
