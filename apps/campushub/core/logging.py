"""Process-wide logging setup, run once when the app module is imported."""

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# passlib logs a traceback whenever it cannot read the bcrypt version.
_QUIET_LOGGERS = {"passlib.handlers.bcrypt": logging.ERROR}


def resolve_level(raw: str | int | None) -> int:
    """Map a level name, number or numeric string to a logging level; INFO otherwise."""

    if isinstance(raw, int):
        return raw
    if not raw:
        return logging.INFO
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def setup_logging(level: str | int | None = None) -> None:
    """Attach a stdout handler to the root logger (once) and set its level.

    Without an explicit `level`, `CAMPUSHUB_LOG_LEVEL` wins over `LOG_LEVEL`.
    """
    if level is None:
        level = os.getenv("CAMPUSHUB_LOG_LEVEL") or os.getenv("LOG_LEVEL")

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        logging.captureWarnings(True)
    root.setLevel(resolve_level(level))

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)
