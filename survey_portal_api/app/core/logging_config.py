"""
Logging configuration for the portal.

``setup_logging`` attaches a console handler, and optionally a file
handler, to the root logger.  Records carry the timestamp, logger
name and level.  Passwords and password hashes must never be passed
to a logger; services log usernames and ids only.

Uvicorn is started with ``log_config=None`` (see ``run.py``), so its
``uvicorn.*`` loggers propagate to the root handlers and share the
format; their levels follow the configured one here.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _apply_levels(numeric_level: int) -> None:
    for name in UVICORN_LOGGERS:
        logging.getLogger(name).setLevel(numeric_level)
    # Connection pool chatter from the avatar lookup is only useful when
    # debugging the upstream itself.
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.WARNING))


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root and server loggers.

    Logger levels are applied on every call.  Handlers are attached only
    when the root logger has none yet, so a second ``create_app`` (or
    pytest's own capture handlers) does not duplicate output.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path of an extra log file.  Parent directories are created.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO
    _apply_levels(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
