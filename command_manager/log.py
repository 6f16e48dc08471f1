from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

LOGGER_NAME = "command_manager"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_handler: Optional[logging.Handler] = None


def setup_logging(path: Path, level: int = logging.INFO) -> logging.Logger:
    """
    Send package logs to `path`.

    curses owns the terminal while the TUI runs, so nothing is ever logged to
    stderr. Calling this again replaces the previous file handler.
    """
    global _handler
    logger = logging.getLogger(LOGGER_NAME)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler.close()
        _handler = None

    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    _handler = handler
    return logger


def teardown_logging() -> None:
    global _handler
    if _handler is None:
        return
    logging.getLogger(LOGGER_NAME).removeHandler(_handler)
    _handler.close()
    _handler = None
