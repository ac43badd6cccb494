"""
Logging setup shared by the API, the analytics engine and the operator scripts.
Console output always; a rotating file under LOG_DIR when LOG_TO_FILE is on.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from parking_analytics.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Libraries that are chatty at INFO
_NOISY_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")

_configured = False


def _resolve_log_dir() -> str:
    if settings.LOG_DIR:
        return settings.LOG_DIR
    repo_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    return os.path.join(repo_root, "logs")


def configure_logging(level: str = None):
    """Attach handlers to the root logger. Only the first call has an effect."""
    global _configured
    if _configured:
        return
    _configured = True

    level = (level or settings.LOG_LEVEL).upper()
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    if settings.LOG_TO_FILE:
        log_dir = _resolve_log_dir()
        os.makedirs(log_dir, exist_ok=True)
        # 10 × 5MB
        file_handler = RotatingFileHandler(
            filename=os.path.join(log_dir, "analytics.log"),
            maxBytes=5 * 1024 * 1024,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        root.addHandler(file_handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    configure_logging()
    return logging.getLogger(name)
