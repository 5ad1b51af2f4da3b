# louage/utils/logger.py
"""
Logging setup for the Louage backend.

Every module asks for its logger through get_logger(__name__); the first call
attaches a console handler and a size-rotated file handler to the root logger.
Level, file location and rotation come from Settings (LOG_* variables).
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from louage.config import settings

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def log_file_path(config=settings) -> str:
    log_dir = config.LOG_DIR or os.path.join(PROJECT_ROOT, "logs")
    return os.path.join(log_dir, config.LOG_FILE)


def build_file_handler(config=settings) -> RotatingFileHandler:
    path = log_file_path(config)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    return RotatingFileHandler(
        filename=path,
        maxBytes=config.LOG_MAX_BYTES,
        backupCount=config.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )


def configure_logging(config=settings):
    """Attach handlers to the root logger. Runs once per process."""
    global _configured
    if _configured:
        return
    _configured = True

    level = config.LOG_LEVEL.upper()
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)
    for handler in (logging.StreamHandler(), build_file_handler(config)):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    # SQL echo is opt-in; at DEBUG level it would flood the booking logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if config.LOG_SQL else logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
