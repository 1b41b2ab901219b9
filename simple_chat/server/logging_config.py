"""Logging setup shared by the server modules."""
import logging
from logging.handlers import RotatingFileHandler

from .config import LOG_BACKUP_COUNT, LOG_FILE, LOG_LEVEL, LOG_MAX_BYTES

LOGGER_NAME = "simple_chat_server"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _file_handler() -> RotatingFileHandler:
    LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_FILE,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def configure_logging() -> logging.Logger:
    """Return the server logger, attaching the rotating file handler once.

    Every module that logs calls this at import time, so the handler check
    keeps repeated calls from duplicating output. The level comes from
    ``SIMPLE_CHAT_LOG_LEVEL`` and session events are logged at INFO.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(LOG_LEVEL)
    if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        logger.addHandler(_file_handler())
    return logger
