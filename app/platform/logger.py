import logging
import os
from logging.handlers import RotatingFileHandler

from app.platform.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

log_dir = os.path.join(os.getcwd(), settings.LOG_DIR)
os.makedirs(log_dir, exist_ok=True)
log_file_path = os.path.join(log_dir, "pagespeed.log")


def get_logger(name: str) -> logging.Logger:
    """
    Logger that writes to the console and to a rotating file under LOG_DIR.

    Handlers are attached once per name, so calling this at import time in
    every module is safe.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = RotatingFileHandler(log_file_path, maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger
