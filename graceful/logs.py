# graceful/logs.py
import logging
import sys

from .config import Settings

LOGGER_NAME = "graceful"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(settings: Settings) -> logging.Logger:
    """
    Configures the 'graceful' logger: stderr always, plus a file when
    GRACEFUL_LOG_FILE is set. Safe to call more than once.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = getattr(logging, settings.log_level, logging.INFO)
    logger.setLevel(level)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if settings.log_file:
        file_handler = logging.FileHandler(settings.log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger
