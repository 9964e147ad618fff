# ABOUTME: Logging configuration setup for the mixconf command line
# ABOUTME: Sends warnings to stderr and, with --log-file, a full record to a rotating file
import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT_CONSOLE = "%(levelname)s: %(message)s"
LOG_FORMAT_FILE = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 3


def setup_logging(log_level: str = "INFO", log_file: str | Path | None = None) -> None:
    """
    Configure the "mixconf" logger.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ...)
        log_file: Optional log file; it always receives DEBUG records so a
            conversion can be traced after the fact
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger("mixconf")

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT_CONSOLE))
    logger.addHandler(console_handler)
    logger.setLevel(level)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT_FILE, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    logger.debug(f"Logging initialized at {log_level} level")
