# promptmanager/services/logging.py
import sys
from typing import Optional

from loguru import logger

from ..config.paths import get_user_log_dir

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}:{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | {name}:{function}:{line} - {message}"
LOG_FILE_NAME = "promptmanager_{time:YYYY-MM-DD}.log"

def _add_file_sink() -> Optional[str]:
    """Daily log file in the user log dir. Returns its path, or None if it could not be opened."""
    try:
        log_file = str(get_user_log_dir() / LOG_FILE_NAME)
        logger.add(
            log_file,
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="1 day",
            retention="7 days",
            compression="zip",
            enqueue=True,
            encoding="utf-8",
        )
    except Exception as e:
        logger.error(f"Could not configure file logging: {e}")
        return None
    return log_file

def setup_logging(level: str = "INFO", verbose: bool = False, log_to_file: bool = True) -> None:
    """
    Replaces loguru's default handler with a colored stderr sink and, unless
    disabled, a daily rotated log file. Sinks are enqueued: pool threads log too.
    """
    console_level = "DEBUG" if verbose else level.upper()
    logger.remove()
    logger.add(sys.stderr, level=console_level, format=CONSOLE_FORMAT, colorize=True, enqueue=True)
    log_file = _add_file_sink() if log_to_file else None
    logger.info(f"Logging ready (console {console_level}, file {log_file or 'disabled'}).")
