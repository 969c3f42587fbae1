"""
Centralized logging configuration.

Every module obtains its logger through get_logger(__name__); the root
logger is configured once at startup by setup_logging(). Output goes to
stdout and to a daily file under logs/.
"""
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


# Module-level flag to prevent duplicate handler registration
_logging_configured = False

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at DEBUG level
QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "groq", "google")


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    log_to_file: bool = True,
) -> logging.Logger:
    """
    Configure application-wide logging.

    Safe to call more than once; only the first call installs handlers.

    Args:
        log_level: Console level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files. Defaults to 'logs/' in project root.
        log_to_file: Disable to log to the console only

    Returns:
        Configured root logger instance
    """
    global _logging_configured

    if _logging_configured:
        return logging.getLogger()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(console_handler)

    log_file = None
    if log_to_file:
        if log_dir is None:
            log_dir = Path(__file__).parent.parent.parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        # Daily log files; the file captures everything
        log_file = log_dir / f"frontdesk_{datetime.now().strftime('%Y%m%d')}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _logging_configured = True

    root_logger.debug(f"Logging configured: level={log_level}, file={log_file}")

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger instance for the specified name

    Example:
        >>> from src.core.logging_config import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("Cache cleared")
        2024-01-15 10:30:45 | INFO     | src.memory.cache:42 | Cache cleared
    """
    return logging.getLogger(name)
