"""
Logging configuration.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

from hba_checker.core.config import settings

_HANDLER_NAMES = ("hba_checker.console", "hba_checker.file")


def setup_logging():
    """
    Configure application logging.

    Console output goes to stderr so stdout stays reserved for the
    suggested rule line. Calling this more than once replaces the
    handlers installed by the previous call.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.WARNING)

    # Configure root logger
    logger = logging.getLogger()
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        if handler.get_name() in _HANDLER_NAMES:
            logger.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.set_name("hba_checker.console")
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    # File handler
    if settings.LOG_DIR:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "hba_checker.log",
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5
        )
        file_handler.set_name("hba_checker.file")
        file_handler.setLevel(log_level)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)
