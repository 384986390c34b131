"""
Logging setup.

One console handler on the package logger. Modules log through
``logging.getLogger(__name__)`` and inherit this configuration.
"""

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logger_name: str = "savings_ledger") -> logging.Logger:
    """Configure and return the package logger."""
    logger = logging.getLogger(logger_name)

    # Remove existing handlers to avoid duplicates on re-configuration
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    return logger
