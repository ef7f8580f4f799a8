import logging
import sys
from typing import Optional


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Create or retrieve a console logger.

    Args:
        name (str): Name of the logger.
        level (str, optional): Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
            Defaults to the ``log_level`` setting (``MARKET_LOG_LEVEL``).

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.hasHandlers():  # Avoid adding duplicate handlers
        if level is None:
            from market.config import get_settings
            level = get_settings()["log_level"]
        numeric_level = getattr(logging, str(level).upper(), logging.INFO)
        logger.setLevel(numeric_level)

        console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger
