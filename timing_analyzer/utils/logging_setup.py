"""
Logger configuration for the timing analyzer.
"""

import logging
import sys

ROOT_LOGGER_NAME = "timing_analyzer"


def setup_logger(level: int = logging.WARNING) -> logging.Logger:
    """
    Configure the package logger to write to stderr.
    Calling it again only updates the level.

    Args:
        level: Minimum level to emit

    Returns:
        The package root logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
