"""Logging configuration for the rat graph renderer."""

import sys

from loguru import logger

LOG_FORMAT = "{level.icon} <level>{level: <7}</level> <cyan>{name}</cyan> {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Send log records to stderr; DEBUG when verbose, INFO otherwise."""
    logger.remove()
    level = "DEBUG" if verbose else "INFO"
    logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=False)
