"""
Logging setup for the htmlblocks command line.
"""

import logging
import sys
from pathlib import Path

from ..config.settings import LoggingConfig

PACKAGE_LOGGER = 'htmlblocks'

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def setup_logger(config: LoggingConfig, verbose: bool = False,
                 name: str = PACKAGE_LOGGER) -> logging.Logger:
    """
    Configure the package logger from the logging section of the config.

    Records go to stderr, since stdout carries converted output, and also
    to config.file when one is set.

    Args:
        config: Logging configuration (level name, optional log file)
        verbose: Force DEBUG regardless of config.level
        name: Logger to configure (default: the package logger)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG if verbose else config.level)
    logger.propagate = False
    logger.handlers.clear()

    handlers = [logging.StreamHandler(sys.stderr)]
    if config.file:
        log_path = Path(config.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
