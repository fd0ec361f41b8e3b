"""Logging for the portfolio package.

Every module gets its logger from ``setup_logging`` at import time. Loggers
live under the ``portfolio.`` namespace, write one line per record to the
console and take their level from ``LOG_LEVEL`` (default INFO).

Example:
    ```python
    from portfolio.core.logging import setup_logging

    logger = setup_logging('my_module')
    logger.info('This is an info message')
    logger.error('This is an error message')
    ```
"""
import logging
import os

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(logger_name: str) -> logging.Logger:
    """Return the ``portfolio.<logger_name>`` logger, configuring it once.

    Args:
        logger_name: The name for the logger, typically the module name

    Returns:
        A configured logger instance
    """
    logger = logging.getLogger(f'portfolio.{logger_name}')

    # Only configure if it hasn't been configured already
    if not logger.handlers:
        level = logging.getLevelName(os.getenv('LOG_LEVEL', 'INFO').upper())
        if not isinstance(level, int):
            level = logging.INFO
        logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger

# Make sure the root logger has a handler to avoid "no handler found" warnings
logging.getLogger().addHandler(logging.NullHandler())
