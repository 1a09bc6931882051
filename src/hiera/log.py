"""Logging setup for the `hiera` logger hierarchy."""

import logging
from contextlib import suppress
from typing import Literal

LOGGER_NAME = 'hiera'
LOG_FORMAT = '%(levelname)s | %(name)s | %(message)s'


def setup_logging(kind: Literal['console', 'noop'] = 'console',
                  level: int = logging.WARNING) -> logging.Logger:
    """Configure the root `hiera` logger.

    Previously attached handlers are closed and replaced, so repeated
    calls do not duplicate output.

    Args:
        kind: `console` writes to standard error, `noop` discards records.
        level: Minimum level of emitted records.

    Returns:
        The configured logger.
    """
    root = logging.getLogger(LOGGER_NAME)
    _close_handlers(root)
    root.setLevel(level)

    if kind == 'noop':
        root.addHandler(logging.NullHandler())
        root.propagate = False
        return root

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)
    root.propagate = False

    return root


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        with suppress(Exception):
            handler.close()
