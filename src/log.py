"""Log utilities."""

import logging

from rich.logging import RichHandler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger configured for Rich console output.

    The returned logger has its level set to INFO, its handlers replaced
    with a single RichHandler and propagation to ancestor loggers disabled,
    so reporter output is not printed twice when the root logger is
    configured as well. The -v option raises the level to DEBUG.

    Parameters:
        name (str): Name of the logger to retrieve or create.

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    logger.handlers = [RichHandler(show_path=False)]
    logger.propagate = False
    return logger
