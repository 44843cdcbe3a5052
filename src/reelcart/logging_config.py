"""Logging setup for the ReelCart application."""

import logging
from logging.handlers import RotatingFileHandler

from .config import LoggingConfig

logger = logging.getLogger(__name__)

ROOT_LOGGER = "reelcart"


def configure_logging(config: LoggingConfig) -> logging.Logger:
    """Install handlers on the ``reelcart`` logger according to ``config``."""
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(config.level.upper())

    # Reconfiguring replaces earlier handlers instead of stacking them
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    root.addHandler(stream)

    if config.file_path:
        file_handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    logger.debug("Logging configured at %s", config.level)
    return root
