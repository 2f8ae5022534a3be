import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "dfa_animator"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level, either a number or a name such as "DEBUG".
        log_file: Optional path that receives a copy of every record.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level '{level}'.")
        level = resolved

    logger = logging.getLogger(PACKAGE_LOGGER)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S")

    # Open the file first so a bad path leaves the current setup untouched.
    file_handler: Optional[logging.Handler] = None
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)

    logger.setLevel(level)

    # Reconfiguring must not stack handlers.
    if logger.hasHandlers():
        logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_handler is not None:
        logger.addHandler(file_handler)

    logger.debug("Logging initialized.")
    return logger
