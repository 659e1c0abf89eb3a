# utils/logging_config.py
import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level '{level}'")
        return resolved
    return level


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger for command-line use.

    Args:
        level: Logging level, as a number or a name such as "DEBUG".
        log_file: Optional path to a file that receives the same records.

    Returns:
        The root logger.
    """
    root = logging.getLogger()
    root.setLevel(_coerce_level(level))

    # Re-running setup (tests, repeated CLI calls) must not duplicate output.
    if root.hasHandlers():
        root.handlers.clear()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    return root


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Retrieve a named logger, optionally pinning its level.

    Args:
        name: The name of the logger, normally ``__name__``.
        level: Optional level; when omitted the logger inherits from the root.
    """
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(_coerce_level(level))
    return logger
