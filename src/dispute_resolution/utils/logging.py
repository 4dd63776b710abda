import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "dispute_resolution"

logger = logging.getLogger(LOGGER_NAME)


def configure_logging(
    level: Union[str, int, None] = None,
    log_dir: Union[str, Path, None] = None,
) -> None:
    """
    Attach a stderr handler to the package logger and, when a log directory
    is configured, append to <log_dir>/app.log and <log_dir>/error.log.
    Safe to call more than once.
    """
    from dispute_resolution.config import settings

    if level is None:
        level = settings.LOG_LEVEL
    if log_dir is None:
        log_dir = settings.LOG_DIR

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    formatter = logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)-7s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_dir:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)

        handlers.append(logging.FileHandler(directory / "app.log", encoding="utf-8"))

        errors = logging.FileHandler(directory / "error.log", encoding="utf-8")
        errors.setLevel(logging.ERROR)
        handlers.append(errors)

    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
