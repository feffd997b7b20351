"""
Logging Configuration
Routes the editor's module loggers to the console and, optionally, a file.
"""
import logging
import sys
from typing import Optional, Union

from artifacteditor.config import LOG_FILE, LOG_LEVEL

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Libraries that log every HTTP connection or VTK reader call
NOISY_LOGGERS = ("urllib3", "pyvista")


def setup_logging(
    level: Union[int, str, None] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configures the 'artifacteditor' namespace.

    Args:
        level: Level or level name. Defaults to ARTIFACT_LOG_LEVEL.
        log_file: Optional log file. Defaults to ARTIFACT_LOG_FILE.

    Returns:
        The configured package logger.
    """
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    log_file = log_file or LOG_FILE

    logger = logging.getLogger("artifacteditor")
    logger.setLevel(level)

    # setup_logging may run again (tests, re-created window)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logger.debug(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
