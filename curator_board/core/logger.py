"""Logger configuration for the curator board.

Engine events are logged as a stable code message (``UNKNOWN_TASK_STATUS``,
``MALFORMED_QUERY_STATE``, ...) with their context in ``extra``, so both
sinks print the extra dict next to the message.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message} | {extra}"


def _console_format(record: dict) -> str:
    if record["extra"]:
        return CONSOLE_FORMAT + " <dim>{extra}</dim>\n{exception}"
    return CONSOLE_FORMAT + "\n{exception}"


def setup_logger(level: str = "INFO", log_file: str | None = None) -> None:
    """Route board events to stderr and, optionally, to a log file.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path of a file that also receives every event
    """
    logger.remove()
    logger.add(sys.stderr, format=_console_format, level=level, colorize=True)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_path, format=FILE_FORMAT, level=level, encoding="utf-8")

    logger.debug("Logger initialized", level=level, log_file=log_file)
