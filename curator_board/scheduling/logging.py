"""Scheduling failure observability.

Call this before applying a fallback for a caught SchedulingError.
"""

from loguru import logger

from curator_board.scheduling.errors import SchedulingError


def log_scheduling_failure(err: SchedulingError, context: dict[str, str | int | float | bool | None]) -> None:
    """Log a scheduling failure with context.

    Args:
        err: The SchedulingError that occurred
        context: Additional context dictionary for logging
    """
    logger.bind(code=err.code, details=err.details, **context).error(
        f"SCHEDULING_FAILED {err.code}: {'; '.join(err.details)}"
    )
