"""Canonical scheduling error types.

Every failure raised by the scheduling engine carries a stable code so the
hosting layer can log it and pick a fallback without parsing messages.

Standard error codes:
- INVALID_PROGRAM_WEEK: program week below 1
- INVALID_CALENDAR_WEEK: ISO week number outside 1..53
- INVALID_STATUS_FILTER: status filter outside the closed status set
- INVALID_NAVIGATION_BOUND: negative navigation bound
- MISSING_GROUP_CONTEXT: program mode without a selected group
- MISSING_START_DATE: program mode for a group without a start date
- GROUP_MISMATCH: group metadata does not belong to the selected group
- MALFORMED_WEEK: persisted week value does not match YYYY-Www
- MALFORMED_GROUP_ID: persisted group id is not an integer
"""


class SchedulingError(Exception):
    """Base class for scheduling failures.

    Attributes:
        code: Error code (e.g., "INVALID_PROGRAM_WEEK", "MISSING_GROUP_CONTEXT")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")


class InvalidArgumentError(SchedulingError, ValueError):
    """Raised when a caller passes a value outside an operation's domain."""


class UnresolvableContextError(SchedulingError, RuntimeError):
    """Raised when program-week navigation has no concrete group to anchor on."""


class MalformedPersistedStateError(SchedulingError, ValueError):
    """Raised when persisted navigation state (query string) cannot be parsed."""
