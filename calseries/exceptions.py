"""Exceptions for the calseries library."""


class CalendarError(Exception):
    """Base exception for all calseries errors."""


class CalendarParseError(CalendarError):
    """Exception raised when parsing a serialized event record or model input.

    The 'message' attribute contains a human-readable message about the
    error that occurred. The 'detailed_error' attribute can provide additional
    information about the error, such as the underlying validation errors,
    useful for debugging purposes.
    """

    def __init__(self, message: str, *, detailed_error: str | None = None) -> None:
        """Initialize the CalendarParseError with a message."""
        super().__init__(message)
        self.message = message
        self.detailed_error = detailed_error


class MalformedRule(CalendarParseError):
    """Exception raised when a recurrence rule can't be parsed or encoded.

    A rule is rejected as a whole when its frequency is not recognized or a
    bound value is invalid. Fields are never silently dropped from a rule
    that is otherwise valid.
    """


class StoreError(CalendarError):
    """Exception thrown when reading or writing master events."""


class NotFound(StoreError):
    """Exception thrown when a master event id does not resolve to a record."""


class TransportFailure(StoreError):
    """Exception thrown when the remote event store fails a request.

    Transport failures are never retried automatically since retrying a
    read-modify-write edit may apply an exclusion twice.
    """
