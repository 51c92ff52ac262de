"""
Errors raised while turning an SES notification into a transformed event.

Every error carries a human-readable ``message`` and a machine-readable
``error_code``. The router turns them into 422 responses with the structured
detail payload ``{"detail": message, "error_code": error_code}``.
"""


class SesEventError(Exception):
    """Base class for payloads that cannot be transformed."""

    error_code = "invalid_event"

    def __init__(self, message: str, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class MissingField(SesEventError):
    """A required key is absent from the payload."""

    error_code = "missing_field"

    def __init__(self, path: str):
        super().__init__(f"Missing required field: {path}")
        self.path = path


class InvalidFieldType(SesEventError):
    """A key is present but holds the wrong kind of JSON value."""

    error_code = "invalid_field_type"

    def __init__(self, path: str, expected: str):
        super().__init__(f"Field {path} must be {expected}")
        self.path = path


class MalformedAddress(SesEventError):
    """An email address has no '@' separator."""

    error_code = "malformed_address"

    def __init__(self, address: str):
        super().__init__(f"Malformed email address (no '@'): {address!r}")
        self.address = address


class InvalidTimestamp(SesEventError):
    """mail.timestamp is not a parseable ISO-8601 date/time."""

    error_code = "invalid_timestamp"

    def __init__(self, value):
        super().__init__(f"Invalid mail.timestamp: {value!r}")
        self.value = value


class EmptyRecords(SesEventError):
    """The notification's Records array has no entries."""

    error_code = "empty_records"

    def __init__(self):
        super().__init__("Records array is empty")
