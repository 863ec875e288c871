"""Error hierarchy for calendar generation.

Failures are split the same way the loader's tenacity retry decorator sees
them: transient failures (may succeed on retry) vs permanent failures (bad
input data or configuration, retrying will not help).

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientError), stop=stop_after_attempt(3))
    def fetch(name: str) -> str:
        ...

Every error is terminal for the current generation attempt; no document is
produced when one is raised.
"""


class CalendarError(Exception):
    """Base exception for all calendar generation errors."""

    pass


class TransientError(CalendarError):
    """Temporary failure that may succeed on retry.

    Examples: network timeouts, 503 Service Unavailable, dropped connections.
    """

    pass


class PermanentError(CalendarError):
    """Failure that won't succeed on retry.

    Examples: missing resource, unknown rotation day, malformed CSV row.
    """

    pass


class MissingResource(PermanentError):
    """An input resource could not be obtained."""

    def __init__(self, resource: str, reason: str = "not found") -> None:
        self.resource = resource
        self.reason = reason
        super().__init__(f"Could not load {resource!r}: {reason}")


class InvalidResource(PermanentError):
    """An input resource was obtained but could not be parsed."""

    def __init__(self, resource: str, reason: str) -> None:
        self.resource = resource
        self.reason = reason
        super().__init__(f"Invalid content in {resource!r}: {reason}")


class UnknownRotationDay(PermanentError):
    """A calendar row names a rotation day the template does not define."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown rotation day {name!r}")


class InvalidDateFormat(PermanentError):
    """A calendar row carries a date that is not MM/DD/YYYY."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Invalid date {value!r}, expected MM/DD/YYYY")


class MalformedRow(PermanentError):
    """A calendar row cannot be split into the expected fields."""

    def __init__(self, line: int, content: str) -> None:
        self.line = line
        self.content = content
        super().__init__(f"Malformed calendar row at line {line}: {content!r}")


class UnknownGrade(PermanentError):
    """The requested grade is missing from the rotation template or time table."""

    def __init__(self, grade: str, available: list[str]) -> None:
        self.grade = grade
        self.available = available
        super().__init__(f"Unknown grade {grade!r}. Valid: {available}")


class TemplateMismatch(PermanentError):
    """Rotation template and time table disagree for a day.

    Raised when a rotation day's slot list and a weekday's time list differ
    in length, or when a weekday has no time table entry at all.
    """

    pass
