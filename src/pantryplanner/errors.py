"""Error taxonomy for the planning core.

Every failure raised by a service carries an :class:`ErrorKind`. The HTTP
boundary maps the kind to a status code, so callers branch on ``exc.kind``
rather than on the concrete exception class.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Classification of planner failures."""

    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    ARGUMENT = "argument"
    EXTERNAL_UNAVAILABLE = "external_unavailable"
    INTERNAL = "internal"


HTTP_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.VALIDATION: 422,
    ErrorKind.ARGUMENT: 400,
    ErrorKind.EXTERNAL_UNAVAILABLE: 503,
    ErrorKind.INTERNAL: 500,
}


class PlannerError(Exception):
    """Base exception for all planner failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    @property
    def retryable(self) -> bool:
        """Whether the caller may reasonably retry the same request."""
        return self.kind is ErrorKind.EXTERNAL_UNAVAILABLE

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind.value, "detail": self.message}


class NotFoundError(PlannerError):
    """Referenced user, plan, entry or recipe is missing or not owned by the caller."""

    kind = ErrorKind.NOT_FOUND


class ValidationError(PlannerError):
    """Request is well-formed but references invalid data."""

    kind = ErrorKind.VALIDATION


class ArgumentError(PlannerError):
    """Request arguments are malformed (bad counts, missing request)."""

    kind = ErrorKind.ARGUMENT


class ExternalSourceUnavailableError(PlannerError):
    """An external recipe provider could not be reached or failed."""

    kind = ErrorKind.EXTERNAL_UNAVAILABLE

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message)
        self.source = source


class InternalError(PlannerError):
    """Unexpected failure such as a persistence error."""

    kind = ErrorKind.INTERNAL
