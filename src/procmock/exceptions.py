# procmock/exceptions.py
"""Exception hierarchy for procmock.

Configured errors (``mock_error``) and errors raised by bound implementations
are propagated to callers verbatim; the only failures the client originates
itself are :class:`PathValidationError` and :class:`MalformedReferenceError`.
"""


class ProcMockError(Exception):
    """Base class for all procmock errors."""


class PathValidationError(ProcMockError, ValueError):
    """Raised when a procedure path is malformed (not a sequence, non-string segments)."""


class MalformedReferenceError(ProcMockError, TypeError):
    """Raised by ``MockClient.exec`` when no procedure path can be extracted."""

    def __init__(self, value: object, reason: str | None = None) -> None:
        message = "Invalid procedure reference"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.value = value
        self.reason = reason


class ProcedureError(ProcMockError):
    """Error produced by ``mock_error("message")`` to stand in for a failed procedure."""


__all__ = [
    "ProcMockError",
    "PathValidationError",
    "MalformedReferenceError",
    "ProcedureError",
]
