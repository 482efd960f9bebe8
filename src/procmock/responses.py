# procmock/responses.py

"""
Canned responses for mocked procedures.

A :class:`MockResponse` describes what a mocked procedure does when no
implementation is bound to its path:

- ``delay_ms``: wait this long first (``None`` or ``0`` means no wait),
- ``error``:    then raise this exception verbatim,
- ``output``:   otherwise return this value (``None`` is a valid result).

If both ``error`` and ``output`` are set, ``error`` wins.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ProcedureError

__all__ = [
    "MockResponse",
    "mock_output",
    "mock_error",
    "mock_delayed",
]


class MockResponse(BaseModel):
    """
    Declarative outcome for a mocked procedure.

    Fields:
        output:    Value returned on success. Held by reference, never copied.
        error:     Exception instance raised instead of returning ``output``.
        delay_ms:  Artificial latency in milliseconds, applied before either outcome.

    Notes:
        - Extra keys are forbidden to catch typos early.
        - Instances are frozen; register a new response to change behavior.
    """

    output: Any = None
    error: Optional[BaseException] = None
    delay_ms: Optional[float] = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    @field_validator("error", mode="before")
    @classmethod
    def _check_error(cls, value: Any) -> Any:
        if value is not None and not isinstance(value, BaseException):
            raise ValueError(
                f"error must be an exception instance (got {type(value).__name__}); "
                "use mock_error('message') for plain messages"
            )
        return value

    @property
    def delay_s(self) -> float:
        """Delay converted to seconds for ``asyncio.sleep``-style timers."""
        return (self.delay_ms or 0) / 1000

    @property
    def has_delay(self) -> bool:
        return bool(self.delay_ms)

    @classmethod
    def coerce(cls, value: MockResponse | Mapping[str, Any] | None) -> MockResponse:
        """Return a MockResponse from an instance, a mapping, or ``None`` (empty)."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls.model_validate(dict(value))
        raise TypeError(f"Unsupported response spec: {value!r}")


def mock_output(output: Any) -> MockResponse:
    """Response that returns *output*."""
    return MockResponse(output=output)


def mock_error(error: BaseException | str) -> MockResponse:
    """Response that raises *error*; a plain string becomes a :class:`ProcedureError`."""
    if isinstance(error, str):
        error = ProcedureError(error)
    return MockResponse(error=error)


def mock_delayed(output: Any, delay_ms: float) -> MockResponse:
    """Response that returns *output* after *delay_ms* milliseconds."""
    return MockResponse(output=output, delay_ms=delay_ms)
