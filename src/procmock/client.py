# procmock/client.py

"""
In-memory stand-in for a procedure client.

:class:`MockClient` exposes the invocation surface of the real client
(``call(path, input)`` and ``exec(ref_or_path, input)``, both awaitable) and
adds configuration and introspection helpers for tests:

- ``mock_response`` / ``mock_implementation`` register behavior per path,
- ``get_calls`` / ``get_calls_for`` / ``clear_calls`` inspect the call log,
- ``reset`` returns the client to its freshly constructed state.

``call`` and ``exec`` are :class:`unittest.mock.Mock` spies, so the usual
``assert_called_with`` / ``call_args_list`` helpers work alongside the
domain-level call log.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from dataclasses import dataclass
from typing import Any, Union, cast
from unittest.mock import Mock

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .conf import DEFAULTS
from .exceptions import MalformedReferenceError
from .path import PathKey, PathLike, ProcedurePath
from .records import CallRecord
from .references import PathTarget, RefTarget, classify_reference
from .responses import MockResponse
from .tracing import invocation_span

logger = logging.getLogger(__name__)

RECORD_CALLS_DEFAULT = cast(bool, DEFAULTS["RECORD_CALLS"])
TRACING_DEFAULT = cast(bool, DEFAULTS["TRACING_ENABLED"])

Implementation = Callable[[Any], Union[Any, Awaitable[Any]]]
Sleep = Callable[[float], Awaitable[Any]]
Clock = Callable[[], int]

__all__ = [
    "MockClient",
    "MockClientOptions",
    "ImplementationBehavior",
    "ResponseBehavior",
    "Behavior",
    "resolve_behavior",
    "create_mock_client",
]


def _epoch_ms() -> int:
    return time.time_ns() // 1_000_000


class MockClientOptions(BaseModel):
    """
    Construction-time configuration for :class:`MockClient`.

    Fields:
        default_response:  Used for any path with neither an implementation nor a response.
                           Survives ``reset()``.
        record_calls:      Append a :class:`CallRecord` per invocation.
        tracing:           Wrap each invocation in an OpenTelemetry span.
    """

    default_response: MockResponse = Field(default_factory=MockResponse)
    record_calls: bool = RECORD_CALLS_DEFAULT
    tracing: bool = TRACING_DEFAULT

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("default_response", mode="before")
    @classmethod
    def _coerce_default_response(cls, value: Any) -> Any:
        if value is None or isinstance(value, Mapping):
            return MockResponse.coerce(value)
        return value


# ---------------------------------------------------------------------------
# Behavior resolution
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ImplementationBehavior:
    impl: Implementation
    source: str = "implementation"


@dataclass(frozen=True, slots=True)
class ResponseBehavior:
    response: MockResponse
    source: str  # "explicit" | "default"


Behavior = Union[ImplementationBehavior, ResponseBehavior]


def resolve_behavior(
    key: PathKey,
    *,
    implementations: Mapping[PathKey, Implementation],
    responses: Mapping[PathKey, MockResponse],
    default_response: MockResponse,
) -> Behavior:
    """Pick the behavior for *key*.

    Precedence: implementation > explicit response > default response. The
    default itself is the empty response unless one was configured.
    """
    impl = implementations.get(key)
    if impl is not None:
        return ImplementationBehavior(impl)

    response = responses.get(key)
    if response is not None:
        return ResponseBehavior(response, source="explicit")

    return ResponseBehavior(default_response, source="default")


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class MockClient:
    """Configurable procedure client double that records every invocation."""

    def __init__(
        self,
        options: MockClientOptions | Mapping[str, Any] | None = None,
        *,
        sleep: Sleep | None = None,
        clock: Clock | None = None,
    ) -> None:
        if options is None:
            options = MockClientOptions()
        elif not isinstance(options, MockClientOptions):
            options = MockClientOptions.model_validate(dict(options))
        self.options = options

        self._sleep: Sleep = sleep or asyncio.sleep
        self._clock: Clock = clock or _epoch_ms
        self._last_timestamp = 0

        self._calls: list[CallRecord] = []
        self._responses: dict[PathKey, MockResponse] = {}
        self._implementations: dict[PathKey, Implementation] = {}

        self.call = Mock(name="MockClient.call", side_effect=self._call)
        self.exec = Mock(name="MockClient.exec", side_effect=self._exec)

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"MockClient(calls={len(self._calls)}, responses={len(self._responses)}, "
            f"implementations={len(self._implementations)})"
        )

    # --- aliases ---

    @property
    def invoke_by_path(self) -> Mock:
        return self.call

    @property
    def invoke_by_reference(self) -> Mock:
        return self.exec

    @property
    def default_response(self) -> MockResponse:
        return self.options.default_response

    # --- registration ---

    def mock_response(self, path: PathLike, response: MockResponse | Mapping[str, Any]) -> None:
        """Register (or replace) the canned response for *path*."""
        target = ProcedurePath.get(path)
        self._responses[target.key] = MockResponse.coerce(response)
        logger.debug("registered response for %s", target.as_str)

    def mock_implementation(self, path: PathLike, impl: Implementation) -> None:
        """Bind *impl* to *path*. It shadows, but does not remove, any response for *path*."""
        if not callable(impl):
            raise TypeError(f"implementation must be callable (got {type(impl).__name__})")
        target = ProcedurePath.get(path)
        self._implementations[target.key] = impl
        logger.debug("registered implementation for %s", target.as_str)

    # --- invocation ---

    def _call(self, path: PathLike, input: Any = None) -> Coroutine[Any, Any, Any]:
        return self._dispatch(ProcedurePath.get(path), input)

    def _exec(self, ref_or_path: Any, input: Any = None) -> Coroutine[Any, Any, Any]:
        target = classify_reference(ref_or_path)

        if isinstance(target, PathTarget):
            return self._dispatch(target.path, input)

        if isinstance(target, RefTarget):
            return self._dispatch(target.path, target.effective_input(input))

        logger.debug("rejecting procedure reference %r: %s", target.value, target.reason)
        raise MalformedReferenceError(target.value, target.reason)

    def _dispatch(self, path: ProcedurePath, input: Any) -> Coroutine[Any, Any, Any]:
        """Record and resolve at the call site; return the coroutine producing the outcome."""
        if self.options.record_calls:
            self._record(path, input)

        behavior = resolve_behavior(
            path.key,
            implementations=self._implementations,
            responses=self._responses,
            default_response=self.options.default_response,
        )
        logger.debug("🌀 %s resolved via %s", path.as_str, behavior.source)
        return self._execute(path, input, behavior)

    def _record(self, path: ProcedurePath, input: Any) -> None:
        # Clamp so the log stays non-decreasing if the clock steps backwards.
        timestamp = max(int(self._clock()), self._last_timestamp)
        self._last_timestamp = timestamp
        self._calls.append(CallRecord(path=path, input=input, timestamp=timestamp))

    async def _execute(self, path: ProcedurePath, input: Any, behavior: Behavior) -> Any:
        attributes: dict[str, Any] = {"procmock.source": behavior.source}
        if isinstance(behavior, ResponseBehavior):
            attributes["procmock.delay_ms"] = behavior.response.delay_ms

        async with invocation_span(path, attributes=attributes, enabled=self.options.tracing):
            if isinstance(behavior, ImplementationBehavior):
                result = behavior.impl(input)
                if inspect.isawaitable(result):
                    result = await result
                return result

            response = behavior.response
            if response.has_delay:
                await self._sleep(response.delay_s)
            if response.error is not None:
                # Same object on every call; drop frames left by earlier raises.
                raise response.error.with_traceback(None)
            return response.output

    # --- introspection ---

    def get_calls(self) -> list[CallRecord]:
        """Snapshot of the call log in invocation order."""
        return list(self._calls)

    def get_calls_for(self, path: PathLike) -> list[CallRecord]:
        """Records whose path equals *path* segment-for-segment, in invocation order."""
        target = ProcedurePath.get(path)
        return [record for record in self._calls if record.matches(target)]

    def clear_calls(self) -> None:
        """Empty the call log; registrations are kept."""
        self._calls.clear()

    def reset(self) -> None:
        """Clear the call log, all registrations and the spy histories.

        The default response is construction-time configuration and is kept.
        """
        self._calls.clear()
        self._responses.clear()
        self._implementations.clear()
        self.call.reset_mock()
        self.exec.reset_mock()
        logger.debug("mock client reset")


def create_mock_client(
    *,
    default_response: MockResponse | Mapping[str, Any] | None = None,
    record_calls: bool | None = None,
    tracing: bool | None = None,
    sleep: Sleep | None = None,
    clock: Clock | None = None,
) -> MockClient:
    """Create a :class:`MockClient`; unset options fall back to package defaults."""
    options: dict[str, Any] = {"default_response": default_response}
    if record_calls is not None:
        options["record_calls"] = record_calls
    if tracing is not None:
        options["tracing"] = tracing
    return MockClient(MockClientOptions(**options), sleep=sleep, clock=clock)
