"""Execution context handed to procedure handlers under test."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, cast

from .client import MockClient
from .conf import DEFAULTS
from .path import PathLike, ProcedurePath

CONTEXT_DEFAULT_PATH = cast(tuple[str, ...], DEFAULTS["CONTEXT_DEFAULT_PATH"])


@dataclass
class MockProcedureContext:
    """What a handler receives: its own path, free-form metadata and a client to call back into.

    ``signal`` is an opaque cancellation token (e.g. an ``asyncio.Event``). It is
    stored for the handler to inspect; the client never checks it.
    """

    path: ProcedurePath
    client: MockClient
    metadata: dict[str, Any] = field(default_factory=dict)
    signal: Any | None = None


def create_mock_context(
    *,
    path: PathLike | None = None,
    metadata: dict[str, Any] | None = None,
    client: MockClient | None = None,
    signal: Any | None = None,
) -> MockProcedureContext:
    """Build a :class:`MockProcedureContext`; nothing is recorded or registered."""
    return MockProcedureContext(
        path=ProcedurePath.get(path if path is not None else CONTEXT_DEFAULT_PATH),
        client=client if client is not None else MockClient(),
        metadata=metadata if metadata is not None else {},
        signal=signal,
    )


__all__ = ["MockProcedureContext", "create_mock_context"]
