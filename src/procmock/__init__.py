"""
procmock: test double for procedure-calling clients.

Register canned responses or implementations per procedure path, hand a
:class:`MockClient` (or a :class:`MockProcedureContext` wrapping one) to the
code under test, then assert on what was called, with what input, and in
what order.

Import Guidelines:
------------------
- Use `create_mock_client` / `MockClient` for the client double.
- Use `mock_output`, `mock_error`, `mock_delayed` to build responses.
- Use `create_mock_context` when testing procedure handlers.
- Use `procmock.exceptions` for the errors the client raises itself.
"""

from importlib.metadata import PackageNotFoundError, version

from .client import MockClient, MockClientOptions, create_mock_client
from .context import MockProcedureContext, create_mock_context
from .exceptions import MalformedReferenceError, PathValidationError, ProcedureError, ProcMockError
from .path import ProcedurePath
from .records import CallRecord
from .references import ProcedureRef
from .responses import MockResponse, mock_delayed, mock_error, mock_output

try:
    __version__ = version("procmock")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "CallRecord",
    "MalformedReferenceError",
    "MockClient",
    "MockClientOptions",
    "MockProcedureContext",
    "MockResponse",
    "PathValidationError",
    "ProcMockError",
    "ProcedureError",
    "ProcedurePath",
    "ProcedureRef",
    "create_mock_client",
    "create_mock_context",
    "mock_delayed",
    "mock_error",
    "mock_output",
]
