"""Call records kept by :class:`~procmock.client.MockClient`.

One :class:`CallRecord` is appended per ``call`` (and per ``exec`` that
resolves to a path) before the outcome is resolved, so the log reflects the
order in which invocations started.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .path import PathLike, ProcedurePath


@dataclass(frozen=True, slots=True)
class CallRecord:
    """Immutable snapshot of one invocation."""

    path: ProcedurePath
    input: Any
    timestamp: int  # epoch milliseconds

    @property
    def label(self) -> str:
        return self.path.as_str

    def matches(self, path: PathLike) -> bool:
        """Return True if this record was made for exactly *path* (ordered segment equality)."""
        return self.path.key == ProcedurePath.get(path).key


__all__ = ["CallRecord"]
