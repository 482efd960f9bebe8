# procmock/references.py
"""Classification of the values accepted by ``MockClient.exec``.

``exec`` accepts three shapes, resolved up front into one variant of
:data:`ReferenceTarget`:

* a path (``["fs", "read"]``, a tuple, or a :class:`ProcedurePath`) -> :class:`PathTarget`
* a reference carrying a path under ``"$proc"`` (or the ``"path"`` fallback)
  and optionally an ``"input"``, either as a mapping or a :class:`ProcedureRef`
  -> :class:`RefTarget`
* anything else -> :class:`InvalidTarget`
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from .path import ProcedurePath, is_path_like

PRIMARY_PATH_FIELD = "$proc"
FALLBACK_PATH_FIELD = "path"
INPUT_FIELD = "input"


@dataclass(frozen=True, slots=True)
class ProcedureRef:
    """Typed procedure reference; equivalent to ``{"$proc": path, "input": input}``."""

    path: Any
    input: Any = None


@dataclass(frozen=True, slots=True)
class PathTarget:
    path: ProcedurePath


@dataclass(frozen=True, slots=True)
class RefTarget:
    path: ProcedurePath
    input: Any = None
    has_input: bool = False

    def effective_input(self, supplied: Any) -> Any:
        """Embedded input wins over the separately supplied one."""
        return self.input if self.has_input else supplied


@dataclass(frozen=True, slots=True)
class InvalidTarget:
    value: Any
    reason: str


ReferenceTarget = Union[PathTarget, RefTarget, InvalidTarget]


def _first_present(*candidates: Any) -> Any:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None


def _ref_fields(value: Any) -> tuple[Any, Any] | None:
    """Return ``(path, input)`` from a reference object, or None if *value* isn't one."""
    if isinstance(value, ProcedureRef):
        return value.path, value.input
    if isinstance(value, Mapping):
        raw_path = _first_present(value.get(PRIMARY_PATH_FIELD), value.get(FALLBACK_PATH_FIELD))
        return raw_path, value.get(INPUT_FIELD)
    return None


def classify_reference(value: Any) -> ReferenceTarget:
    """Resolve an ``exec`` argument into exactly one :data:`ReferenceTarget` variant."""
    if is_path_like(value):
        return PathTarget(ProcedurePath.get(value))

    fields = _ref_fields(value)
    if fields is None:
        return InvalidTarget(value, f"unsupported reference type {type(value).__name__}")

    raw_path, embedded_input = fields
    if raw_path is None:
        return InvalidTarget(
            value, f"no {PRIMARY_PATH_FIELD!r} or {FALLBACK_PATH_FIELD!r} field"
        )
    if not is_path_like(raw_path):
        return InvalidTarget(value, f"path field is not a segment sequence: {raw_path!r}")

    return RefTarget(
        path=ProcedurePath.get(raw_path),
        input=embedded_input,
        has_input=embedded_input is not None,
    )


__all__ = [
    "ProcedureRef",
    "PathTarget",
    "RefTarget",
    "InvalidTarget",
    "ReferenceTarget",
    "classify_reference",
    "PRIMARY_PATH_FIELD",
    "FALLBACK_PATH_FIELD",
    "INPUT_FIELD",
]
