# procmock/path.py
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from .exceptions import PathValidationError

__all__ = [
    "ProcedurePath",
    "PathKey",
    "PathLike",
    "is_path_like",
]


# -----------------------------------------------------------------------------
# Types
# -----------------------------------------------------------------------------

PathKey = tuple[str, ...]

# Union type callers can use for "path-like" inputs
PathLike = Union["ProcedurePath", tuple[str, ...], list[str]]


def is_path_like(value: object) -> bool:
    """Return True if *value* can be read as a procedure path.

    Strings and bytes are sequences too, but a bare ``"fs"`` is never a path;
    treating it as one would split it into characters.
    """
    if isinstance(value, ProcedurePath):
        return True
    if isinstance(value, (str, bytes, bytearray)):
        return False
    if not isinstance(value, Sequence):
        return False
    return all(isinstance(segment, str) for segment in value)


# -----------------------------------------------------------------------------
# ProcedurePath (Value Object)
# -----------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProcedurePath:
    """
    Immutable, ordered sequence of segments naming a procedure, e.g. ``("fs", "read")``.

    Two paths are equal iff their segment tuples are equal. The registry key is
    the segment tuple itself, so segments containing dots (or any other
    separator) cannot produce false collisions.
    """

    segments: PathKey

    def __post_init__(self) -> None:
        if not isinstance(self.segments, tuple):
            raise PathValidationError(
                f"segments must be a tuple (got {type(self.segments).__name__})"
            )
        for idx, segment in enumerate(self.segments):
            if not isinstance(segment, str):
                raise PathValidationError(
                    f"segment {idx} must be a string (got {type(segment).__name__})"
                )

    # ------------------- Canonical forms -------------------
    @property
    def key(self) -> PathKey:
        """Registry key: the raw segment tuple."""
        return self.segments

    @property
    def as_str(self) -> str:
        """Dotted display form. Lossy; used for logs and span names only."""
        return ".".join(self.segments)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    def __str__(self) -> str:  # pragma: no cover
        return self.as_str

    def __repr__(self) -> str:  # pragma: no cover
        return f"ProcedurePath({list(self.segments)!r})"

    # ------------------- Constructors -------------------
    @classmethod
    def of(cls, *segments: str) -> ProcedurePath:
        """Build a path from positional segments: ``ProcedurePath.of("fs", "read")``."""
        return cls(tuple(segments))

    @classmethod
    def get(cls, value: PathLike) -> ProcedurePath:
        """Get a ProcedurePath from any path-like value.

        :param value: A ProcedurePath, or a tuple/list of string segments
        :return: A ProcedurePath instance

        :raises PathValidationError: If the input cannot be read as a path.
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, (str, bytes, bytearray)):
            raise PathValidationError(
                f"Expected a sequence of segments, got a bare string: {value!r}"
            )

        if not isinstance(value, Sequence):
            raise PathValidationError(
                f"Unrecognized path input type: {type(value).__name__}"
            )

        return cls(tuple(value))
