from collections.abc import Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from opentelemetry import trace
from opentelemetry.trace import Span, SpanKind, Status, StatusCode, Tracer

from .conf import DEFAULTS
from .path import ProcedurePath

# ---------------------------------------------------------------------------
# Tracer utilities
# ---------------------------------------------------------------------------

_DEFAULT_TRACER_NAME = str(DEFAULTS["TRACER_NAME"])
_SPAN_PREFIX = "procmock.call"

_ALLOWED = (bool, str, bytes, int, float)


def get_tracer(name: str | None = None) -> Tracer:
    """Return an OpenTelemetry tracer for this package."""
    return trace.get_tracer(name or _DEFAULT_TRACER_NAME)


def span_name_for(path: ProcedurePath) -> str:
    """``procmock.call.fs.read`` for ``("fs", "read")``."""
    return f"{_SPAN_PREFIX}.{path.as_str}" if len(path) else _SPAN_PREFIX


def apply_attributes(span: Span, attrs: Mapping[str, Any] | None) -> None:
    if not attrs:
        return
    # OpenTelemetry allows only: bool, str, bytes, int, float, or sequences of those.
    for k, v in attrs.items():
        if v is None:
            continue
        if isinstance(v, _ALLOWED):
            span.set_attribute(k, v)
            continue
        if isinstance(v, Sequence) and not isinstance(v, (str, bytes)):
            cleaned = [x for x in v if isinstance(x, _ALLOWED)]
            if cleaned:
                span.set_attribute(k, cleaned)


def _record_exception(span: Span, err: BaseException) -> None:
    span.record_exception(err)
    span.set_status(Status(StatusCode.ERROR, description=str(err)))
    span.set_attribute("exception.type", type(err).__name__)


# ---------------------------------------------------------------------------
# Context manager for invocation spans
# ---------------------------------------------------------------------------

@asynccontextmanager
async def invocation_span(
    path: ProcedurePath,
    *,
    attributes: Mapping[str, Any] | None = None,
    enabled: bool = True,
) -> AsyncIterator[Span]:
    """Async span around the resolution of one mocked invocation.

    Usage:
        async with invocation_span(path, attributes={"procmock.source": "explicit"}) as span:
            ...

    With ``enabled=False`` a non-recording span is yielded and nothing is emitted.
    """
    if not enabled:
        yield trace.INVALID_SPAN
        return

    tracer = get_tracer()
    with tracer.start_as_current_span(
        span_name_for(path), kind=SpanKind.CLIENT, record_exception=False, set_status_on_exception=False
    ) as span:
        apply_attributes(span, {"procmock.path": list(path.segments), **(attributes or {})})
        try:
            yield span
            span.set_attribute("ok", True)
        except Exception as e:
            span.set_attribute("ok", False)
            _record_exception(span, e)
            raise


__all__ = [
    "get_tracer",
    "span_name_for",
    "apply_attributes",
    "invocation_span",
]
