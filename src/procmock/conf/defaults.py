"""Default configuration values for procmock."""

DEFAULTS: dict[str, object] = {
    # Client defaults
    "RECORD_CALLS": True,
    # Context defaults
    "CONTEXT_DEFAULT_PATH": ("test", "procedure"),
    # Tracing
    "TRACING_ENABLED": True,
    "TRACER_NAME": "procmock",
}
