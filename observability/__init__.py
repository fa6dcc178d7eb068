"""Observability infrastructure: logging setup and optional tracing.

setup_logging:
    Console + rotating file logging with run_id context.

setup_tracing / trace_operation:
    Optional Logfire spans around pipeline stages.

Enable tracing via configuration:
    ENABLE_LOGFIRE=true
    LOGFIRE_TOKEN=your-token  # Optional
"""

from observability.logging import setup_logging, set_run_context, clear_context
from observability.tracing import setup_tracing, trace_operation, TracingContext

__all__ = [
    "setup_logging",
    "set_run_context",
    "clear_context",
    "setup_tracing",
    "trace_operation",
    "TracingContext",
]
