"""Optional Logfire tracing for the daily report run.

A run has three traced stages, named by ``pipeline.py``:

    fetch_sources   the five concurrent fetchers; the span carries the
                    repo plus one item count per source
    render_report   Markdown rendering
    write_report    the atomic write under OUTPUT_DIR

With tracing on, the GitHub API and page requests made by the shared
aiohttp session also show up as child spans of ``fetch_sources``. With
tracing off, every stage still logs its duration at DEBUG.

Requirements:
    pip install docdigest[tracing]

Enable via configuration:
    ENABLE_LOGFIRE=true
    LOGFIRE_TOKEN=your-token  # Optional for cloud dashboard
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Generator

logger = logging.getLogger(__name__)

SERVICE_NAME = "docdigest"


@dataclass
class TracingContext:
    """Tracing state for the current process."""
    enabled: bool = False
    service_name: str = SERVICE_NAME
    token: str = ""
    _logfire_configured: bool = field(default=False, init=False)


_context = TracingContext()


def setup_tracing(
    enabled: bool = False,
    service_name: str = SERVICE_NAME,
    token: str = "",
) -> TracingContext:
    """Configure Logfire and instrument outgoing aiohttp requests.

    Called once from ``main`` when ENABLE_LOGFIRE is set. A missing
    ``logfire`` install or a failed configure leaves tracing off; the
    report run itself is unaffected.

    Args:
        enabled: Whether to enable tracing
        service_name: Service name shown in Logfire
        token: Logfire write token (empty uses local credentials)

    Returns:
        The process-wide TracingContext
    """
    _context.enabled = enabled
    _context.service_name = service_name
    _context.token = token

    if not enabled:
        logger.debug("Tracing disabled")
        return _context

    try:
        import logfire

        logfire.configure(
            service_name=service_name,
            token=token if token else None,
        )
        # GitHub API and docs page requests become child spans
        logfire.instrument_aiohttp_client()

        _context._logfire_configured = True
        logger.info("Logfire tracing enabled | service=%s", service_name)

    except ImportError:
        logger.warning("Logfire not installed (pip install docdigest[tracing]). Tracing disabled.")
        _context.enabled = False
    except Exception as e:
        logger.error("Failed to configure Logfire: %s", e)
        _context.enabled = False

    return _context


@contextmanager
def trace_operation(
    stage: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[dict[str, Any], None, None]:
    """Wrap one pipeline stage in a span.

    Values the caller puts into the yielded dict are attached to the span
    when the stage finishes. ``assemble_report`` uses this to record how
    many items each source returned.

    Args:
        stage: Stage name (fetch_sources, render_report, write_report)
        attributes: Attributes known before the stage starts

    Yields:
        Dict of result attributes filled in by the caller
    """
    span_attrs = attributes or {}
    start_time = datetime.now()
    result_attrs: dict[str, Any] = {}

    try:
        if _context.enabled and _context._logfire_configured:
            import logfire

            with logfire.span(stage, **span_attrs) as span:
                yield result_attrs
                for key, value in result_attrs.items():
                    span.set_attribute(key, value)
        else:
            yield result_attrs

    finally:
        duration = (datetime.now() - start_time).total_seconds()
        if result_attrs:
            logger.debug("Stage %s done in %.2fs | %s", stage, duration, result_attrs)
        else:
            logger.debug("Stage %s done in %.2fs", stage, duration)
