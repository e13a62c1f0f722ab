"""Observability module for structured logging, metrics, and tracing."""

from search_snippets.observability.context import get_trace_context, set_trace_context, trace_context
from search_snippets.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from search_snippets.observability.metrics import (
    HIGHLIGHTS_EMITTED,
    PAGES_PROCESSED,
    RESULT_TRUNCATIONS,
    SNIPPET_BUILD_LATENCY,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from search_snippets.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "HIGHLIGHTS_EMITTED",
    "PAGES_PROCESSED",
    "RESULT_TRUNCATIONS",
    "SNIPPET_BUILD_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]
