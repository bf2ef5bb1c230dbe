"""
Distributed tracing using OpenTelemetry.

Instruments:
- Select query execution
- Row conversion
- Custom application spans

Tracing is a no-op until ``initialize_tracing`` installs a tracer provider.
"""

from .context import add_span_attributes, add_span_event, trace_operation
from .database import trace_database_query
from .decorators import trace_function
from .tracer import get_tracer, initialize_tracing, shutdown_tracing

__all__ = [
    "initialize_tracing",
    "get_tracer",
    "shutdown_tracing",
    "trace_operation",
    "trace_function",
    "add_span_attributes",
    "add_span_event",
    "trace_database_query",
]
