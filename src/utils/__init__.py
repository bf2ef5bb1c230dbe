"""
Utility modules shared by the selection and conversion packages

Provides:
- logging: structured logging setup and ContextLogger
- tracing: OpenTelemetry spans for queries and conversions
- sql_safety: identifier validation and dialect quoting
"""

__version__ = "1.0.0"
__all__ = ["logging", "tracing", "sql_safety"]
