"""
Database operation tracing utilities.

Provides a context manager for tracing queries with semantic attributes.
"""

from opentelemetry import trace

from .context import trace_operation


def trace_database_query(query_type: str, table: str, database: str = "unknown"):
    """
    Context manager for tracing database queries.

    Args:
        query_type: Type of query (SELECT, ...)
        table: Table name
        database: Database system (postgresql, sqlserver, ...)

    Example:
        >>> with trace_database_query("SELECT", "customers", "postgresql"):
        ...     cursor.execute(sql, params)
    """
    return trace_operation(
        f"db.{query_type.lower()}",
        kind=trace.SpanKind.CLIENT,
        **{
            "db.operation": query_type,
            "db.table": table,
            "db.system": database,
            "component": "database",
        }
    )
