"""
Decorators for adding tracing to functions.
"""

import functools

from .context import trace_operation


def trace_function(operation_name: str | None = None, **default_attributes):
    """
    Decorator for tracing function calls.

    Args:
        operation_name: Optional custom operation name (defaults to module.function)
        **default_attributes: Default attributes to add to all spans

    Example:
        >>> @trace_function(component="conversion")
        ... def convert_table(rows):
        ...     ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            name = operation_name or f"{func.__module__}.{func.__name__}"
            attributes = {**default_attributes, "function": func.__name__}

            with trace_operation(name, **attributes):
                return func(*args, **kwargs)

        return wrapper
    return decorator
