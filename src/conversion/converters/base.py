"""
Base converter class and shared metrics.

A converter is a pure value transformation: it receives a column value plus
a context (table name, field name, the original row) and returns the new
value.
"""

from abc import ABC, abstractmethod
from typing import Any

from prometheus_client import Counter, Histogram

CONVERSIONS_APPLIED = Counter(
    "conversions_applied_total",
    "Total values passed through a converter",
    ["converter_type"],
)

CONVERSION_TIME = Histogram(
    "conversion_seconds",
    "Time to convert a single value",
    ["converter_type"],
    buckets=[0.00001, 0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05],
)

CONVERSION_ERRORS = Counter(
    "conversion_errors_total",
    "Converter failures",
    ["converter_type", "error_type"],
)


class Converter(ABC):
    """Base class for value converters."""

    @abstractmethod
    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        """
        Convert a single value.

        Args:
            value: Value to convert
            context: Conversion context (table_name, field_name, row)

        Returns:
            Converted value
        """

    def get_type(self) -> str:
        """Converter type used in metrics and log messages."""
        return self.__class__.__name__
