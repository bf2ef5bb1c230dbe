"""
Data selection for table policies.

Provides:
- filters: literal and data dependent filter definitions
- dialects: quoting, placeholder and limit conventions per database
- query: the SELECT query builder
- selector: DataSelector, building and executing a table's query
"""

from .collected import collect_column_values
from .dialects import Dialect, detect_dialect, get_dialect
from .errors import InvalidQueryBuilderUseError, SelectionError, UnresolvedDependencyError
from .filters import CollectedValues, DataDependentFilter, DefaultFilter, Operator
from .query import SelectQuery
from .selector import DataSelector, iter_rows

__all__ = [
    "CollectedValues",
    "DataDependentFilter",
    "DataSelector",
    "DefaultFilter",
    "Dialect",
    "InvalidQueryBuilderUseError",
    "Operator",
    "SelectQuery",
    "SelectionError",
    "UnresolvedDependencyError",
    "collect_column_values",
    "detect_dialect",
    "get_dialect",
    "iter_rows",
]
