"""
Filter definitions for table policies.

A filter is a single predicate of a table's WHERE clause. ``DefaultFilter``
carries a literal value; ``DataDependentFilter`` defers its value to the
values collected from another, already extracted table and is resolved into
a plain ``in`` filter right before the query is built.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .errors import UnresolvedDependencyError

logger = logging.getLogger(__name__)

# table name -> column name -> values seen in that table's extracted rows
CollectedValues = Mapping[str, Mapping[str, Sequence[Any]]]


class Operator(str, Enum):
    """Comparison operators supported in filters."""

    EQ = "eq"
    NEQ = "neq"
    LT = "lt"
    LTE = "lte"
    GT = "gt"
    GTE = "gte"
    LIKE = "like"
    NOT_LIKE = "not_like"
    IN = "in"
    NOT_IN = "not_in"
    IS_NULL = "is_null"
    IS_NOT_NULL = "is_not_null"

    @classmethod
    def parse(cls, name: "str | Operator") -> "Operator":
        """
        Look up an operator by name.

        Accepts the snake_case values as well as their camelCase spellings
        (``notIn``, ``isNull``, ...).

        Raises:
            ValueError: If the name is not a known operator
        """
        if isinstance(name, cls):
            return name
        name = str(name)
        if name.lower() in cls._value2member_map_:
            return cls(name.lower())
        normalized = "".join(
            f"_{char.lower()}" if char.isupper() else char for char in name
        ).lstrip("_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown filter operator: {name!r}. "
                f"Supported operators: {', '.join(op.value for op in cls)}"
            ) from None

    @property
    def takes_list(self) -> bool:
        return self in (Operator.IN, Operator.NOT_IN)

    @property
    def takes_value(self) -> bool:
        return self not in (Operator.IS_NULL, Operator.IS_NOT_NULL)


def as_sequence(value: Any) -> list[Any]:
    """
    Normalize a filter value to a list of values.

    Strings and bytes are treated as a single value; None becomes an empty
    list.
    """
    if value is None:
        return []
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        return [value]
    return list(value)


@dataclass(frozen=True)
class DefaultFilter:
    """A predicate with a literal value."""

    column_name: str
    operator: Operator
    value: Any = None

    def __post_init__(self):
        object.__setattr__(self, "operator", Operator.parse(self.operator))
        if self.operator.takes_list:
            # Freeze list values so the filter stays hashable and immutable
            object.__setattr__(self, "value", tuple(as_sequence(self.value)))


@dataclass(frozen=True)
class DataDependentFilter(DefaultFilter):
    """
    A predicate whose values come from another table's collected column.

    Whatever operator was declared, the resolved filter is an ``in`` filter
    over every collected value of ``referenced_table.referenced_column``.
    """

    operator: Operator = Operator.IN
    referenced_table: str = field(default="", kw_only=True)
    referenced_column: str = field(default="", kw_only=True)

    def __post_init__(self):
        super().__post_init__()
        if not self.referenced_table or not self.referenced_column:
            raise ValueError(
                f"Data dependent filter on {self.column_name!r} needs both "
                "a referenced table and a referenced column"
            )

    def resolve(self, collected_values: CollectedValues, table_name: str) -> DefaultFilter:
        """
        Resolve the deferred value into a concrete ``in`` filter.

        Args:
            collected_values: Values harvested from previously dumped tables
            table_name: Table the filter belongs to (for error messages)

        Returns:
            A new DefaultFilter; this filter is left untouched

        Raises:
            UnresolvedDependencyError: If the referenced table or column has
                not been collected yet
        """
        if self.referenced_table not in collected_values:
            raise UnresolvedDependencyError(
                f"The table {self.referenced_table} has not been dumped "
                f"before {table_name}",
                table=self.referenced_table,
            )

        table_values = collected_values[self.referenced_table]
        if self.referenced_column not in table_values:
            raise UnresolvedDependencyError(
                f"The column {self.referenced_column} on table "
                f"{self.referenced_table} has not been collected, but "
                f"{table_name} depends on it",
                table=self.referenced_table,
                column=self.referenced_column,
            )

        values = table_values[self.referenced_column]
        logger.debug(
            f"Resolved {table_name}.{self.column_name} against "
            f"{self.referenced_table}.{self.referenced_column} "
            f"({len(values)} values)"
        )
        return DefaultFilter(self.column_name, Operator.IN, values)
