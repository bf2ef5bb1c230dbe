"""
Minimal SELECT query builder.

Collects the pieces of a single-table SELECT (where predicates, order-by,
limit) together with its named parameters and renders them for a dialect.
Values only ever travel as bound parameters.
"""

from typing import Any

from utils.sql_safety import validate_integer_param

from .dialects import Dialect
from .filters import DefaultFilter, Operator, as_sequence

# Comparison operators rendered as "<column> <sql> <placeholder>"
_COMPARISONS = {
    Operator.EQ: "=",
    Operator.NEQ: "<>",
    Operator.LT: "<",
    Operator.LTE: "<=",
    Operator.GT: ">",
    Operator.GTE: ">=",
    Operator.LIKE: "LIKE",
    Operator.NOT_LIKE: "NOT LIKE",
}


class SelectQuery:
    """A ``SELECT * FROM <table> t`` query under construction."""

    def __init__(self, dialect: Dialect, table: str, alias: str = "t"):
        self.dialect = dialect
        self.table = table
        self.alias = alias
        self.predicates: list[str] = []
        self.parameters: dict[str, Any] = {}
        self.max_results: int | None = None
        self.order_by_clause: str | None = None

    def set_parameter(self, name: str, value: Any) -> str:
        """
        Bind a named parameter.

        Returns:
            The placeholder to reference the parameter with

        Raises:
            ValueError: If the name is already bound
        """
        if name in self.parameters:
            raise ValueError(f"Parameter {name} is already bound")
        self.parameters[name] = value
        return self.dialect.placeholder(name)

    def and_where(self, predicate: str) -> "SelectQuery":
        self.predicates.append(predicate)
        return self

    def set_max_results(self, limit: int) -> "SelectQuery":
        validate_integer_param(limit, "limit")
        self.max_results = limit
        return self

    def order_by(self, clause: str) -> "SelectQuery":
        self.order_by_clause = clause
        return self

    def add_filter(self, query_filter: DefaultFilter, index: int) -> str:
        """
        Bind a filter's values and AND its predicate into the query.

        ``in``/``not_in`` bind one ``param_<index>_<n>`` per element; other
        valued operators bind a single ``param_<index>``.

        Returns:
            The predicate that was added
        """
        column = self.dialect.quote_identifier(query_filter.column_name)
        operator = query_filter.operator

        if operator.takes_list:
            placeholders = [
                self.set_parameter(f"param_{index}_{value_index}", value)
                for value_index, value in enumerate(as_sequence(query_filter.value))
            ]
            if not placeholders:
                # IN () is not valid SQL
                predicate = "1 = 0" if operator is Operator.IN else "1 = 1"
            else:
                keyword = "IN" if operator is Operator.IN else "NOT IN"
                predicate = f"{column} {keyword} ({', '.join(placeholders)})"
        elif operator is Operator.IS_NULL:
            predicate = f"{column} IS NULL"
        elif operator is Operator.IS_NOT_NULL:
            predicate = f"{column} IS NOT NULL"
        else:
            placeholder = self.set_parameter(f"param_{index}", query_filter.value)
            predicate = f"{column} {_COMPARISONS[operator]} {placeholder}"

        self.and_where(predicate)
        return predicate

    def get_sql(self) -> str:
        """Render the query text for the dialect."""
        parts = ["SELECT"]
        if self.max_results is not None and self.dialect.limit_style == "top":
            parts.append(f"TOP {self.max_results}")
        parts.append(f"* FROM {self.dialect.quote_table(self.table)} {self.alias}")

        if self.predicates:
            parts.append(
                "WHERE " + " AND ".join(f"({predicate})" for predicate in self.predicates)
            )
        if self.order_by_clause:
            parts.append(f"ORDER BY {self.order_by_clause}")
        if self.max_results is not None and self.dialect.limit_style == "limit":
            parts.append(f"LIMIT {self.max_results}")

        return " ".join(parts)

    def get_parameters(self) -> dict[str, Any] | tuple[Any, ...]:
        """
        Parameters in the shape the driver expects.

        Positional (qmark) drivers get a tuple in binding order, which is
        also the order the placeholders appear in the rendered query.
        """
        if self.dialect.paramstyle == "qmark":
            return tuple(self.parameters.values())
        return dict(self.parameters)

    def __str__(self) -> str:
        return self.get_sql()
