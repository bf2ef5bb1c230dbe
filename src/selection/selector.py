"""
Data selector: turns a table policy into an executed SELECT.

The selector either runs a policy's raw query verbatim or builds a query from
its filters, limit and order-by. Data dependent filters are resolved against
the values the orchestrator collected from previously dumped tables.
"""

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from utils.logging import ContextLogger
from utils.tracing import add_span_attributes, trace_database_query

from .dialects import Dialect, detect_dialect
from .errors import InvalidQueryBuilderUseError, UnresolvedDependencyError
from .filters import CollectedValues, DataDependentFilter
from .metrics import BOUND_PARAMETERS, DEPENDENCY_ERRORS, QUERY_BUILD_TIME, SELECT_QUERIES
from .query import SelectQuery

if TYPE_CHECKING:
    from configuration.models import TableConfiguration

logger = logging.getLogger(__name__)


class DataSelector:
    """
    Builds and executes the select query of one table at a time.

    The connection is a DB-API 2.0 connection used sequentially; the selector
    never commits, rolls back or closes it.
    """

    def __init__(self, connection: Any, dialect: Dialect | None = None):
        """
        Initialize the selector.

        Args:
            connection: DB-API connection to the source database
            dialect: SQL dialect; detected from the connection when omitted
        """
        self.connection = connection
        self.dialect = dialect or detect_dialect(connection)

    def execute_select_query(
        self,
        table_config: "TableConfiguration | None",
        table: str,
        collected_values: CollectedValues | None = None,
    ) -> Any:
        """
        Execute the select query for a table.

        A raw query on the policy is executed verbatim; filters, limit and
        order-by are then ignored.

        Args:
            table_config: Policy of the table, or None to select everything
            table: Table name, optionally schema qualified
            collected_values: Values collected from previously dumped tables

        Returns:
            The executed DB-API cursor

        Raises:
            UnresolvedDependencyError: If a dependent filter cannot be resolved
        """
        if table_config is not None and table_config.query:
            log = ContextLogger(__name__, table_name=table, mode="raw")
            log.info("Executing predefined query")
            cursor = self._execute(table, table_config.query)
            SELECT_QUERIES.labels(table=table, mode="raw").inc()
            return cursor

        # Built before a cursor is opened: an unresolved dependency opens nothing
        query = self.build_select_query(table_config, table, collected_values or {})
        sql = query.get_sql()

        log = ContextLogger(__name__, table_name=table, mode="built")
        log.debug(f"Executing select query: {sql}", parameter_count=len(query.parameters))

        cursor = self._execute(table, sql, query.get_parameters())
        SELECT_QUERIES.labels(table=table, mode="built").inc()
        return cursor

    def _execute(self, table: str, sql: str, parameters: Any = None) -> Any:
        """Execute on a new cursor; the cursor is closed if execution fails."""
        cursor = self.connection.cursor()
        try:
            with trace_database_query("SELECT", table, self.dialect.name):
                if parameters is None:
                    cursor.execute(sql)
                else:
                    add_span_attributes(parameter_count=len(parameters))
                    cursor.execute(sql, parameters)
        except Exception:
            cursor.close()
            raise
        return cursor

    def build_select_query(
        self,
        table_config: "TableConfiguration | None",
        table: str,
        collected_values: CollectedValues | None = None,
    ) -> SelectQuery:
        """
        Build the select query for a table from its policy.

        Args:
            table_config: Policy of the table, or None for an unfiltered query
            table: Table name, optionally schema qualified
            collected_values: Values collected from previously dumped tables

        Returns:
            The built SelectQuery

        Raises:
            InvalidQueryBuilderUseError: If the policy carries a raw query
            UnresolvedDependencyError: If a dependent filter cannot be resolved
        """
        if table_config is not None and table_config.query:
            raise InvalidQueryBuilderUseError(
                f"Table {table} has a predefined query, "
                "the select query cannot be built"
            )

        with QUERY_BUILD_TIME.labels(table=table).time():
            query = SelectQuery(self.dialect, table)

            if table_config is not None:
                self.add_filters_to_select_query(
                    query, table_config, collected_values or {}
                )
                if table_config.limit is not None:
                    query.set_max_results(table_config.limit)
                if table_config.order_by:
                    query.order_by(table_config.order_by)

        BOUND_PARAMETERS.labels(table=table).observe(len(query.parameters))
        return query

    def add_filters_to_select_query(
        self,
        query: SelectQuery,
        table_config: "TableConfiguration",
        collected_values: CollectedValues,
    ) -> None:
        """
        AND the policy's filters into the query, in configured order.

        The position of a filter in the policy is its parameter index, which
        keeps parameter names unique within the query.
        """
        for index, query_filter in enumerate(table_config.filters):
            if isinstance(query_filter, DataDependentFilter):
                try:
                    query_filter = query_filter.resolve(collected_values, table_config.name)
                except UnresolvedDependencyError as e:
                    DEPENDENCY_ERRORS.labels(
                        table=table_config.name, referenced_table=e.table
                    ).inc()
                    logger.error(str(e), extra={"table_name": table_config.name})
                    raise

            query.add_filter(query_filter, index)


def iter_rows(cursor: Any, batch_size: int = 1000) -> Iterator[dict[str, Any]]:
    """
    Stream the rows of an executed cursor as dictionaries.

    Args:
        cursor: Executed DB-API cursor
        batch_size: Rows fetched per round trip

    Yields:
        One ``{column_name: value}`` dict per row
    """
    columns = [description[0] for description in cursor.description]
    while True:
        batch = cursor.fetchmany(batch_size)
        if not batch:
            break
        for row in batch:
            yield dict(zip(columns, row))
