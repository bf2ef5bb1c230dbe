"""
SQL dialect descriptions.

A dialect knows how a target database quotes identifiers, which DB-API
placeholder style its driver expects and how a row limit is written.
"""

from dataclasses import dataclass
from typing import Any, Literal

from utils.sql_safety import quote_identifier, quote_schema_table

ParamStyle = Literal["named", "pyformat", "qmark"]


@dataclass(frozen=True)
class Dialect:
    """Quoting, placeholder and limit conventions of one database."""

    name: str
    paramstyle: ParamStyle
    limit_style: Literal["limit", "top"] = "limit"

    def quote_identifier(self, identifier: str) -> str:
        """Quote a column name."""
        return quote_identifier(identifier, self.name)

    def quote_table(self, table: str) -> str:
        """Quote a table name, optionally schema qualified."""
        return quote_schema_table(table, self.name)

    def placeholder(self, name: str) -> str:
        """Render the placeholder for a named parameter."""
        if self.paramstyle == "named":
            return f":{name}"
        if self.paramstyle == "pyformat":
            return f"%({name})s"
        return "?"


POSTGRESQL = Dialect("postgresql", paramstyle="pyformat")
MYSQL = Dialect("mysql", paramstyle="pyformat")
SQLITE = Dialect("sqlite", paramstyle="named")
SQLSERVER = Dialect("sqlserver", paramstyle="qmark", limit_style="top")
# pymssql binds %(name)s parameters from a dict, unlike pyodbc
SQLSERVER_PYFORMAT = Dialect("sqlserver", paramstyle="pyformat", limit_style="top")

DIALECTS: dict[str, Dialect] = {
    dialect.name: dialect for dialect in (POSTGRESQL, MYSQL, SQLITE, SQLSERVER)
}

# DB-API driver module prefix -> dialect
_DRIVER_DIALECTS = {
    "psycopg": POSTGRESQL,
    "psycopg2": POSTGRESQL,
    "pyodbc": SQLSERVER,
    "pymssql": SQLSERVER_PYFORMAT,
    "sqlite3": SQLITE,
    "pymysql": MYSQL,
    "MySQLdb": MYSQL,
    "mysql": MYSQL,
}


def get_dialect(name: str) -> Dialect:
    """
    Look up a dialect by name.

    Raises:
        ValueError: If the dialect is unknown
    """
    try:
        return DIALECTS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unsupported dialect: {name!r}. "
            f"Supported dialects: {', '.join(sorted(DIALECTS))}"
        ) from None


def detect_dialect(connection: Any) -> Dialect:
    """
    Detect the dialect from a DB-API connection object.

    Args:
        connection: Database connection (psycopg, pyodbc, sqlite3, ...)

    Returns:
        Matching Dialect

    Raises:
        ValueError: If the driver is not recognized
    """
    module = type(connection).__module__ or ""
    root = module.split(".", 1)[0]
    if root in _DRIVER_DIALECTS:
        return _DRIVER_DIALECTS[root]
    raise ValueError(
        f"Cannot detect SQL dialect for connection type {module}."
        f"{type(connection).__name__}; pass the dialect explicitly"
    )
