"""
SQL safety utilities for preventing SQL injection.

Provides identifier validation and dialect-aware quoting for safe SQL query
construction. Any identifier is accepted except empty ones and ones holding
NUL characters; the closing quote character is escaped by doubling it.
Values never go through these helpers; they are always bound as parameters.
"""

from typing import Literal

DbType = Literal["postgresql", "sqlserver", "mysql", "sqlite"]

QUOTE_CHARS: dict[str, tuple[str, str]] = {
    "postgresql": ('"', '"'),
    "sqlite": ('"', '"'),
    "mysql": ("`", "`"),
    "sqlserver": ("[", "]"),
}



def validate_identifier(identifier: str) -> None:
    """
    Validate a SQL identifier (table name, column name, etc.).

    Args:
        identifier: The identifier to validate

    Raises:
        ValueError: If the identifier is empty or contains a NUL character
    """
    if not isinstance(identifier, str) or not identifier:
        raise ValueError("SQL identifier cannot be empty")

    # No dialect can quote a NUL byte
    if "\x00" in identifier:
        raise ValueError(
            f"Invalid SQL identifier: {identifier!r}. "
            "NUL characters are not allowed."
        )


def validate_schema_table(schema_table: str) -> None:
    """
    Validate a schema.table identifier.

    The first dot separates the schema from the table name.

    Args:
        schema_table: The schema.table identifier to validate

    Raises:
        ValueError: If the schema or table part is empty or contains NUL
    """
    if not isinstance(schema_table, str) or not schema_table:
        raise ValueError("Schema.table identifier cannot be empty")

    for part in schema_table.split(".", 1):
        validate_identifier(part)


def _quote_chars(db_type: str) -> tuple[str, str]:
    try:
        return QUOTE_CHARS[db_type]
    except KeyError:
        raise ValueError(
            f"Unsupported database type: {db_type!r}. "
            f"Supported types: {', '.join(sorted(QUOTE_CHARS))}"
        ) from None


def quote_identifier(identifier: str, db_type: DbType) -> str:
    """
    Safely quote a SQL identifier after validation.

    The closing quote character is doubled inside the identifier, e.g.
    ``order]s`` becomes ``[order]]s]`` on SQL Server.

    Args:
        identifier: The identifier to quote (table name, column name, etc.)
        db_type: Database type for proper quoting style

    Returns:
        Quoted identifier safe for use in SQL

    Raises:
        ValueError: If the identifier is invalid or the database type unknown
    """
    validate_identifier(identifier)
    opening, closing = _quote_chars(db_type)
    escaped = identifier.replace(closing, closing * 2)
    return f"{opening}{escaped}{closing}"


def quote_schema_table(schema_table: str, db_type: DbType) -> str:
    """
    Safely quote a schema.table identifier after validation.

    Args:
        schema_table: The schema.table identifier (e.g., "public.users" or just "users")
        db_type: Database type for proper quoting style

    Returns:
        Quoted identifier safe for use in SQL

    Raises:
        ValueError: If the identifier is invalid
    """
    validate_schema_table(schema_table)

    if "." in schema_table:
        schema, table = schema_table.split(".", 1)
        return f"{quote_identifier(schema, db_type)}.{quote_identifier(table, db_type)}"
    return quote_identifier(schema_table, db_type)


def validate_integer_param(value: int, param_name: str, min_value: int = 0) -> None:
    """
    Validate an integer parameter for SQL queries.

    Args:
        value: The value to validate
        param_name: Name of the parameter (for error messages)
        min_value: Minimum allowed value (default 0)

    Raises:
        ValueError: If the value is not a valid integer or below minimum
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise ValueError(
            f"Invalid {param_name}: {value!r}. Must be an integer."
        )

    if value < min_value:
        raise ValueError(
            f"Invalid {param_name}: {value}. Must be >= {min_value}."
        )
