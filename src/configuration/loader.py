"""
Dump configuration loader.

Reads the ``tables`` section of a YAML file (or an already parsed mapping)
into frozen configuration models:

    tables:
      customers:
        limit: 100
        order_by: "id DESC"
        filters:
          - [eq, country, DE]
        converters:
          email:
            - mask: {kind: email}
      orders:
        filters:
          - [depends, customer_id, customers.id]
"""

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from selection.filters import DataDependentFilter, DefaultFilter, Operator

from .errors import ConfigurationError
from .models import ConverterConfiguration, DumpConfiguration, TableConfiguration

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SNAKEDUMP_CONFIG"

TABLE_KEYS = frozenset({"filters", "limit", "order_by", "query", "converters"})
DEPENDS = "depends"


def load_dump_config(path: str | Path | None = None) -> DumpConfiguration:
    """
    Load a dump configuration from a YAML file.

    Args:
        path: Configuration file; defaults to the SNAKEDUMP_CONFIG
            environment variable

    Returns:
        Parsed DumpConfiguration

    Raises:
        ConfigurationError: If no path is known, the file cannot be read or
            its content is invalid
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
        if not path:
            raise ConfigurationError(
                f"No configuration file given and {CONFIG_ENV_VAR} is not set"
            )

    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration: {e}", str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", str(path)) from e

    config = parse_dump_config(data or {})
    logger.info(
        f"Loaded dump configuration from {path}",
        extra={"table_count": len(config.tables)},
    )
    return config


def parse_dump_config(data: Mapping[str, Any]) -> DumpConfiguration:
    """
    Build a DumpConfiguration from a parsed mapping.

    Raises:
        ConfigurationError: If the mapping is invalid
    """
    if not isinstance(data, Mapping):
        raise ConfigurationError("Configuration root must be a mapping")

    tables = data.get("tables") or {}
    if not isinstance(tables, Mapping):
        raise ConfigurationError("'tables' must be a mapping", "tables")

    return DumpConfiguration(
        {
            str(name): parse_table_config(str(name), section or {})
            for name, section in tables.items()
        }
    )


def parse_table_config(name: str, section: Mapping[str, Any]) -> TableConfiguration:
    """
    Build the policy of one table.

    Raises:
        ConfigurationError: On unknown keys, invalid values, or a raw query
            combined with filters, limit or order_by
    """
    path = f"tables.{name}"
    if not isinstance(section, Mapping):
        raise ConfigurationError("table section must be a mapping", path)

    unknown = set(section) - TABLE_KEYS
    if unknown:
        raise ConfigurationError(
            f"unknown keys {', '.join(sorted(map(str, unknown)))}; "
            f"allowed keys: {', '.join(sorted(TABLE_KEYS))}",
            path,
        )

    query = section.get("query")
    if query is not None:
        conflicting = sorted(k for k in ("filters", "limit", "order_by") if section.get(k))
        if conflicting:
            raise ConfigurationError(
                f"'query' cannot be combined with {', '.join(conflicting)}", path
            )
        if not isinstance(query, str) or not query.strip():
            raise ConfigurationError("'query' must be a non-empty string", path)

    filters = [
        parse_filter(entry, f"{path}.filters[{index}]")
        for index, entry in enumerate(section.get("filters") or [])
    ]

    converter_section = section.get("converters") or {}
    if not isinstance(converter_section, Mapping):
        raise ConfigurationError("'converters' must be a mapping of column names", path)

    converters = {}
    for column, entries in converter_section.items():
        if isinstance(entries, (str, Mapping)):
            entries = [entries]
        if not isinstance(entries, list):
            raise ConfigurationError(
                f"converters of {column} must be a list, got {entries!r}", path
            )
        converters[str(column)] = [
            ConverterConfiguration.from_entry(entry) for entry in entries
        ]

    try:
        return TableConfiguration(
            name=name,
            filters=filters,
            limit=section.get("limit"),
            order_by=section.get("order_by"),
            query=query,
            converters=converters,
        )
    except ValueError as e:
        raise ConfigurationError(str(e), path) from e


def parse_filter(entry: Any, path: str = "filter") -> DefaultFilter:
    """
    Build a filter from ``[operator, column, value]``.

    ``[depends, column, "table.column"]`` builds a data dependent filter.
    The mapping form ``{operator: ..., column: ..., value: ...}`` is also
    accepted.

    Raises:
        ConfigurationError: If the entry is malformed
    """
    if isinstance(entry, Mapping):
        entry = [entry.get("operator"), entry.get("column"), entry.get("value")]

    if (
        isinstance(entry, (str, bytes))
        or not isinstance(entry, Sequence)
        or len(entry) not in (2, 3)
    ):
        raise ConfigurationError(
            f"expected [operator, column, value], got {entry!r}", path
        )

    operator, column = entry[0], entry[1]
    value = entry[2] if len(entry) == 3 else None

    if not isinstance(column, str) or not column:
        raise ConfigurationError(f"filter column must be a string, got {column!r}", path)

    if operator == DEPENDS:
        if not isinstance(value, str) or value.count(".") != 1:
            raise ConfigurationError(
                f"dependency must be written as 'table.column', got {value!r}", path
            )
        referenced_table, referenced_column = value.split(".")
        try:
            return DataDependentFilter(
                column,
                referenced_table=referenced_table,
                referenced_column=referenced_column,
            )
        except ValueError as e:
            raise ConfigurationError(str(e), path) from e

    try:
        parsed_operator = Operator.parse(operator)
    except ValueError as e:
        raise ConfigurationError(str(e), path) from e

    if parsed_operator.takes_value and len(entry) != 3:
        raise ConfigurationError(f"operator {parsed_operator.value} needs a value", path)

    return DefaultFilter(column, parsed_operator, value)
