"""
Dump configuration models.

Frozen dataclasses describing what to extract from each table and how its
column values are converted. They are built once per run by the loader and
never change afterwards.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from selection.filters import DataDependentFilter, DefaultFilter
from utils.sql_safety import validate_integer_param

from .errors import ConfigurationError


@dataclass(frozen=True)
class ConverterConfiguration:
    """A converter identifier plus the parameters it is constructed with."""

    name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @classmethod
    def from_entry(cls, entry: Any) -> "ConverterConfiguration":
        """
        Build a configuration from its file representation.

        Accepted shapes: ``"null"``, ``{"mask": {"kind": "email"}}`` or
        ``{"null": None}``.

        Raises:
            ConfigurationError: If the entry has another shape
        """
        if isinstance(entry, cls):
            return entry
        if isinstance(entry, str) and entry:
            return cls(entry)
        if isinstance(entry, Mapping) and len(entry) == 1:
            name, parameters = next(iter(entry.items()))
            if parameters is None:
                parameters = {}
            if isinstance(name, str) and isinstance(parameters, Mapping):
                return cls(name, parameters)
        raise ConfigurationError(
            f"Invalid converter entry {entry!r}: expected a converter name "
            "or a single-key mapping {name: {parameters}}"
        )


@dataclass(frozen=True)
class TableConfiguration:
    """
    Extraction and conversion policy of one table.

    ``query`` is a raw override; when it is set the filters, limit and
    order-by are not used to select rows.
    """

    name: str
    filters: tuple[DefaultFilter, ...] = ()
    limit: int | None = None
    order_by: str | None = None
    query: str | None = None
    converters: Mapping[str, tuple[ConverterConfiguration, ...]] = field(
        default_factory=dict
    )

    def __post_init__(self):
        object.__setattr__(self, "filters", tuple(self.filters))
        object.__setattr__(
            self,
            "converters",
            MappingProxyType(
                {column: tuple(configs) for column, configs in self.converters.items()}
            ),
        )
        if self.limit is not None:
            validate_integer_param(self.limit, "limit")

    @property
    def dependencies(self) -> set[str]:
        """Tables this table's data dependent filters reference."""
        return {
            query_filter.referenced_table
            for query_filter in self.filters
            if isinstance(query_filter, DataDependentFilter)
        }


@dataclass(frozen=True)
class DumpConfiguration:
    """Policies of all configured tables, keyed by table name."""

    tables: Mapping[str, TableConfiguration] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "tables", MappingProxyType(dict(self.tables)))

    def get_table(self, name: str) -> TableConfiguration | None:
        return self.tables.get(name)

    def harvest_columns(self) -> dict[str, set[str]]:
        """
        Columns whose values must be collected while dumping each table.

        Returns:
            referenced table -> columns referenced by other tables'
            data dependent filters
        """
        harvest: dict[str, set[str]] = {}
        for table_config in self.tables.values():
            for query_filter in table_config.filters:
                if isinstance(query_filter, DataDependentFilter):
                    harvest.setdefault(query_filter.referenced_table, set()).add(
                        query_filter.referenced_column
                    )
        return harvest
