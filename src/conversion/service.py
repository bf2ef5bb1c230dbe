"""
Converter service: column key -> converter dispatch.

The service owns the mapping and the registration rules; which key gets
which converters is decided by a strategy that runs once while the service
is built. After that the mapping is frozen.
"""

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol

from opentelemetry import trace

from utils.tracing import trace_operation

from .converters import ChainConverter, Converter
from .converters.base import CONVERSION_ERRORS, CONVERSION_TIME, CONVERSIONS_APPLIED
from .errors import ConversionError, ConverterConfigurationError, DuplicateConverterKeyError
from .factory import ConverterFactory

if TYPE_CHECKING:
    from configuration.models import ConverterConfiguration, DumpConfiguration

logger = logging.getLogger(__name__)


def column_key(table_name: str, column_name: str) -> str:
    """Key under which a table column's converters are registered."""
    return f"{table_name}.{column_name}"


class ConverterStrategy(Protocol):
    """Decides which keys get which converter configurations."""

    def init_converters(self, service: "ConverterService") -> None:
        ...


class ConverterService:
    """
    Maps keys to exactly one converter each and applies them.

    Keys without a converter pass values through unchanged.
    """

    def __init__(self, factory: ConverterFactory | None = None):
        self.factory = factory or ConverterFactory()
        self._converters: dict[str, Converter] = {}
        self._frozen = False

    @classmethod
    def from_strategy(
        cls,
        strategy: ConverterStrategy,
        factory: ConverterFactory | None = None,
    ) -> "ConverterService":
        """
        Build a service populated by a strategy and freeze it.

        Raises:
            ConverterConfigurationError: If the strategy registers invalid
                or duplicate converters
        """
        service = cls(factory)
        strategy.init_converters(service)
        service.freeze()
        logger.info(
            f"Converter service ready with {len(service)} converter keys",
            extra={"strategy": type(strategy).__name__},
        )
        return service

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def convert(self, key: str, value: Any, context: Mapping[str, Any] | None = None) -> Any:
        """
        Convert a value with the converter registered under ``key``.

        Raises:
            ConversionError: If the converter fails; the value is never
                passed through unconverted
        """
        converter = self._converters.get(key)
        if converter is None:
            return value

        converter_type = converter.get_type()
        try:
            with CONVERSION_TIME.labels(converter_type=converter_type).time():
                result = converter.convert(value, dict(context or {}))
        except Exception as e:
            CONVERSION_ERRORS.labels(
                converter_type=converter_type,
                error_type=type(e).__name__,
            ).inc()
            # Values are not logged, they may hold PII
            logger.error(f"Converter {converter_type} failed for {key}: {type(e).__name__}")
            raise ConversionError(
                f"Converting {key} with {converter_type} failed: {type(e).__name__}",
                key=key,
            ) from e

        CONVERSIONS_APPLIED.labels(converter_type=converter_type).inc()
        return result

    def convert_row(self, table_name: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """
        Convert every column of a row.

        Each converter sees the original, unconverted row in its context.
        """
        with trace_operation(
            "convert_row",
            kind=trace.SpanKind.INTERNAL,
            table=table_name,
            field_count=len(row),
        ):
            original = dict(row)
            # Read-only view shared by all converters of the row
            row_view = MappingProxyType(original)
            return {
                column: self.convert(
                    column_key(table_name, column),
                    value,
                    {"table_name": table_name, "field_name": column, "row": row_view},
                )
                for column, value in original.items()
            }

    def add_converter(self, key: str, converter: Converter) -> None:
        """
        Register a single converter under ``key``.

        Raises:
            DuplicateConverterKeyError: If ``key`` already has a converter
            ConverterConfigurationError: If the service is frozen
        """
        self._check_not_frozen()
        if key in self._converters:
            raise DuplicateConverterKeyError(key)
        self._converters[key] = converter

    def add_converters_from_config(
        self,
        key: str,
        converter_configurations: Iterable["ConverterConfiguration"],
    ) -> None:
        """
        Register the configured converters under ``key`` as one chain.

        A single configuration is wrapped in a chain as well; an empty list
        registers nothing.
        """
        configurations = list(converter_configurations)
        if not configurations:
            return

        # The chain is registered only once every element was created
        self._check_not_frozen()
        if key in self._converters:
            raise DuplicateConverterKeyError(key)
        chain = ChainConverter()
        for config in configurations:
            chain.add_converter(self.create_converter_instance(config))
        self.add_converter(key, chain)

        logger.debug(f"Registered {len(chain)} converters for {key}")

    def create_converter_instance(self, config: "ConverterConfiguration") -> Converter:
        return self.factory.create(config)

    def get_converter(self, key: str) -> Converter | None:
        return self._converters.get(key)

    def keys(self) -> list[str]:
        return list(self._converters)

    def __contains__(self, key: str) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise ConverterConfigurationError(
                "Converter service is frozen; converters can only be added "
                "while it is being built"
            )


class ColumnConverterStrategy:
    """
    Registers the per-column converters of every table in a dump configuration
    under ``<table>.<column>`` keys.
    """

    def __init__(self, dump_config: "DumpConfiguration"):
        self.dump_config = dump_config

    def init_converters(self, service: ConverterService) -> None:
        for table_name, table_config in self.dump_config.tables.items():
            for column, configurations in table_config.converters.items():
                service.add_converters_from_config(
                    column_key(table_name, column), configurations
                )
