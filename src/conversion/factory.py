"""
Converter factory: explicit registry from identifier to constructor.

Configured identifiers are looked up in the registry, never imported by
name, and unknown identifiers fail when the converters are built.
"""

import logging
from collections.abc import Callable
from typing import Any

from configuration.models import ConverterConfiguration

from .converters import BUILTIN_CONVERTERS, ConditionalConverter, Converter
from .errors import ConverterResolutionError

logger = logging.getLogger(__name__)

ConverterConstructor = Callable[..., Converter]


class ConverterFactory:
    """
    Builds converters from ConverterConfiguration objects.

    Each constructor is called with the configured parameters as keyword
    arguments. The ``conditional`` converter takes nested converter entries
    and is built by the factory itself.
    """

    def __init__(self, include_builtins: bool = True):
        self._constructors: dict[str, ConverterConstructor] = {}
        if include_builtins:
            for name, constructor in BUILTIN_CONVERTERS.items():
                self.register(name, constructor)
            self.register("conditional", self._create_conditional)

    def register(
        self,
        name: str,
        constructor: ConverterConstructor,
        replace: bool = False,
    ) -> None:
        """
        Register a converter constructor under an identifier.

        Raises:
            ConverterResolutionError: If the identifier is taken and
                ``replace`` is False
        """
        if name in self._constructors and not replace:
            raise ConverterResolutionError(f"Converter {name!r} is already registered")
        self._constructors[name] = constructor

    def names(self) -> list[str]:
        return sorted(self._constructors)

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def create(self, config: ConverterConfiguration) -> Converter:
        """
        Instantiate the converter a configuration describes.

        Raises:
            ConverterResolutionError: If the identifier is unknown, the
                parameters are rejected, or the constructor returns
                something that is not a Converter
        """
        constructor = self._constructors.get(config.name)
        if constructor is None:
            raise ConverterResolutionError(
                f"Unknown converter {config.name!r}. "
                f"Available converters: {', '.join(self.names())}"
            )

        try:
            converter = constructor(**config.parameters)
        except Exception as e:
            raise ConverterResolutionError(
                f"Cannot create converter {config.name!r}: {e}"
            ) from e

        if not isinstance(converter, Converter):
            raise ConverterResolutionError(
                f"Constructor for {config.name!r} returned "
                f"{type(converter).__name__}, not a Converter"
            )

        logger.debug(f"Created {converter.get_type()} for {config.name!r}")
        return converter

    def _create_conditional(
        self,
        column: str,
        converter: Any,
        equals: Any = None,
        values: list[Any] | None = None,
        else_converter: Any = None,
    ) -> ConditionalConverter:
        return ConditionalConverter.on_column(
            column,
            self.create(ConverterConfiguration.from_entry(converter)),
            equals=equals,
            values=values,
            else_converter=(
                self.create(ConverterConfiguration.from_entry(else_converter))
                if else_converter is not None
                else None
            ),
        )
