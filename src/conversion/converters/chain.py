"""
Chain converter: ordered composition of converters.
"""

from collections.abc import Iterator
from typing import Any

from .base import Converter


class ChainConverter(Converter):
    """
    Apply converters left to right, each one consuming the previous output.

    An empty chain returns its input unchanged.
    """

    def __init__(self, converters: list[Converter] | None = None):
        self.converters: list[Converter] = list(converters or [])

    def add_converter(self, converter: Converter) -> None:
        self.converters.append(converter)

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        for converter in self.converters:
            value = converter.convert(value, context)
        return value

    def get_type(self) -> str:
        inner = ",".join(converter.get_type() for converter in self.converters)
        return f"ChainConverter[{inner}]"

    def __len__(self) -> int:
        return len(self.converters)

    def __iter__(self) -> Iterator[Converter]:
        return iter(self.converters)
