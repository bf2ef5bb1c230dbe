"""
Type conversion and conditional converters.
"""

from collections.abc import Callable, Sequence
from typing import Any

from .base import Converter

_FALSE_STRINGS = frozenset({"", "0", "false", "f", "no", "n", "off"})


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


TARGET_TYPES: dict[str, Callable[[Any], Any]] = {
    "str": str,
    "int": int,
    "float": float,
    "bool": _to_bool,
}


class TypeConversionConverter(Converter):
    """
    Convert values to another Python type.

    NULLs stay NULL. Strings such as "false", "0" or "no" convert to False.
    """

    def __init__(self, target_type: str = "str"):
        """
        Args:
            target_type: One of str, int, float, bool

        Raises:
            ValueError: If the target type is not supported
        """
        if target_type not in TARGET_TYPES:
            raise ValueError(
                f"Unsupported target type: {target_type}. "
                f"Supported types: {', '.join(TARGET_TYPES)}"
            )
        self.target_type = target_type
        self._cast = TARGET_TYPES[target_type]

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if value is None:
            return None
        return self._cast(value)


class ConditionalConverter(Converter):
    """
    Apply a converter only when a predicate over value and context holds.
    """

    def __init__(
        self,
        predicate: Callable[[Any, dict[str, Any]], bool],
        converter: Converter,
        else_converter: Converter | None = None,
    ):
        """
        Args:
            predicate: Function that returns True if ``converter`` should apply
            converter: Converter applied when the predicate holds
            else_converter: Optional converter applied otherwise
        """
        self.predicate = predicate
        self.converter = converter
        self.else_converter = else_converter

    @classmethod
    def on_column(
        cls,
        column: str,
        converter: Converter,
        equals: Any = None,
        values: Sequence[Any] | None = None,
        else_converter: Converter | None = None,
    ) -> "ConditionalConverter":
        """
        Build a converter that fires when a column of the row matches.

        Args:
            column: Row column to inspect
            converter: Converter applied on a match
            equals: Match when the column equals this value
            values: Match when the column is one of these values
            else_converter: Optional converter applied otherwise

        Raises:
            ValueError: If neither or both of ``equals`` and ``values`` are given
        """
        if (equals is None) == (values is None):
            raise ValueError("Exactly one of 'equals' or 'values' must be given")

        candidates = [equals] if values is None else list(values)

        def predicate(value: Any, context: dict[str, Any]) -> bool:
            return context.get("row", {}).get(column) in candidates

        return cls(predicate, converter, else_converter)

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if self.predicate(value, context):
            return self.converter.convert(value, context)
        if self.else_converter is not None:
            return self.else_converter.convert(value, context)
        return value
