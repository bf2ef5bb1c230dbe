"""
Simple value converters: blanking, constants, replacement and templates.
"""

import re
from typing import Any

from .base import Converter


class NullConverter(Converter):
    """Replace every value with NULL."""

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        return None


class ConstantConverter(Converter):
    """Replace every value with a fixed value."""

    def __init__(self, value: Any = None):
        self.value = value

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        return self.value


class ReplaceConverter(Converter):
    """
    Replace a substring (or regex match) in string values.

    Non-string values pass through unchanged.
    """

    def __init__(self, search: str, replace: str = "", regex: bool = False):
        if not isinstance(search, str) or not search:
            raise ValueError("search must be a non-empty string")
        self.search = search
        self.replace = replace
        self.pattern = None
        if regex:
            try:
                self.pattern = re.compile(search)
            except re.error as e:
                raise ValueError(f"Invalid regex {search!r}: {e}") from e

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if not isinstance(value, str):
            return value
        if self.pattern is not None:
            return self.pattern.sub(self.replace, value)
        return value.replace(self.search, self.replace)


class TemplateConverter(Converter):
    """
    Render a ``str.format`` template against the original row.

    The current value is available as ``{value}``, other columns by name,
    e.g. ``"user{id}@example.com"``. NULLs stay NULL unless ``keep_null``
    is False.
    """

    def __init__(self, template: str, keep_null: bool = True):
        self.template = template
        self.keep_null = keep_null

    def convert(self, value: Any, context: dict[str, Any]) -> Any:
        if value is None and self.keep_null:
            return None
        fields = {**context.get("row", {}), "value": value}
        return self.template.format_map(fields)
