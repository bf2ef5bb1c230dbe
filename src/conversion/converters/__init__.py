"""
Built-in converters.

``BUILTIN_CONVERTERS`` maps the identifiers usable in configuration files to
converter constructors.
"""

from .base import Converter
from .basic import ConstantConverter, NullConverter, ReplaceConverter, TemplateConverter
from .chain import ChainConverter
from .pii import HashingConverter, MaskingConverter
from .types import ConditionalConverter, TypeConversionConverter

BUILTIN_CONVERTERS = {
    "null": NullConverter,
    "constant": ConstantConverter,
    "replace": ReplaceConverter,
    "template": TemplateConverter,
    "mask": MaskingConverter,
    "hash": HashingConverter,
    "cast": TypeConversionConverter,
}

__all__ = [
    "BUILTIN_CONVERTERS",
    "ChainConverter",
    "ConditionalConverter",
    "ConstantConverter",
    "Converter",
    "HashingConverter",
    "MaskingConverter",
    "NullConverter",
    "ReplaceConverter",
    "TemplateConverter",
    "TypeConversionConverter",
]
