"""
Value conversion for extracted rows.

Supports:
- PII masking (email, phone, SSN, credit card, IP address)
- Salted hashing for pseudonymization
- Blanking, constants, replacements and row templates
- Type conversion and conditional conversion
- Chains of converters per column, configured from the dump configuration
"""

from .converters import (
    BUILTIN_CONVERTERS,
    ChainConverter,
    ConditionalConverter,
    ConstantConverter,
    Converter,
    HashingConverter,
    MaskingConverter,
    NullConverter,
    ReplaceConverter,
    TemplateConverter,
    TypeConversionConverter,
)
from .errors import (
    ConversionError,
    ConverterConfigurationError,
    ConverterResolutionError,
    DuplicateConverterKeyError,
)
from .factory import ConverterFactory
from .service import ColumnConverterStrategy, ConverterService, ConverterStrategy, column_key

__all__ = [
    "BUILTIN_CONVERTERS",
    "ChainConverter",
    "ColumnConverterStrategy",
    "ConditionalConverter",
    "ConstantConverter",
    "ConversionError",
    "Converter",
    "ConverterConfigurationError",
    "ConverterFactory",
    "ConverterResolutionError",
    "ConverterService",
    "ConverterStrategy",
    "DuplicateConverterKeyError",
    "HashingConverter",
    "MaskingConverter",
    "NullConverter",
    "ReplaceConverter",
    "TemplateConverter",
    "TypeConversionConverter",
    "column_key",
]
