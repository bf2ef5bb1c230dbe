"""
Dump configuration: table policies and converter settings.
"""

from .errors import ConfigurationError
from .loader import load_dump_config, parse_dump_config, parse_filter, parse_table_config
from .models import ConverterConfiguration, DumpConfiguration, TableConfiguration

__all__ = [
    "ConfigurationError",
    "ConverterConfiguration",
    "DumpConfiguration",
    "TableConfiguration",
    "load_dump_config",
    "parse_dump_config",
    "parse_filter",
    "parse_table_config",
]
