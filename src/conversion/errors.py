"""
Errors raised while building or applying converters.
"""


class ConverterConfigurationError(ValueError):
    """Base exception for invalid converter setup."""

    pass


class DuplicateConverterKeyError(ConverterConfigurationError):
    """Raised when a second converter is registered directly under a key."""

    def __init__(self, key: str):
        super().__init__(
            f"There is already a converter with key {key}. "
            "Please provide a chain if there are multiple converters."
        )
        self.key = key


class ConverterResolutionError(ConverterConfigurationError):
    """Raised when a configured converter cannot be instantiated."""

    pass


class ConversionError(RuntimeError):
    """Raised when a converter fails on a value."""

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key
