"""
Errors raised while loading dump configuration.
"""


class ConfigurationError(ValueError):
    """Raised when a dump configuration file or mapping is invalid."""

    def __init__(self, message: str, path: str | None = None):
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path
