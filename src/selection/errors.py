"""
Errors raised while turning a table policy into a query.

All of them are configuration or sequencing errors: nothing here is retried.
"""


class SelectionError(ValueError):
    """Base exception for data selection errors."""

    pass


class InvalidQueryBuilderUseError(SelectionError):
    """Raised when a query is built for a policy that carries a raw query."""

    pass


class UnresolvedDependencyError(SelectionError):
    """Raised when a data dependent filter references data not collected yet."""

    def __init__(self, message: str, table: str, column: str | None = None):
        super().__init__(message)
        self.table = table
        self.column = column
