"""
hpgroups exceptions module.

Contains exception classes used across multiple modules to avoid circular dependencies.
"""


class QueryConfigError(Exception):
    """Exception raised when a request is malformed.

    Raised before any pipeline stage runs. ``field`` names the offending
    request field (e.g. ``"start_index"`` or ``"col_params[1].filter"``).
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class QueryCancelledError(Exception):
    """Exception raised when a query is cancelled or exceeds its deadline."""

    def __init__(self, stage: str) -> None:
        super().__init__(f"Query cancelled before stage '{stage}'")
        self.stage = stage


class SessionNotFoundError(Exception):
    """Exception raised when a session is not found."""

    pass
