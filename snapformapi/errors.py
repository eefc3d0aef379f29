from typing import Any


class APIError(Exception):
    """A rejection rendered as ``{"error": ..., **extra}`` with camelCase extras."""

    def __init__(self, status_code: int, error: str, **extra: Any):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.extra = extra
