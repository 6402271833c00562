"""
API error type shared by services and routes.

Services raise ApiError for expected failures (validation, missing
resources, upstream upload failures). The handlers registered in
app.main turn it into the uniform JSON error envelope.
"""

from typing import Any, Optional


class ApiError(Exception):
    """An error with an HTTP status code and a client-facing message."""

    def __init__(self, status_code: int, message: str, errors: Optional[Any] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status_code}, message={self.message!r})"


def error_body(status_code: int, message: str, errors: Optional[Any] = None) -> dict:
    """Build the JSON error envelope."""
    body = {
        "success": False,
        "status_code": status_code,
        "message": message,
        "data": None,
    }
    if errors is not None:
        body["errors"] = errors
    return body
