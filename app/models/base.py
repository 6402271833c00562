"""
Pydantic base models for API responses.

All successful responses share one envelope so that clients can read
success/status_code/message/data uniformly. Errors use the same keys
(see app.core.errors.error_body).
"""

from pydantic import BaseModel
from typing import Any, Optional


class ApiResponse(BaseModel):
    """
    Base response model for API responses.
    """
    success: bool = True
    status_code: int = 200
    message: Optional[str] = None
    data: Any = None

    @classmethod
    def of(cls, status_code: int, data: Any, message: str) -> "ApiResponse":
        return cls(
            success=status_code < 400,
            status_code=status_code,
            message=message,
            data=data,
        )
