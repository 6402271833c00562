"""
User models. Users are referenced by reports and notifications, not owned by them.
"""

from pydantic import BaseModel, Field
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """The authenticated caller, resolved from the bearer token."""
    user_id: str = Field(..., description="Application-generated UUID")
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def public_profile(self) -> dict:
        """Fields exposed when the user is embedded in another document."""
        return {
            "user_id": self.user_id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
        }
