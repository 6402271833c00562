"""
Caller identity: bearer-token lookup against the users collection.

Tokens are opaque strings stored on the user document (api_token). Issuing
them is outside this service; scripts/seed_db.py creates demo users with
tokens for local development.
"""

import logging
import secrets
from typing import Optional

from fastapi import Depends, Header
from fastapi.concurrency import run_in_threadpool

from app.config.firebase import get_db
from app.core.errors import ApiError
from app.models.user import CurrentUser
from app.utils.firestore_helpers import where_filter

logger = logging.getLogger(__name__)


def generate_api_token() -> str:
    """Random URL-safe token for a new user."""
    return secrets.token_urlsafe(32)


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def find_user_by_token(token: str) -> Optional[CurrentUser]:
    db = get_db()
    query = where_filter(db.collection("users"), "api_token", "==", token).limit(1)
    docs = list(query.stream())
    if not docs:
        return None

    data = docs[0].to_dict()
    return CurrentUser(
        user_id=data["user_id"],
        username=data.get("username", ""),
        name=data.get("name"),
        email=data.get("email"),
        role=data.get("role", "user"),
    )


async def get_current_user(authorization: Optional[str] = Header(None)) -> CurrentUser:
    """FastAPI dependency: resolve the caller or fail with 401."""
    token = _extract_bearer_token(authorization)
    if not token:
        raise ApiError(401, "Authentication required.")

    user = await run_in_threadpool(find_user_by_token, token)
    if user is None:
        logger.warning("Rejected request with unknown API token")
        raise ApiError(401, "Invalid or expired token.")
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """FastAPI dependency: caller must have the admin role."""
    if not user.is_admin:
        raise ApiError(403, "Admin access required.")
    return user
