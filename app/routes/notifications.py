"""
Notification endpoints - The caller's notifications.
"""

from fastapi import APIRouter, Depends

from app.models.base import ApiResponse
from app.models.user import CurrentUser
from app.services.notification_service import get_notification_service
from app.utils.security import get_current_user

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=ApiResponse)
async def my_notifications(user: CurrentUser = Depends(get_current_user)):
    """
    Notifications for the caller, newest first, with report summaries.
    """
    notifications = get_notification_service().get_user_notifications(user.user_id)
    if not notifications:
        return ApiResponse.of(200, [], "No notifications found for this user.")
    return ApiResponse.of(200, notifications, "Notifications fetched successfully.")


@router.patch("/{notification_id}/read", response_model=ApiResponse)
async def mark_notification_as_read(notification_id: str, user: CurrentUser = Depends(get_current_user)):
    notification = get_notification_service().mark_as_read(notification_id, user.user_id)
    return ApiResponse.of(200, notification, "Notification marked as read.")
