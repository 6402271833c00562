"""
Notification Service - Per-user notifications stored in Firestore.

Notifications are immutable except for the read flag (status) and the
delivery bookkeeping written by send_pending_report_notifications().
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.errors import ApiError
from app.core.settings import settings
from app.models.notification import DeliveryStatus, NotificationStatus, NotificationType
from app.services.notification_dispatcher import NotificationDispatcher
from app.services.population import collect_ids, index_by, populate
from app.utils.firestore_helpers import fetch_where_in, snapshot_to_dict, where_filter
from typing import Dict, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)

REPORT_SUMMARY_FIELDS = ["report_id", "title", "status"]


class NotificationService:
    """
    Service for notification storage, listing and delivery.
    """

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        self.db = get_db()
        self.dispatcher = dispatcher or NotificationDispatcher()

    def create_notification(
        self,
        user_id: str,
        message: str,
        report_id: Optional[str] = None,
        notification_type: NotificationType = NotificationType.STATUS_UPDATE,
    ) -> Dict:
        """Store a new unread notification, queued for delivery."""
        notification_id = str(uuid.uuid4())
        doc_ref = self.db.collection("notifications").document(notification_id)
        doc_ref.set({
            "notification_id": notification_id,
            "user_id": user_id,
            "message": message,
            "type": notification_type.value,
            "report_id": report_id,
            "status": NotificationStatus.UNREAD.value,
            "delivery_status": DeliveryStatus.PENDING.value,
            "delivery_attempts": 0,
            "delivered_at": None,
            "created_at": firestore.SERVER_TIMESTAMP,
        })

        logger.info(f"Notification {notification_id} created for user {user_id}")
        return snapshot_to_dict(doc_ref.get())

    def get_user_notifications(self, user_id: str) -> List[Dict]:
        """
        All notifications of a user, newest first.

        The referenced report is replaced by a {report_id, title, status}
        summary; a report that no longer resolves leaves the raw id.
        """
        query = where_filter(self.db.collection("notifications"), "user_id", "==", user_id)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        notifications = [doc.to_dict() for doc in query.stream()]

        if not notifications:
            return []

        reports = fetch_where_in(
            self.db.collection("reports"),
            "report_id",
            collect_ids(notifications, "report_id"),
            REPORT_SUMMARY_FIELDS,
        )
        return populate(notifications, {"report_id": index_by(reports, "report_id")})

    def mark_as_read(self, notification_id: str, user_id: str) -> Dict:
        """
        Mark one of the caller's notifications as read.

        The lookup matches notification id and owner together, so a
        notification belonging to someone else is indistinguishable from a
        missing one.

        Raises:
            ApiError(404): Not found or not owned by user_id
        """
        query = where_filter(self.db.collection("notifications"), "notification_id", "==", notification_id)
        query = where_filter(query, "user_id", "==", user_id).limit(1)
        docs = list(query.stream())

        if not docs:
            raise ApiError(404, "Notification not found or user not authorized.")

        doc_ref = docs[0].reference
        doc_ref.update({"status": NotificationStatus.READ.value})
        return snapshot_to_dict(doc_ref.get())

    def send_pending_report_notifications(self) -> Dict[str, int]:
        """
        Deliver notifications that have not been sent yet.

        Processes up to NOTIFICATION_DISPATCH_BATCH_SIZE notifications per run.
        Each one is marked sent or failed; failed ones are picked up again
        only if their delivery_status is reset to pending.

        Returns:
            Counts of processed, sent and failed notifications
        """
        query = where_filter(
            self.db.collection("notifications"), "delivery_status", "==", DeliveryStatus.PENDING.value
        ).limit(settings.NOTIFICATION_DISPATCH_BATCH_SIZE)
        pending = list(query.stream())

        sent = 0
        failed = 0
        for doc in pending:
            notification = doc.to_dict()
            attempts = notification.get("delivery_attempts", 0) + 1

            if self.dispatcher.deliver(notification):
                doc.reference.update({
                    "delivery_status": DeliveryStatus.SENT.value,
                    "delivery_attempts": attempts,
                    "delivered_at": firestore.SERVER_TIMESTAMP,
                })
                sent += 1
            else:
                doc.reference.update({
                    "delivery_status": DeliveryStatus.FAILED.value,
                    "delivery_attempts": attempts,
                })
                failed += 1

        if pending:
            logger.info(f"Notification dispatch: {sent} sent, {failed} failed")

        return {"processed": len(pending), "sent": sent, "failed": failed}


# Global service instance (singleton pattern)
_notification_service = None


def get_notification_service() -> NotificationService:
    """
    Get or create NotificationService singleton instance.
    """
    global _notification_service
    if _notification_service is None:
        _notification_service = NotificationService()
    return _notification_service


def send_pending_report_notifications() -> Dict[str, int]:
    """Entry point used by the scheduler."""
    return get_notification_service().send_pending_report_notifications()
