"""
Report service - Business logic for civic report handling.
Handles Firestore CRUD operations for reports and their status history.

DESIGN NOTE:
- Firestore has no joins; listings resolve user/category references with
  the batch-fetch-then-merge helpers in app.services.population
- Report creation and its first history entry are two separate writes
- Analytics are recomputed synchronously after every create/status change
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

from fastapi.concurrency import run_in_threadpool
from firebase_admin import firestore

from app.config.firebase import get_db
from app.core.errors import ApiError
from app.models.report import ReportHistoryEntry, ReportStatus, ReportSubmission, StatusUpdateRequest
from app.models.user import CurrentUser
from app.services.analytics_service import generate_analytics
from app.services.category_service import get_category_service
from app.services.notification_service import get_notification_service
from app.services.population import attach, collect_ids, index_by, populate
from app.services.storage_service import upload_file
from app.utils.firestore_helpers import fetch_where_in, get_document, snapshot_to_dict, where_filter

logger = logging.getLogger(__name__)

USER_FIELDS = ["user_id", "username", "name"]
USER_DETAIL_FIELDS = ["user_id", "username", "name", "email"]
CATEGORY_FIELDS = ["category_id", "name", "description"]


@dataclass
class Attachment:
    """An uploaded file held in memory until it is pushed to storage."""
    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


def _project(data: Optional[Dict], fields: List[str]) -> Optional[Dict]:
    if data is None:
        return None
    return {key: data.get(key) for key in fields}


def _append_history(
    db,
    report_id: str,
    previous_status: Optional[str],
    new_status: str,
    changed_by_user_id: Optional[str],
    remarks: Optional[str],
) -> Dict:
    history_id = str(uuid.uuid4())
    entry = {
        "history_id": history_id,
        "report_id": report_id,
        "previous_status": previous_status,
        "new_status": new_status,
        "changed_by_user_id": changed_by_user_id,
        "remarks": remarks or "",
        "created_at": firestore.SERVER_TIMESTAMP,
    }
    db.collection("report_history").document(history_id).set(entry)
    return entry


async def _upload(attachment: Attachment, folder: str) -> Optional[str]:
    return await run_in_threadpool(
        upload_file, attachment.content, attachment.filename, attachment.content_type, folder
    )


async def create_report(
    user: CurrentUser,
    submission: ReportSubmission,
    photo: Optional[Attachment],
    voice_recording: Optional[Attachment] = None,
) -> Dict:
    """
    Create a new civic report.

    Flow:
    1. Verify the category exists
    2. Upload the photo (required) and voice recording (optional)
    3. Store the report with status "pending"
    4. Append the initial history entry
    5. Regenerate analytics

    Raises:
        ApiError(404): Unknown category
        ApiError(400): Missing photo
        ApiError(500): Attachment upload failed
    """
    db = get_db()

    if get_category_service().get_category(submission.category_id) is None:
        raise ApiError(404, "The specified categoryId does not exist.")

    if photo is None or not photo.content:
        raise ApiError(400, "A photo is required for the report.")

    photo_url = await _upload(photo, "reports/photos")
    if not photo_url:
        raise ApiError(500, "Failed to upload photo to cloud service.")

    voice_recording_url = None
    if voice_recording is not None and voice_recording.content:
        voice_recording_url = await _upload(voice_recording, "reports/voice")
        if not voice_recording_url:
            raise ApiError(500, "Failed to upload voice recording to cloud service.")

    report_id = str(uuid.uuid4())
    doc_ref = db.collection("reports").document(report_id)
    doc_ref.set({
        "report_id": report_id,
        "user_id": user.user_id,
        "category_id": submission.category_id,
        "title": submission.title,
        "description": submission.description,
        "photo_url": photo_url,
        "voice_recording_url": voice_recording_url,
        "location_lat": submission.location_lat,
        "location_lng": submission.location_lng,
        "status": ReportStatus.PENDING.value,
        "created_at": firestore.SERVER_TIMESTAMP,
        "updated_at": firestore.SERVER_TIMESTAMP,
    })
    logger.info(f"Report saved to Firestore: {report_id} (user={user.user_id})")

    _append_history(
        db,
        report_id=report_id,
        previous_status=None,
        new_status=ReportStatus.PENDING.value,
        changed_by_user_id=user.user_id,
        remarks="Report submitted by user.",
    )

    generate_analytics()

    return snapshot_to_dict(doc_ref.get())


async def get_my_reports(user: CurrentUser) -> List[Dict]:
    """
    Reports owned by the caller, newest first, with categories resolved.

    The owner is always the caller, so user_id is replaced by the caller's
    profile without a lookup.
    """
    db = get_db()

    query = where_filter(db.collection("reports"), "user_id", "==", user.user_id)
    query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
    reports = [doc.to_dict() for doc in query.stream()]

    if not reports:
        return []

    categories = fetch_where_in(
        db.collection("categories"), "category_id", collect_ids(reports, "category_id"), CATEGORY_FIELDS
    )
    populated = populate(reports, {"category_id": index_by(categories, "category_id")})
    return attach(populated, "user_id", user.public_profile())


async def get_all_reports() -> List[Dict]:
    """
    All reports, newest first, with users and categories resolved.

    Users and categories are fetched concurrently.

    Raises:
        ApiError(404): There are no reports at all
    """
    db = get_db()

    query = db.collection("reports").order_by("created_at", direction=firestore.Query.DESCENDING)
    reports = [doc.to_dict() for doc in query.stream()]

    if not reports:
        raise ApiError(404, "No reports found.")

    users, categories = await asyncio.gather(
        run_in_threadpool(
            fetch_where_in, db.collection("users"), "user_id", collect_ids(reports, "user_id"), USER_FIELDS
        ),
        run_in_threadpool(
            fetch_where_in, db.collection("categories"), "category_id",
            collect_ids(reports, "category_id"), CATEGORY_FIELDS
        ),
    )

    return populate(reports, {
        "user_id": index_by(users, "user_id"),
        "category_id": index_by(categories, "category_id"),
    })


async def get_report_by_id(report_id: str) -> Dict:
    """
    A single report with owner and category dereferenced.

    Raises:
        ApiError(404): Report not found
    """
    db = get_db()

    report = get_document(db, "reports", report_id)
    if report is None:
        raise ApiError(404, "Report not found.")

    owner = _project(
        get_document(db, "users", report.get("user_id")),
        USER_DETAIL_FIELDS,
    )
    category = _project(
        get_document(db, "categories", report.get("category_id")),
        CATEGORY_FIELDS,
    )

    if owner is not None:
        report["user_id"] = owner
    if category is not None:
        report["category_id"] = category
    return report


async def update_report_status(
    report_id: str,
    request: Optional[StatusUpdateRequest],
    actor: CurrentUser,
) -> Dict:
    """
    Change a report's status (admin action).

    Side effects after the report write: one history entry, a notification
    for the owner when the owner exists, and an analytics refresh.

    Raises:
        ApiError(400): status missing
        ApiError(404): Report not found
    """
    if request is None or request.status is None:
        raise ApiError(400, "Status is required.")

    db = get_db()
    doc_ref = db.collection("reports").document(report_id)
    report = snapshot_to_dict(doc_ref.get())
    if report is None:
        raise ApiError(404, "Report not found.")

    new_status = request.status.value
    previous_status = report.get("status")

    update_data = {
        "status": new_status,
        "updated_at": firestore.SERVER_TIMESTAMP,
    }
    if request.description:
        update_data["description"] = request.description

    doc_ref.update(update_data)
    logger.info(f"Report {report_id} status changed {previous_status} -> {new_status} by {actor.user_id}")

    _append_history(
        db,
        report_id=report_id,
        previous_status=previous_status,
        new_status=new_status,
        changed_by_user_id=actor.user_id,
        remarks=request.remarks,
    )

    owner = get_document(db, "users", report.get("user_id"))
    if owner is not None:
        get_notification_service().create_notification(
            user_id=owner["user_id"],
            message=f'Your report #{report_id} status changed to "{new_status}".',
            report_id=report_id,
        )
    else:
        logger.warning(f"Owner {report.get('user_id')} of report {report_id} not found, no notification created")

    generate_analytics()

    return snapshot_to_dict(doc_ref.get())


async def get_report_history(report_id: str, user: CurrentUser) -> List[ReportHistoryEntry]:
    """
    Status history of a report, oldest first. Owner or admin only.

    Raises:
        ApiError(404): Report not found
        ApiError(403): Caller is neither the owner nor an admin
    """
    db = get_db()

    report = get_document(db, "reports", report_id)
    if report is None:
        raise ApiError(404, "Report not found.")
    if report.get("user_id") != user.user_id and not user.is_admin:
        raise ApiError(403, "You are not allowed to view this report's history.")

    query = where_filter(db.collection("report_history"), "report_id", "==", report_id)
    query = query.order_by("created_at")
    return [ReportHistoryEntry(**doc.to_dict()) for doc in query.stream()]
