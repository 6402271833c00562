"""
Report endpoints - API routes for citizen report submission and retrieval.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from app.core.errors import ApiError
from app.models.base import ApiResponse
from app.models.report import ReportSubmission
from app.models.user import CurrentUser
from app.services.report_service import (
    Attachment,
    create_report,
    get_my_reports,
    get_report_by_id,
    get_report_history,
)
from app.utils.security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


async def _read_attachment(upload: Optional[UploadFile]) -> Optional[Attachment]:
    if upload is None:
        return None
    content = await upload.read()
    if not content:
        return None
    return Attachment(content=content, filename=upload.filename, content_type=upload.content_type)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def submit_report(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category_id: Optional[str] = Form(None, alias="categoryId"),
    location_lat: Optional[float] = Form(None, alias="locationLat"),
    location_lng: Optional[float] = Form(None, alias="locationLng"),
    photo: Optional[UploadFile] = File(None),
    voice_recording: Optional[UploadFile] = File(None, alias="voiceRecording"),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Submit a new civic report (multipart form).

    This endpoint:
    1. Validates the required form fields
    2. Uploads the photo (required) and voice recording (optional)
    3. Stores the report and its first history entry

    Returns the created report.
    """
    if not title or not description or not category_id or location_lat is None or location_lng is None:
        raise ApiError(
            400,
            "All required fields (title, description, categoryId, locationLat, locationLng) "
            "are needed for the report.",
        )

    submission = ReportSubmission(
        title=title,
        description=description,
        category_id=category_id,
        location_lat=location_lat,
        location_lng=location_lng,
    )

    logger.info(f"POST /reports - Creating report for user {user.user_id} (category={category_id})")
    report = await create_report(
        user,
        submission,
        photo=await _read_attachment(photo),
        voice_recording=await _read_attachment(voice_recording),
    )
    return ApiResponse.of(201, report, "Report submitted successfully.")


@router.get("/me", response_model=ApiResponse)
async def my_reports(user: CurrentUser = Depends(get_current_user)):
    """Reports submitted by the caller, newest first."""
    reports = await get_my_reports(user)
    if not reports:
        return ApiResponse.of(200, [], "User has not created any reports yet.")
    return ApiResponse.of(200, reports, "User reports fetched successfully.")


@router.get("/{report_id}", response_model=ApiResponse)
async def report_detail(report_id: str, user: CurrentUser = Depends(get_current_user)):
    """
    A single report with its owner and category.

    Open to any authenticated caller, not only the owner: reports are public
    civic records. Only the status history is restricted to owner and admins.
    """
    logger.debug(f"GET /reports/{report_id} by user {user.user_id}")
    report = await get_report_by_id(report_id)
    return ApiResponse.of(200, report, "Report fetched successfully.")


@router.get("/{report_id}/history", response_model=ApiResponse)
async def report_history(report_id: str, user: CurrentUser = Depends(get_current_user)):
    """Status transitions of a report, oldest first."""
    history = await get_report_history(report_id, user)
    return ApiResponse.of(200, history, "Report history fetched successfully.")
