"""
Admin endpoints - Report review and back-office management.

Every route requires a caller with the admin role.

SCOPE OF ADMIN:
- List all reports with submitter and category
- Change report status (recorded in report history, owner notified)
- Manage categories
- Read the analytics summary
"""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from app.models.base import ApiResponse
from app.models.category import CategoryCreate
from app.models.report import StatusUpdateRequest
from app.models.user import CurrentUser
from app.services.analytics_service import get_analytics_service
from app.services.category_service import get_category_service
from app.services.report_service import get_all_reports, update_report_status
from app.utils.security import require_admin

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/reports", response_model=ApiResponse)
async def all_reports(admin: CurrentUser = Depends(require_admin)):
    """
    All reports, newest first, with submitter and category resolved.

    Raises:
        404: There are no reports
    """
    reports = await get_all_reports()
    return ApiResponse.of(200, reports, "All reports fetched successfully.")


@router.patch("/reports/{report_id}/status", response_model=ApiResponse)
async def change_status(
    report_id: str,
    request: Optional[StatusUpdateRequest] = Body(None),
    admin: CurrentUser = Depends(require_admin),
):
    """
    Change a report's status.

    Args:
        report_id: Report UUID
        request: New status, optional replacement description and remarks

    Raises:
        400: status missing or blank (including an empty body)
        404: Report not found
    """
    report = await update_report_status(report_id, request, admin)
    return ApiResponse.of(200, report, "Report status updated successfully and notification sent.")


@router.post("/categories", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def create_category(request: CategoryCreate, admin: CurrentUser = Depends(require_admin)):
    category = get_category_service().create_category(request)
    logger.info(f"Admin {admin.user_id} created category {category['category_id']}")
    return ApiResponse.of(201, category, "Category created successfully.")


@router.get("/analytics", response_model=ApiResponse)
async def analytics_summary(admin: CurrentUser = Depends(require_admin)):
    """
    Latest analytics summary. Generated on demand if it has never been computed.
    """
    service = get_analytics_service()
    summary = service.get_summary()
    if summary is None:
        summary = service.generate()
    return ApiResponse.of(200, summary, "Analytics fetched successfully.")
