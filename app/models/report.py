"""
Pydantic models for civic reports.
These models handle validation for status updates and describe report documents.
"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Optional
from enum import Enum


class ReportStatus(str, Enum):
    """
    Report lifecycle states.

    New reports always start as PENDING. Admins may move a report to any
    other state; every change is recorded in report_history.
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class ReportSubmission(BaseModel):
    """
    Validated report form fields (multipart POST /reports).
    Attachments are handled separately as uploaded files.
    """
    title: str
    description: str
    category_id: str
    location_lat: float
    location_lng: float


class StatusUpdateRequest(BaseModel):
    """
    Request to change a report's status.

    status is optional at the schema level so that a missing or blank value
    is reported as a 400 by the handler instead of a validation error.
    """
    status: Optional[ReportStatus] = Field(None, description="New status value")
    description: Optional[str] = Field(None, max_length=2000, description="Replacement description")
    remarks: Optional[str] = Field(None, max_length=500, description="Note stored in the report history")

    @field_validator("status", mode="before")
    @classmethod
    def blank_status_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "status": "in-progress",
                "remarks": "Crew dispatched",
            }
        }


class ReportHistoryEntry(BaseModel):
    """Append-only audit record of a status transition."""
    history_id: str
    report_id: str
    previous_status: Optional[str] = None
    new_status: str
    changed_by_user_id: Optional[str] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None
