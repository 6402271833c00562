"""
Category endpoints - Public category listing.
"""

from fastapi import APIRouter

from app.models.base import ApiResponse
from app.services.category_service import get_category_service

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.get("", response_model=ApiResponse)
async def list_categories():
    """All report categories ordered by name."""
    categories = get_category_service().list_categories()
    return ApiResponse.of(200, categories, "Categories fetched successfully.")
