"""
Category models.
"""

from pydantic import BaseModel, Field
from typing import Optional


class CategoryCreate(BaseModel):
    """Admin request to add a category."""
    name: str = Field(..., min_length=1, max_length=100, description="Category name")
    description: Optional[str] = Field(None, max_length=500, description="What the category covers")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Roads",
                "description": "Potholes, broken pavements and damaged road signs",
            }
        }
