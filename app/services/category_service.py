"""
Category Service - Manage report categories in Firestore.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.errors import ApiError
from app.models.category import CategoryCreate
from app.utils.firestore_helpers import where_filter, snapshot_to_dict
from typing import Dict, List, Optional
import uuid
import logging

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service for category lookups and admin management.
    """

    def __init__(self):
        self.db = get_db()

    def get_category(self, category_id: str) -> Optional[Dict]:
        """Get a category by id, or None if it does not exist."""
        if not category_id:
            return None
        doc = self.db.collection("categories").document(category_id).get()
        return snapshot_to_dict(doc)

    def list_categories(self) -> List[Dict]:
        """All categories ordered by name."""
        query = self.db.collection("categories").order_by("name")
        return [doc.to_dict() for doc in query.stream()]

    def create_category(self, payload: CategoryCreate) -> Dict:
        """
        Create a category.

        Raises:
            ApiError(409): A category with the same name already exists
        """
        name = payload.name.strip()
        existing = list(where_filter(self.db.collection("categories"), "name", "==", name).limit(1).stream())
        if existing:
            raise ApiError(409, f"Category '{name}' already exists.")

        category_id = str(uuid.uuid4())
        doc_ref = self.db.collection("categories").document(category_id)
        doc_ref.set({
            "category_id": category_id,
            "name": name,
            "description": payload.description or "",
            "created_at": firestore.SERVER_TIMESTAMP,
        })

        logger.info(f"Category created: {category_id} ({name})")
        return snapshot_to_dict(doc_ref.get())


# Global service instance (singleton pattern)
_category_service = None


def get_category_service() -> CategoryService:
    """
    Get or create CategoryService singleton instance.
    """
    global _category_service
    if _category_service is None:
        _category_service = CategoryService()
    return _category_service
