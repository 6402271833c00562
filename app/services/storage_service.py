"""
Storage Service - Upload report attachments to object storage.

Uploads go to the Firebase Storage bucket; only the resulting URL is stored
on the report. Upload failures return None so callers can decide how to
surface them. With USE_MOCK_DB=true files are written to MOCK_UPLOAD_DIR.
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

from app.config.firebase import get_bucket
from app.core.settings import settings

logger = logging.getLogger(__name__)


def _object_name(folder: str, filename: Optional[str]) -> str:
    extension = Path(filename or "").suffix.lower()
    return f"{folder}/{uuid.uuid4()}{extension}"


def _save_locally(object_name: str, content: bytes) -> str:
    target = Path(settings.MOCK_UPLOAD_DIR) / object_name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target.resolve().as_uri()


def upload_file(
    content: bytes,
    filename: Optional[str],
    content_type: Optional[str] = None,
    folder: str = "reports",
) -> Optional[str]:
    """
    Upload a file and return its public URL.

    Args:
        content: Raw file bytes
        filename: Original client filename (used for the extension only)
        content_type: MIME type reported by the client
        folder: Object prefix inside the bucket

    Returns:
        URL of the stored object, or None if the upload failed
    """
    if not content:
        logger.warning(f"Refusing to upload empty file: {filename}")
        return None

    object_name = _object_name(folder, filename)

    try:
        if settings.USE_MOCK_DB:
            url = _save_locally(object_name, content)
        else:
            bucket = get_bucket()
            blob = bucket.blob(object_name)
            blob.upload_from_string(content, content_type=content_type or "application/octet-stream")
            blob.make_public()
            url = blob.public_url

        logger.info(f"Uploaded {filename} ({len(content)} bytes) to {object_name}")
        return url

    except Exception as e:
        logger.error(f"Upload failed for {filename}: {str(e)}", exc_info=True)
        return None

