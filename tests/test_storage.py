from pathlib import Path

from app.core.settings import settings
from app.services.storage_service import upload_file


def test_mock_mode_writes_file_locally(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MOCK_UPLOAD_DIR", str(tmp_path))

    url = upload_file(b"image-bytes", "Photo.JPG", "image/jpeg", folder="reports/photos")

    assert url.startswith("file://")
    stored = list((tmp_path / "reports" / "photos").iterdir())
    assert len(stored) == 1
    assert stored[0].suffix == ".jpg"
    assert stored[0].read_bytes() == b"image-bytes"


def test_empty_upload_returns_none(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MOCK_UPLOAD_DIR", str(tmp_path))

    assert upload_file(b"", "empty.jpg") is None
    assert not any(Path(tmp_path).iterdir())


def test_storage_failure_returns_none(monkeypatch):
    monkeypatch.setattr(settings, "USE_MOCK_DB", False)

    def no_bucket():
        raise RuntimeError("FIREBASE_STORAGE_BUCKET is not configured")

    monkeypatch.setattr("app.services.storage_service.get_bucket", no_bucket)

    assert upload_file(b"data", "photo.jpg") is None
