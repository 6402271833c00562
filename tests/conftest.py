import os
from datetime import datetime, timedelta, timezone

os.environ["USE_MOCK_DB"] = "true"
os.environ["MOCK_DB_PATH"] = "./.nonexistent_mock_db.json"
os.environ["NOTIFICATION_DISPATCH_ENABLED"] = "false"
os.environ.pop("NOTIFICATION_WEBHOOK_URL", None)

import pytest
from fastapi.testclient import TestClient

from app.config.firebase import get_db
from app.main import app

ADMIN_TOKEN = "admin-token"
CITIZEN_TOKEN = "citizen-token"
OTHER_TOKEN = "other-token"

ADMIN_ID = "admin-1"
CITIZEN_ID = "user-1"
OTHER_ID = "user-2"
CATEGORY_ID = "cat-1"

BASE_TIME = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def db():
    database = get_db()
    database.reset()
    yield database
    database.reset()


@pytest.fixture
def users(db):
    people = [
        (ADMIN_ID, "admin", "Municipal Admin", "admin@example.org", "admin", ADMIN_TOKEN),
        (CITIZEN_ID, "asha", "Asha Patil", "asha@example.org", "user", CITIZEN_TOKEN),
        (OTHER_ID, "ravi", "Ravi Kumar", "ravi@example.org", "user", OTHER_TOKEN),
    ]
    for user_id, username, name, email, role, token in people:
        db.collection("users").document(user_id).set({
            "user_id": user_id,
            "username": username,
            "name": name,
            "email": email,
            "role": role,
            "api_token": token,
        })
    return people


@pytest.fixture
def category(db):
    data = {"category_id": CATEGORY_ID, "name": "Roads", "description": "Potholes and broken pavements"}
    db.collection("categories").document(CATEGORY_ID).set(data)
    return data


@pytest.fixture
def client(users, category):
    return TestClient(app)


@pytest.fixture
def citizen_headers():
    return {"Authorization": f"Bearer {CITIZEN_TOKEN}"}


@pytest.fixture
def other_headers():
    return {"Authorization": f"Bearer {OTHER_TOKEN}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def uploads(monkeypatch):
    """Replace object storage with an in-memory recorder."""
    stored = []

    def fake_upload(content, filename, content_type=None, folder="reports"):
        stored.append({"content": content, "filename": filename, "folder": folder})
        return f"https://storage.example.org/{folder}/{filename}"

    monkeypatch.setattr("app.services.report_service.upload_file", fake_upload)
    return stored


def seed_report(db, report_id, user_id=CITIZEN_ID, category_id=CATEGORY_ID, status="pending", minutes=0, **extra):
    data = {
        "report_id": report_id,
        "user_id": user_id,
        "category_id": category_id,
        "title": f"Report {report_id}",
        "description": "Something is broken",
        "photo_url": "https://storage.example.org/photo.jpg",
        "voice_recording_url": None,
        "location_lat": 12.9,
        "location_lng": 77.6,
        "status": status,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
        "updated_at": BASE_TIME + timedelta(minutes=minutes),
    }
    data.update(extra)
    db.collection("reports").document(report_id).set(data)
    return data


def seed_notification(db, notification_id, user_id=CITIZEN_ID, report_id=None, minutes=0, **extra):
    data = {
        "notification_id": notification_id,
        "user_id": user_id,
        "message": f"Notification {notification_id}",
        "type": "status_update",
        "report_id": report_id,
        "status": "unread",
        "delivery_status": "pending",
        "delivery_attempts": 0,
        "delivered_at": None,
        "created_at": BASE_TIME + timedelta(minutes=minutes),
    }
    data.update(extra)
    db.collection("notifications").document(notification_id).set(data)
    return data
