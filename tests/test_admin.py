from conftest import ADMIN_ID, CATEGORY_ID, CITIZEN_ID, seed_report


def _notifications(db, report_id):
    return [
        doc.to_dict()
        for doc in db.collection("notifications").where("report_id", "==", report_id).stream()
    ]


def _history(db, report_id):
    return [
        doc.to_dict()
        for doc in db.collection("report_history").where("report_id", "==", report_id).stream()
    ]


def test_all_reports_empty_is_not_found(client, admin_headers):
    resp = client.get("/admin/reports", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.json()["message"] == "No reports found."


def test_all_reports_requires_admin(client, citizen_headers):
    resp = client.get("/admin/reports", headers=citizen_headers)

    assert resp.status_code == 403


def test_all_reports_joins_users_and_categories(client, admin_headers, db):
    seed_report(db, "r-1", minutes=0)
    seed_report(db, "r-2", user_id="user-2", minutes=3)
    seed_report(db, "r-3", user_id="ghost", category_id="gone", minutes=6)

    resp = client.get("/admin/reports", headers=admin_headers)

    assert resp.status_code == 200
    reports = resp.json()["data"]
    assert [r["report_id"] for r in reports] == ["r-3", "r-2", "r-1"]
    assert reports[0]["user_id"] == "ghost"
    assert reports[0]["category_id"] == "gone"
    assert reports[1]["user_id"] == {"user_id": "user-2", "username": "ravi", "name": "Ravi Kumar"}
    assert reports[2]["category_id"]["category_id"] == CATEGORY_ID


def test_update_status_records_history_and_notifies_owner(client, admin_headers, db):
    seed_report(db, "r-1")

    resp = client.patch(
        "/admin/reports/r-1/status",
        json={"status": "in-progress", "remarks": "Crew dispatched"},
        headers=admin_headers,
    )

    assert resp.status_code == 200
    assert resp.json()["data"]["status"] == "in-progress"
    assert db.collection("reports").document("r-1").get().to_dict()["status"] == "in-progress"

    history = _history(db, "r-1")
    assert len(history) == 1
    assert history[0]["previous_status"] == "pending"
    assert history[0]["new_status"] == "in-progress"
    assert history[0]["changed_by_user_id"] == ADMIN_ID
    assert history[0]["remarks"] == "Crew dispatched"

    notifications = _notifications(db, "r-1")
    assert len(notifications) == 1
    assert notifications[0]["user_id"] == CITIZEN_ID
    assert notifications[0]["message"] == 'Your report #r-1 status changed to "in-progress".'
    assert notifications[0]["status"] == "unread"
    assert notifications[0]["delivery_status"] == "pending"


def test_update_status_replaces_description_when_given(client, admin_headers, db):
    seed_report(db, "r-1", description="Original")

    client.patch("/admin/reports/r-1/status", json={"status": "resolved", "description": "Filled"},
                 headers=admin_headers)
    assert db.collection("reports").document("r-1").get().to_dict()["description"] == "Filled"

    client.patch("/admin/reports/r-1/status", json={"status": "resolved", "description": ""},
                 headers=admin_headers)
    assert db.collection("reports").document("r-1").get().to_dict()["description"] == "Filled"


def test_update_status_requires_status(client, admin_headers, db):
    seed_report(db, "r-1")

    resp = client.patch("/admin/reports/r-1/status", json={"description": "x"}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Status is required."
    assert _history(db, "r-1") == []


def test_update_status_without_body_requires_status(client, admin_headers, db):
    seed_report(db, "r-1")

    resp = client.patch("/admin/reports/r-1/status", headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Status is required."
    assert db.collection("reports").document("r-1").get().to_dict()["status"] == "pending"


def test_update_status_blank_status_requires_status(client, admin_headers, db):
    seed_report(db, "r-1")

    resp = client.patch("/admin/reports/r-1/status", json={"status": ""}, headers=admin_headers)

    assert resp.status_code == 400
    assert resp.json()["message"] == "Status is required."
    assert _notifications(db, "r-1") == []


def test_update_status_rejects_unknown_status_value(client, admin_headers, db):
    seed_report(db, "r-1")

    resp = client.patch("/admin/reports/r-1/status", json={"status": "teleported"}, headers=admin_headers)

    assert resp.status_code == 422


def test_update_status_unknown_report(client, admin_headers, db):
    resp = client.patch("/admin/reports/nope/status", json={"status": "resolved"}, headers=admin_headers)

    assert resp.status_code == 404
    assert list(db.collection("notifications").stream()) == []


def test_update_status_without_owner_skips_notification(client, admin_headers, db):
    seed_report(db, "r-1", user_id="ghost")

    resp = client.patch("/admin/reports/r-1/status", json={"status": "rejected"}, headers=admin_headers)

    assert resp.status_code == 200
    assert _notifications(db, "r-1") == []
    assert len(_history(db, "r-1")) == 1


def test_update_status_regenerates_analytics(client, admin_headers, db):
    seed_report(db, "r-1")
    seed_report(db, "r-2", minutes=1)

    client.patch("/admin/reports/r-1/status", json={"status": "resolved"}, headers=admin_headers)

    summary = db.collection("analytics").document("summary").get().to_dict()
    assert summary["total_reports"] == 2
    assert summary["status_distribution"]["resolved"] == 1
    assert summary["status_distribution"]["pending"] == 1
    assert summary["category_distribution"] == {"Roads": 2}
    assert summary["resolution_rate"] == 0.5


def test_analytics_endpoint_generates_on_demand(client, admin_headers, citizen_headers, db):
    seed_report(db, "r-1")

    resp = client.get("/admin/analytics", headers=admin_headers)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["total_reports"] == 1
    assert data["reports_over_time"] == [{"date": "2024-05-01", "count": 1}]
    assert client.get("/admin/analytics", headers=citizen_headers).status_code == 403


def test_create_category(client, admin_headers, citizen_headers):
    resp = client.post("/admin/categories", json={"name": "Street Lights"}, headers=admin_headers)

    assert resp.status_code == 201
    assert resp.json()["data"]["name"] == "Street Lights"

    duplicate = client.post("/admin/categories", json={"name": "Street Lights"}, headers=admin_headers)
    assert duplicate.status_code == 409

    forbidden = client.post("/admin/categories", json={"name": "Parks"}, headers=citizen_headers)
    assert forbidden.status_code == 403

    names = [c["name"] for c in client.get("/categories").json()["data"]]
    assert names == ["Roads", "Street Lights"]
