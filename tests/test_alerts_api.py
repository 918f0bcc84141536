import logging
from datetime import datetime, timezone

from proctorhub.core.config import settings

from .conftest import auth


def post_alert(client, headers, exam_id, student_id, alert_type="multiple_faces", details=None):
    return client.post("/api/alerts", json={
        "examId": exam_id,
        "studentId": student_id,
        "type": alert_type,
        "details": details or {"faces": 2},
    }, headers=headers)


def parse_time(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def test_alert_review_scenario(client, proctor, student, exam, detector_headers):
    before = datetime.now(timezone.utc).replace(microsecond=0)
    response = post_alert(client, detector_headers, exam["id"], student.id)
    assert response.status_code == 201
    alert = response.json()["alert"]
    assert alert["status"] == "new"
    assert parse_time(alert["timestamp"]) >= before

    flagged = client.put(f"/api/alerts/{alert['id']}", json={"status": "flagged"}, headers=proctor.headers)
    assert flagged.status_code == 200

    listing = client.get(f"/api/alerts/exam/{exam['id']}", headers=proctor.headers).json()["alerts"]
    assert listing[0]["status"] == "flagged"
    assert listing[0]["student"]["id"] == student.id

    # a reviewed alert can still be re-classified
    reviewed = client.put(f"/api/alerts/{alert['id']}", json={"status": "reviewed"}, headers=proctor.headers)
    assert reviewed.status_code == 200
    assert reviewed.json()["alert"]["status"] == "reviewed"


class TestDetectorCredential:
    def test_missing_detector_token(self, client, student, exam):
        response = post_alert(client, {}, exam["id"], student.id)
        assert response.status_code == 401

    def test_user_token_rejected(self, client, proctor, student, exam):
        response = post_alert(client, proctor.headers, exam["id"], student.id)
        assert response.status_code == 403

    def test_detector_token_as_bearer(self, client, student, exam, detector_headers):
        headers = auth(detector_headers["X-Detector-Token"])
        response = post_alert(client, headers, exam["id"], student.id)
        assert response.status_code == 201

    def test_open_mode(self, client, student, exam, monkeypatch):
        monkeypatch.setattr(settings, "detector_auth_required", False)
        response = post_alert(client, {}, exam["id"], student.id)
        assert response.status_code == 201

    def test_ml_endpoint(self, client, student, exam, detector_headers):
        response = client.post("/api/ml/proctoring", json={
            "examId": exam["id"],
            "studentId": student.id,
            "type": "face_not_visible",
            "details": {"confidence": 0.93},
        }, headers=detector_headers)
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Proctoring alert created"
        assert body["alert"]["status"] == "new"
        assert body["alert"]["details"] == {"confidence": 0.93}

        anonymous = client.post("/api/ml/proctoring", json={
            "examId": exam["id"], "studentId": student.id, "type": "face_not_visible",
        })
        assert anonymous.status_code == 401


class TestCreateAlert:
    def test_client_status_is_ignored(self, client, student, exam, detector_headers):
        response = client.post("/api/alerts", json={
            "examId": exam["id"], "studentId": student.id, "type": "phone_detected", "status": "dismissed",
        }, headers=detector_headers)
        assert response.json()["alert"]["status"] == "new"

    def test_unknown_exam(self, client, student, detector_headers):
        response = post_alert(client, detector_headers, 9999, student.id)
        assert response.status_code == 404

    def test_unknown_student(self, client, exam, detector_headers):
        response = post_alert(client, detector_headers, exam["id"], 9999)
        assert response.status_code == 404

    def test_type_required(self, client, student, exam, detector_headers):
        response = client.post("/api/alerts", json={"examId": exam["id"], "studentId": student.id},
                               headers=detector_headers)
        assert response.status_code == 400


class TestReview:
    def test_repeated_update_is_idempotent(self, client, storage, proctor, student, exam, detector_headers):
        alert = post_alert(client, detector_headers, exam["id"], student.id).json()["alert"]

        first = client.put(f"/api/alerts/{alert['id']}", json={"status": "reviewed"}, headers=proctor.headers)
        second = client.put(f"/api/alerts/{alert['id']}", json={"status": "reviewed"}, headers=proctor.headers)
        assert first.status_code == second.status_code == 200
        assert first.json()["alert"] == second.json()["alert"]
        assert len(storage.list_alerts()) == 1

    def test_cannot_reopen(self, client, proctor, student, exam, detector_headers):
        alert = post_alert(client, detector_headers, exam["id"], student.id).json()["alert"]
        client.put(f"/api/alerts/{alert['id']}", json={"status": "dismissed"}, headers=proctor.headers)

        response = client.put(f"/api/alerts/{alert['id']}", json={"status": "new"}, headers=proctor.headers)
        assert response.status_code == 400

    def test_unknown_alert(self, client, proctor):
        response = client.put("/api/alerts/4242", json={"status": "reviewed"}, headers=proctor.headers)
        assert response.status_code == 404

    def test_foreign_proctor_forbidden(self, client, other_proctor, student, exam, detector_headers):
        alert = post_alert(client, detector_headers, exam["id"], student.id).json()["alert"]

        update = client.put(f"/api/alerts/{alert['id']}", json={"status": "dismissed"},
                            headers=other_proctor.headers)
        listing = client.get(f"/api/alerts/exam/{exam['id']}", headers=other_proctor.headers)
        assert update.status_code == 403
        assert listing.status_code == 403

    def test_students_cannot_review(self, client, student, exam, detector_headers):
        alert = post_alert(client, detector_headers, exam["id"], student.id).json()["alert"]
        response = client.put(f"/api/alerts/{alert['id']}", json={"status": "dismissed"}, headers=student.headers)
        assert response.status_code == 403


class TestListing:
    def test_newest_first_and_status_filter(self, client, proctor, student, exam, detector_headers):
        first = post_alert(client, detector_headers, exam["id"], student.id, "face_not_visible").json()["alert"]
        second = post_alert(client, detector_headers, exam["id"], student.id, "phone_detected").json()["alert"]
        client.put(f"/api/alerts/{first['id']}", json={"status": "dismissed"}, headers=proctor.headers)

        alerts = client.get(f"/api/alerts/exam/{exam['id']}", headers=proctor.headers).json()["alerts"]
        assert [a["id"] for a in alerts] == [second["id"], first["id"]]

        pending = client.get(f"/api/alerts/exam/{exam['id']}?status=new", headers=proctor.headers).json()["alerts"]
        assert [a["id"] for a in pending] == [second["id"]]


class TestMonitoring:
    def test_student_panel(self, client, proctor, student, exam, enrollment, detector_headers):
        post_alert(client, detector_headers, exam["id"], student.id)
        response = client.get(f"/api/monitoring/{exam['id']}/student/{student.id}", headers=proctor.headers)
        assert response.status_code == 200
        monitoring = response.json()["monitoring"]
        assert monitoring["enrollment"]["id"] == enrollment["id"]
        assert monitoring["student"]["email"] == "sam@proctorhub.io"
        assert len(monitoring["alerts"]) == 1

    def test_foreign_proctor_forbidden(self, client, other_proctor, student, exam):
        response = client.get(f"/api/monitoring/{exam['id']}/student/{student.id}", headers=other_proctor.headers)
        assert response.status_code == 403

    def test_unknown_student(self, client, proctor, exam):
        response = client.get(f"/api/monitoring/{exam['id']}/student/5555", headers=proctor.headers)
        assert response.status_code == 404


def test_detector_name_is_logged(client, student, exam, detector_headers, caplog):
    with caplog.at_level(logging.INFO, logger="proctorhub.services.alert_service"):
        post_alert(client, detector_headers, exam["id"], student.id)
    assert any("from vision-worker" in record.getMessage() for record in caplog.records)
