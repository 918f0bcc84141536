from .conftest import EXAM_PAYLOAD


def test_full_exam_attempt_scenario(client, proctor, student, exam):
    response = client.post("/api/enrollments", json={"examId": exam["id"]}, headers=student.headers)
    assert response.status_code == 201
    enrollment = response.json()["enrollment"]
    assert enrollment["status"] == "enrolled"
    assert enrollment["completionPercentage"] == 0
    assert enrollment["studentId"] == student.id

    started = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "in-progress"},
                         headers=student.headers).json()["enrollment"]
    assert started["status"] == "in-progress"
    assert started["startTime"] is not None

    completed = client.put(f"/api/enrollments/{enrollment['id']}",
                           json={"status": "completed", "completionPercentage": 100},
                           headers=student.headers).json()["enrollment"]
    assert completed["status"] == "completed"
    assert completed["completionPercentage"] == 100
    assert completed["endTime"] is not None

    listing = client.get(f"/api/enrollments/exam/{exam['id']}", headers=proctor.headers)
    assert listing.status_code == 200
    records = listing.json()["enrollments"]
    assert len(records) == 1
    assert records[0]["status"] == "completed"
    assert records[0]["student"]["email"] == "sam@proctorhub.io"
    assert "hashedPassword" not in records[0]["student"]
    assert "password" not in records[0]["student"]


class TestEnroll:
    def test_duplicate_enrollment_conflicts(self, client, student, exam, enrollment):
        response = client.post("/api/enrollments", json={"examId": exam["id"]}, headers=student.headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Student already enrolled in this exam"

        mine = client.get("/api/enrollments/student", headers=student.headers).json()["enrollments"]
        assert len(mine) == 1

    def test_student_id_forced_to_caller(self, client, student, proctor, exam):
        response = client.post("/api/enrollments", json={"examId": exam["id"], "studentId": proctor.id},
                               headers=student.headers)
        assert response.json()["enrollment"]["studentId"] == student.id

    def test_unknown_exam(self, client, student):
        response = client.post("/api/enrollments", json={"examId": 777}, headers=student.headers)
        assert response.status_code == 404

    def test_proctors_do_not_enroll(self, client, proctor, exam):
        response = client.post("/api/enrollments", json={"examId": exam["id"]}, headers=proctor.headers)
        assert response.status_code == 403

    def test_my_enrollments_join_exam(self, client, student, exam, enrollment):
        mine = client.get("/api/enrollments/student", headers=student.headers).json()["enrollments"]
        assert mine[0]["exam"] == exam


class TestExamEnrollmentListing:
    def test_non_owner_forbidden(self, client, other_proctor, exam, enrollment):
        response = client.get(f"/api/enrollments/exam/{exam['id']}", headers=other_proctor.headers)
        assert response.status_code == 403

    def test_students_forbidden(self, client, student, exam):
        response = client.get(f"/api/enrollments/exam/{exam['id']}", headers=student.headers)
        assert response.status_code == 403


class TestTransitions:
    def test_start_and_complete_shortcuts(self, client, student, enrollment):
        started = client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        assert started.json()["enrollment"]["status"] == "in-progress"

        completed = client.post(f"/api/enrollments/{enrollment['id']}/complete",
                                json={"completionPercentage": 80}, headers=student.headers)
        body = completed.json()["enrollment"]
        assert body["status"] == "completed"
        assert body["completionPercentage"] == 80

    def test_cannot_skip_in_progress(self, client, student, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "completed"},
                              headers=student.headers)
        assert response.status_code == 400

    def test_cannot_go_back(self, client, student, enrollment):
        client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        client.post(f"/api/enrollments/{enrollment['id']}/complete", headers=student.headers)

        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "enrolled"},
                              headers=student.headers)
        assert response.status_code == 400
        assert "Invalid enrollment status transition" in response.json()["message"]

        mine = client.get("/api/enrollments/student", headers=student.headers).json()["enrollments"]
        assert mine[0]["status"] == "completed"

    def test_restarting_keeps_start_time(self, client, student, enrollment):
        first = client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        second = client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        assert second.status_code == 200
        assert second.json()["enrollment"]["startTime"] == first.json()["enrollment"]["startTime"]

    def test_completion_cannot_decrease(self, client, student, enrollment):
        url = f"/api/enrollments/{enrollment['id']}"
        client.post(f"{url}/start", headers=student.headers)
        assert client.put(url, json={"completionPercentage": 50}, headers=student.headers).status_code == 200

        response = client.put(url, json={"completionPercentage": 30}, headers=student.headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Completion percentage cannot decrease"

    def test_completion_out_of_range(self, client, student, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"completionPercentage": 101},
                              headers=student.headers)
        assert response.status_code == 400

    def test_unknown_status_rejected(self, client, student, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "cancelled"},
                              headers=student.headers)
        assert response.status_code == 400


class TestUpdatePermissions:
    def test_other_student_forbidden(self, client, enrollment):
        from .conftest import Account

        intruder = Account(client, "Ivan", "ivan@proctorhub.io", "student")
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "in-progress"},
                              headers=intruder.headers)
        assert response.status_code == 403

    def test_owning_proctor_may_update(self, client, proctor, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "in-progress"},
                              headers=proctor.headers)
        assert response.status_code == 200

    def test_foreign_proctor_forbidden(self, client, other_proctor, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}", json={"status": "in-progress"},
                              headers=other_proctor.headers)
        assert response.status_code == 403

    def test_student_cannot_set_attempt_times(self, client, student, enrollment):
        url = f"/api/enrollments/{enrollment['id']}"
        client.post(f"{url}/start", headers=student.headers)

        pushed = client.put(url, json={"startTime": "2099-01-01T00:00:00Z"}, headers=student.headers)
        ended = client.put(url, json={"endTime": "2099-01-01T00:00:00Z"}, headers=student.headers)
        assert pushed.status_code == ended.status_code == 403

        session = client.get(f"{url}/session", headers=student.headers).json()["session"]
        assert session["secondsRemaining"] <= 60 * 60

    def test_start_time_is_fixed_once_started(self, client, proctor, student, enrollment):
        url = f"/api/enrollments/{enrollment['id']}"
        started = client.post(f"{url}/start", headers=student.headers).json()["enrollment"]

        response = client.put(url, json={"startTime": "2099-01-01T00:00:00Z"}, headers=proctor.headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Start time cannot be changed once the attempt has started"

        mine = client.get("/api/enrollments/student", headers=student.headers).json()["enrollments"]
        assert mine[0]["startTime"] == started["startTime"]

    def test_proctor_sets_start_time_before_attempt(self, client, proctor, enrollment):
        response = client.put(f"/api/enrollments/{enrollment['id']}",
                              json={"status": "in-progress", "startTime": "2026-11-02T09:05:00Z"},
                              headers=proctor.headers)
        assert response.status_code == 200
        assert response.json()["enrollment"]["startTime"].startswith("2026-11-02T09:05:00")

    def test_unknown_enrollment(self, client, student):
        response = client.put("/api/enrollments/999", json={"status": "in-progress"}, headers=student.headers)
        assert response.status_code == 404


class TestSession:
    def test_not_started(self, client, student, enrollment):
        session = client.get(f"/api/enrollments/{enrollment['id']}/session", headers=student.headers).json()["session"]
        assert session["deadline"] is None
        assert session["secondsRemaining"] is None
        assert session["exam"]["duration"] == EXAM_PAYLOAD["duration"]

    def test_countdown_after_start(self, client, student, enrollment):
        client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        session = client.get(f"/api/enrollments/{enrollment['id']}/session", headers=student.headers).json()["session"]
        assert session["deadline"] is not None
        assert 59 * 60 <= session["secondsRemaining"] <= 60 * 60

    def test_completed_has_no_time_left(self, client, student, enrollment):
        client.post(f"/api/enrollments/{enrollment['id']}/start", headers=student.headers)
        client.post(f"/api/enrollments/{enrollment['id']}/complete", headers=student.headers)
        session = client.get(f"/api/enrollments/{enrollment['id']}/session", headers=student.headers).json()["session"]
        assert session["secondsRemaining"] == 0
