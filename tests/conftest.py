import pytest
from fastapi.testclient import TestClient

from proctorhub.core.config import settings
from proctorhub.core.database import build_engine
from proctorhub.core.security import create_detector_token
from proctorhub.main import app
from proctorhub.storage import get_storage
from proctorhub.storage.memory import MemoryStorage
from proctorhub.storage.sql import SqlStorage


EXAM_PAYLOAD = {
    "name": "Midterm",
    "course": "CS101",
    "description": "Chapters 1-4",
    "date": "2026-11-02T09:00:00Z",
    "duration": 60,
    "totalQuestions": 10,
    "isActive": True,
}


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    if request.param == "memory":
        backend = MemoryStorage()
    else:
        backend = SqlStorage(build_engine("sqlite://"))
    yield backend
    backend.close()


@pytest.fixture
def client(storage, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    app.dependency_overrides[get_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def register(client, name, email, role="student", password="secret123"):
    response = client.post("/api/auth/register", json={
        "name": name,
        "email": email,
        "password": password,
        "role": role,
    })
    assert response.status_code == 201, response.text
    return response.json()["user"]


def login(client, email, password="secret123"):
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["token"]


def auth(token):
    return {"Authorization": f"Bearer {token}"}


class Account:
    def __init__(self, client, name, email, role):
        self.user = register(client, name, email, role)
        self.id = self.user["id"]
        self.token = login(client, email)
        self.headers = auth(self.token)


@pytest.fixture
def proctor(client):
    return Account(client, "Paula Proctor", "paula@proctorhub.io", "proctor")


@pytest.fixture
def other_proctor(client):
    return Account(client, "Oscar Other", "oscar@proctorhub.io", "proctor")


@pytest.fixture
def student(client):
    return Account(client, "Sam Student", "sam@proctorhub.io", "student")


@pytest.fixture
def detector_headers():
    return {"X-Detector-Token": create_detector_token("vision-worker")}


@pytest.fixture
def exam(client, proctor):
    response = client.post("/api/exams", json=EXAM_PAYLOAD, headers=proctor.headers)
    assert response.status_code == 201, response.text
    return response.json()["exam"]


@pytest.fixture
def enrollment(client, student, exam):
    response = client.post("/api/enrollments", json={"examId": exam["id"]}, headers=student.headers)
    assert response.status_code == 201, response.text
    return response.json()["enrollment"]
