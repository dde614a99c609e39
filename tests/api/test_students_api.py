"""
Tests for the student roster API.
"""

import pytest
from fastapi.testclient import TestClient

from student_roster.core.config import Settings
from student_roster.integrations.roster.local_store import MemoryStorage
from student_roster.main import create_app


@pytest.fixture
def client():
    app_settings = Settings(
        _env_file=None,
        LOCAL_STORE_PATH="",
        LOCAL_STORE_LATENCY_SECONDS=0,
        ROSTER_POLL_INTERVAL_SECONDS=3600,
        SESSION_IDENTITY="front-office"
    )
    app = create_app(app_settings, storage=MemoryStorage())
    with TestClient(app) as test_client:
        yield test_client


NEW_STUDENT = {
    "studentId": "S010",
    "studentName": "Meera Iyer",
    "fatherName": "Suresh Iyer",
    "className": "V",
    "section": "RISHI",
    "rollNo": "12",
    "phoneNumber": "9000011111",
    "emailId": "meera@example.com",
}


class TestStudentsAPI:
    """Test roster endpoints against the local store."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_list_students_sorted(self, client):
        response = client.get("/api/v1/students/")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["visible"] == 4
        assert [s["rollNo"] for s in data["students"]] == ["056", "101", "205", "301"]
        assert data["status"]["mock_data_mode"] is True
        assert data["status"]["identity"] == "front-office"

    def test_list_students_filtered(self, client):
        response = client.get("/api/v1/students/", params={"class_name": "V"})

        students = response.json()["students"]
        assert [s["studentName"] for s in students] == ["Ravi Sharma"]

        response = client.get("/api/v1/students/", params={"class_name": "all", "search": "kumar"})

        data = response.json()
        assert [s["studentName"] for s in data["students"]] == ["Deepak Kumar"]
        assert data["filters"]["class_name"] == "ALL"

    def test_status(self, client):
        response = client.get("/api/v1/students/status")

        data = response.json()
        assert data["state"] == "ready"
        assert data["backend"] == "local"
        assert data["is_polling"] is True
        assert data["session_error"] is None

    def test_options(self, client):
        data = client.get("/api/v1/students/options").json()

        assert len(data["classes"]) == 12
        assert data["classes"][0] == {"value": "I", "label": "Class I"}
        assert [s["value"] for s in data["sections"]] == ["MAHA", "RISHI", "NONE"]
        assert data["template"]["className"] == "I"
        assert data["template"]["section"] == "MAHA"
        assert "id" not in data["template"]

    def test_refresh(self, client):
        response = client.post("/api/v1/students/refresh")

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_create_student(self, client):
        response = client.post("/api/v1/students/", json=dict(NEW_STUDENT, id="client-chosen"))

        assert response.status_code == 201
        assert response.json()["total"] == 5

        students = client.get("/api/v1/students/", params={"search": "meera"}).json()["students"]
        assert len(students) == 1
        assert students[0]["id"] != "client-chosen"

    def test_create_invalid_student(self, client):
        response = client.post("/api/v1/students/", json=dict(NEW_STUDENT, studentId="S001"))

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert "already in use" in detail["message"]
        assert "studentId" in detail["field_errors"]

    def test_update_student(self, client):
        body = {
            "studentId": "S003",
            "studentName": "Aarav Patel",
            "className": "III",
            "section": "MAHA",
            "rollNo": "056",
        }

        response = client.put("/api/v1/students/3", json=body)

        assert response.status_code == 200
        students = client.get("/api/v1/students/", params={"class_name": "III"}).json()["students"]
        assert [s["id"] for s in students] == ["3"]

    def test_update_unknown_student(self, client):
        response = client.put("/api/v1/students/missing", json=NEW_STUDENT)

        assert response.status_code == 404
        assert response.json()["status_code"] == 404

    def test_delete_requires_confirmation(self, client):
        response = client.delete("/api/v1/students/4")

        assert response.status_code == 400
        assert client.get("/api/v1/students/").json()["total"] == 4

    def test_delete_student(self, client):
        response = client.delete("/api/v1/students/4", params={"confirm": "true"})

        assert response.status_code == 200
        assert response.json()["total"] == 3
        data = client.get("/api/v1/students/", params={"search": "kumar"}).json()
        assert data["visible"] == 0

    def test_drive_links_are_resolved(self, client):
        body = dict(NEW_STUDENT, photoUrl="https://drive.google.com/file/d/abc123/view?usp=sharing")
        client.post("/api/v1/students/", json=body)

        student = client.get("/api/v1/students/", params={"search": "S010"}).json()["students"][0]

        assert student["photoDisplayUrl"] == "https://drive.google.com/uc?export=view&id=abc123"
        assert student["signatureDisplayUrl"] is None

    def test_unknown_class_is_rejected(self, client):
        response = client.post("/api/v1/students/", json=dict(NEW_STUDENT, className="XIII"))

        assert response.status_code == 422
        assert response.json()["status_code"] == 422
        assert response.json()["detail"]["field_errors"]["className"] == "Class XIII is not a known option."
        assert client.get("/api/v1/students/").json()["total"] == 4

    def test_collection_route_answers_without_redirect(self, client):
        response = client.get("/api/v1/students/", follow_redirects=False)

        assert response.status_code == 200
        assert response.json()["total"] == 4
