"""
Tests for Assessment API Endpoints
"""

import pytest
from conftest import TENANT
from httpx import ASGITransport, AsyncClient

from adaptassess.core.database import get_db
from adaptassess.main import app

HEADERS = {"X-Tenant-ID": TENANT}


@pytest.fixture
async def client(db_session):
    """Create test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def assessment_payload(**overrides):
    payload = {
        "title": "Backend Engineer Screen",
        "target_role": {"name": "Backend Engineer", "seniority_level": "MID"},
        "knowledge_area_mix": [
            {
                "area": "PROGRAMMING_LANGUAGE",
                "percentage": 60,
                "programming_language": "Python",
            },
            {"area": "ALGORITHMS_DATA_STRUCTURES", "percentage": 40},
        ],
        "max_questions": 12,
        "duration_minutes": 45,
    }
    payload.update(overrides)
    return payload


class TestCreateAssessment:
    async def test_create(self, client):
        response = await client.post(
            "/api/v1/assessments", json=assessment_payload(), headers=HEADERS
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tenant_id"] == TENANT
        assert data["is_active"] is True
        assert data["initial_difficulty"] == 3
        assert data["max_questions"] == 12
        assert [c["area"] for c in data["knowledge_area_mix"]] == [
            "PROGRAMMING_LANGUAGE",
            "ALGORITHMS_DATA_STRUCTURES",
        ]
        assert data["knowledge_area_mix"][0]["programming_language"] == "Python"

    async def test_defaults_max_questions(self, client):
        payload = assessment_payload()
        del payload["max_questions"]

        response = await client.post("/api/v1/assessments", json=payload, headers=HEADERS)

        assert response.status_code == 201
        assert response.json()["max_questions"] == 10

    async def test_mix_must_total_100(self, client):
        payload = assessment_payload(
            knowledge_area_mix=[
                {"area": "PROGRAMMING_LANGUAGE", "percentage": 60},
                {"area": "ALGORITHMS_DATA_STRUCTURES", "percentage": 30},
            ]
        )

        response = await client.post("/api/v1/assessments", json=payload, headers=HEADERS)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_duplicate_area(self, client):
        payload = assessment_payload(
            knowledge_area_mix=[
                {"area": "PROGRAMMING_LANGUAGE", "percentage": 50},
                {"area": "PROGRAMMING_LANGUAGE", "percentage": 50},
            ]
        )

        response = await client.post("/api/v1/assessments", json=payload, headers=HEADERS)

        assert response.status_code == 400

    async def test_difficulty_out_of_range(self, client):
        response = await client.post(
            "/api/v1/assessments", json=assessment_payload(initial_difficulty=6), headers=HEADERS
        )

        assert response.status_code == 400

    async def test_unknown_area_rejected_by_schema(self, client):
        payload = assessment_payload(
            knowledge_area_mix=[{"area": "astrology", "percentage": 100}]
        )

        response = await client.post("/api/v1/assessments", json=payload, headers=HEADERS)

        assert response.status_code == 422

    async def test_missing_tenant_header(self, client):
        response = await client.post("/api/v1/assessments", json=assessment_payload())

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestReadAssessments:
    async def test_get(self, client):
        created = (
            await client.post("/api/v1/assessments", json=assessment_payload(), headers=HEADERS)
        ).json()

        response = await client.get(
            f"/api/v1/assessments/{created['assessment_id']}", headers=HEADERS
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Backend Engineer Screen"

    async def test_get_unknown(self, client):
        response = await client.get("/api/v1/assessments/missing", headers=HEADERS)

        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "NOT_FOUND", "message": "Assessment not found"}
        }

    async def test_other_tenant_cannot_read(self, client):
        created = (
            await client.post("/api/v1/assessments", json=assessment_payload(), headers=HEADERS)
        ).json()

        response = await client.get(
            f"/api/v1/assessments/{created['assessment_id']}",
            headers={"X-Tenant-ID": "tenant-other"},
        )

        assert response.status_code == 404

    async def test_list(self, client):
        for title in ("Screen A", "Screen B"):
            await client.post(
                "/api/v1/assessments", json=assessment_payload(title=title), headers=HEADERS
            )
        await client.post(
            "/api/v1/assessments",
            json=assessment_payload(title="Elsewhere"),
            headers={"X-Tenant-ID": "tenant-other"},
        )

        response = await client.get("/api/v1/assessments", headers=HEADERS)

        assert response.status_code == 200
        assert {a["title"] for a in response.json()} == {"Screen A", "Screen B"}


class TestActivation:
    async def test_deactivate_and_reactivate(self, client):
        created = (
            await client.post("/api/v1/assessments", json=assessment_payload(), headers=HEADERS)
        ).json()
        url = f"/api/v1/assessments/{created['assessment_id']}/active"

        response = await client.patch(url, json={"is_active": False}, headers=HEADERS)
        assert response.status_code == 200
        assert response.json()["is_active"] is False

        response = await client.patch(url, json={"is_active": True}, headers=HEADERS)
        assert response.json()["is_active"] is True

    async def test_unknown_assessment(self, client):
        response = await client.patch(
            "/api/v1/assessments/missing/active", json={"is_active": False}, headers=HEADERS
        )

        assert response.status_code == 404
