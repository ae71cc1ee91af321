"""
API tests for Project controller.

This module contains endpoint tests for the project routes: CRUD, status,
photos, costs, the usage collections and the error envelope.
"""

import logging
import uuid

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient

from app.core.logging import RequestIdFilter
from app.database import get_db
from app.domains.project.service import ProjectService
from app.main import app


class TestProjectController:
    """Test cases for Project API endpoints."""

    @pytest.mark.asyncio
    async def test_create_project_success(self, client: AsyncClient, test_yarn, test_needle):
        payload = {
            "name": "Weekend Cardigan",
            "project_type": "knitting",
            "comments": "Top-down raglan",
            "yarns_used": [
                {"yarn_id": str(test_yarn.id), "quantity_used": 6, "cost_per_unit": 8.5, "is_primary": True}
            ],
            "needles_used": [{"needle_id": str(test_needle.id)}],
        }

        response = await client.post("/api/projects", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Project created successfully"
        data = body["data"]
        assert data["name"] == "Weekend Cardigan"
        assert data["status"] == "active"
        assert data["yarns_used"][0]["yarn"]["name"] == "Merino Worsted"
        assert data["needles_used"][0]["needle"]["size_mm"] == 4.5
        assert data["total_yarn_cost"] == pytest.approx(51)
        assert data["version"] == 1

    @pytest.mark.asyncio
    async def test_create_project_missing_name(self, client: AsyncClient):
        response = await client.post("/api/projects", json={"project_type": "knitting"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["error_code"] == "VALIDATION_ERROR"
        assert any(error["loc"][-1] == "name" for error in body["errors"])

    @pytest.mark.asyncio
    async def test_create_project_duplicate_yarn(self, client: AsyncClient, test_yarn):
        usage = {"yarn_id": str(test_yarn.id), "quantity_used": 1}
        response = await client.post(
            "/api/projects",
            json={"name": "Twice", "project_type": "crochet", "yarns_used": [usage, usage]},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Cannot add the same yarn multiple times to a project"

        listing = await client.get("/api/projects")
        assert listing.json()["pagination"]["total"] == 0

    @pytest.mark.asyncio
    async def test_list_projects_with_filters(self, client: AsyncClient, test_project, test_crochet_project):
        response = await client.get("/api/projects", params={"project_type": "crochet"})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [p["id"] for p in body["data"]] == [str(test_crochet_project.id)]
        assert body["pagination"] == {
            "page": 1,
            "limit": 20,
            "total": 1,
            "total_pages": 1,
            "has_next": False,
            "has_prev": False,
        }

    @pytest.mark.asyncio
    async def test_list_projects_lenient_pagination(self, client: AsyncClient, test_project):
        response = await client.get("/api/projects", params={"page": "0", "limit": "abc"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["pagination"]["page"] == 1
        assert response.json()["pagination"]["limit"] == 20

    @pytest.mark.asyncio
    async def test_get_project_not_found(self, client: AsyncClient):
        response = await client.get(f"/api/projects/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Project not found"
        assert body["error_code"] == "NOT_FOUND"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_get_project_invalid_id(self, client: AsyncClient):
        response = await client.get("/api/projects/not-a-uuid")

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_project(self, client: AsyncClient, test_project):
        response = await client.put(f"/api/projects/{test_project.id}", json={"name": "Aran Sweater"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["name"] == "Aran Sweater"
        assert response.json()["data"]["version"] == 2

    @pytest.mark.asyncio
    async def test_update_project_rejects_collections(self, client: AsyncClient, test_project):
        response = await client.put(f"/api/projects/{test_project.id}", json={"yarns_used": []})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_update_status(self, client: AsyncClient, test_project):
        response = await client.patch(
            f"/api/projects/{test_project.id}/status",
            json={"status": "completed", "completion_date": "2024-06-30"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["status"] == "completed"
        assert data["completion_date"] == "2024-06-30"

    @pytest.mark.asyncio
    async def test_update_status_completion_before_start(self, client: AsyncClient, test_project):
        project_id = str(test_project.id)
        await client.put(f"/api/projects/{project_id}", json={"start_date": "2025-05-01"})

        response = await client.patch(
            f"/api/projects/{project_id}/status",
            json={"status": "completed", "completion_date": "2025-01-01"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        fetched = await client.get(f"/api/projects/{project_id}")
        assert fetched.json()["data"]["status"] == "active"

    @pytest.mark.asyncio
    async def test_delete_project(self, client: AsyncClient, test_project):
        response = await client.delete(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Project deleted successfully"

        missing = await client.get(f"/api/projects/{test_project.id}")
        assert missing.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_photos_and_costs(self, client: AsyncClient, test_project, test_yarn):
        photo = await client.post(
            f"/api/projects/{test_project.id}/photos",
            json={"file_path": "/img/wip.jpg", "photo_type": "progress", "caption": "Yoke done"},
        )
        assert photo.status_code == status.HTTP_201_CREATED
        assert photo.json()["data"]["photos"][0]["caption"] == "Yoke done"

        await client.post(
            f"/api/projects/{test_project.id}/yarns",
            json={"yarn_id": str(test_yarn.id), "quantity_used": 2, "cost_per_unit": 10},
        )
        cost = await client.post(
            f"/api/projects/{test_project.id}/costs",
            json={"description": "Buttons", "amount": 7, "category": "notions"},
        )
        assert cost.status_code == status.HTTP_201_CREATED

        summary = await client.get(f"/api/projects/{test_project.id}/costs/summary")
        assert summary.status_code == status.HTTP_200_OK
        data = summary.json()["data"]
        assert data["yarn_cost"] == pytest.approx(20)
        assert data["additional_cost"] == pytest.approx(7)
        assert data["total_cost"] == pytest.approx(27)
        assert data["currency"] == "EUR"
        assert data["breakdown"]["yarns"][0]["yarn_name"] == "Merino Worsted"

    @pytest.mark.asyncio
    async def test_invalid_cost_amount(self, client: AsyncClient, test_project):
        response = await client.post(
            f"/api/projects/{test_project.id}/costs", json={"description": "Free pattern", "amount": 0}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestProjectUsageEndpoints:
    """Test cases for the yarn, needle and hook usage routes."""

    @pytest.mark.asyncio
    async def test_yarn_usage_lifecycle(self, client: AsyncClient, test_project, test_yarn, test_yarn_2):
        base = f"/api/projects/{test_project.id}/yarns"

        first = await client.post(base, json={"yarn_id": str(test_yarn.id), "quantity_used": 3, "is_primary": True})
        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["message"] == "Yarn added to project successfully"

        second = await client.post(
            base, json={"yarn_id": str(test_yarn_2.id), "quantity_used": 1, "is_primary": True}
        )
        usages = second.json()["data"]["yarns_used"]
        assert [u["is_primary"] for u in usages] == [False, True]

        usage_id = usages[0]["id"]
        updated = await client.put(f"{base}/{usage_id}", json={"quantity_used": 4, "notes": "body"})
        assert updated.status_code == status.HTTP_200_OK
        assert updated.json()["data"]["yarns_used"][0]["quantity_used"] == 4

        removed = await client.delete(f"{base}/{usage_id}")
        assert removed.status_code == status.HTTP_200_OK
        assert [u["yarn_id"] for u in removed.json()["data"]["yarns_used"]] == [str(test_yarn_2.id)]

    @pytest.mark.asyncio
    async def test_duplicate_yarn_is_conflict(self, client: AsyncClient, test_project, test_yarn):
        base = f"/api/projects/{test_project.id}/yarns"
        usage = {"yarn_id": str(test_yarn.id), "quantity_used": 1}
        await client.post(base, json=usage)

        response = await client.post(base, json=usage)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["error_code"] == "CONFLICT"

    @pytest.mark.asyncio
    async def test_unknown_yarn_is_not_found(self, client: AsyncClient, test_project):
        response = await client.post(
            f"/api/projects/{test_project.id}/yarns",
            json={"yarn_id": str(uuid.uuid4()), "quantity_used": 1},
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Yarn not found"

    @pytest.mark.asyncio
    async def test_update_missing_usage(self, client: AsyncClient, test_project):
        response = await client.put(
            f"/api/projects/{test_project.id}/yarns/{uuid.uuid4()}", json={"quantity_used": 2}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Yarn usage not found"

    @pytest.mark.asyncio
    async def test_usage_patch_cannot_change_reference(self, client: AsyncClient, test_project, test_yarn):
        added = await client.post(
            f"/api/projects/{test_project.id}/yarns",
            json={"yarn_id": str(test_yarn.id), "quantity_used": 1},
        )
        usage_id = added.json()["data"]["yarns_used"][0]["id"]

        response = await client.put(
            f"/api/projects/{test_project.id}/yarns/{usage_id}", json={"yarn_id": str(uuid.uuid4())}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    @pytest.mark.asyncio
    async def test_needle_and_hook_usage(self, client: AsyncClient, test_project, test_needle, test_hook):
        needle = await client.post(
            f"/api/projects/{test_project.id}/needles",
            json={"needle_id": str(test_needle.id), "is_primary": True},
        )
        hook = await client.post(
            f"/api/projects/{test_project.id}/hooks",
            json={"hook_id": str(test_hook.id), "is_primary": True, "notes": "edging"},
        )

        assert needle.status_code == status.HTTP_201_CREATED
        assert hook.status_code == status.HTTP_201_CREATED
        data = hook.json()["data"]
        assert data["needles_used"][0]["is_primary"] is True
        assert data["hooks_used"][0]["hook"]["size_mm"] == 5.0

        hook_usage_id = data["hooks_used"][0]["id"]
        updated = await client.put(
            f"/api/projects/{test_project.id}/hooks/{hook_usage_id}", json={"notes": None}
        )
        assert updated.json()["data"]["hooks_used"][0]["notes"] is None

        needle_usage_id = data["needles_used"][0]["id"]
        removed = await client.delete(f"/api/projects/{test_project.id}/needles/{needle_usage_id}")
        assert removed.json()["data"]["needles_used"] == []


class TestErrorEnvelope:
    """Unexpected failures are reported without leaking details."""

    @pytest.mark.asyncio
    async def test_unhandled_error_is_500(self, test_db, monkeypatch):
        async def explode(self, project_id):
            raise RuntimeError("disk on fire")

        monkeypatch.setattr(ProjectService, "get_project", explode)

        async def override_get_db():
            yield test_db

        app.dependency_overrides[get_db] = override_get_db
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                response = await ac.get(f"/api/projects/{uuid.uuid4()}")
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Internal Server Error"
        assert "disk on fire" not in response.text

    @pytest.mark.asyncio
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/spindles")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["success"] is False


class _CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []
        self.addFilter(RequestIdFilter())

    def emit(self, record):
        self.records.append(record)


class TestRequestLogging:
    """Log records written while serving a request carry its id."""

    @pytest.mark.asyncio
    async def test_service_logs_carry_request_id(self, client: AsyncClient, test_project):
        service_logger = logging.getLogger("app.domains.project.service")
        handler = _CollectingHandler()
        previous_level = service_logger.level
        service_logger.addHandler(handler)
        service_logger.setLevel(logging.INFO)
        try:
            response = await client.post(
                f"/api/projects/{test_project.id}/costs",
                json={"description": "Stitch markers", "amount": 4},
                headers={"X-Request-ID": "trace-123"},
            )
        finally:
            service_logger.removeHandler(handler)
            service_logger.setLevel(previous_level)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.headers["X-Request-ID"] == "trace-123"
        added = [r for r in handler.records if r.getMessage().startswith("Added cost")]
        assert [r.request_id for r in added] == ["trace-123"]
