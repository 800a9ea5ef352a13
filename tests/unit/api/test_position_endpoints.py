"""
Tests for position endpoints.

Tests:
- Admin-only create, update and soft delete
- Public listing, filtering and detail
- Deleted positions hidden from every read
"""

import pytest
from sqlalchemy import select

from database.models.admins import RecordStatus
from database.models.positions import Position


NEW_POSITION = {
    "title": "Data Engineer",
    "category": "Data",
    "workType": "hybrid",
    "location": "Lisbon",
    "description": "Own the ingestion pipelines.",
}


class TestCreatePosition:
    """Test creating positions."""

    @pytest.mark.asyncio
    async def test_standard_admin_creates(self, client, standard_admin, standard_headers):
        response = await client.post("/positions", json=NEW_POSITION, headers=standard_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "Data Engineer"
        assert data["workType"] == "hybrid"
        assert data["location"] == "Lisbon"
        assert data["description"] == "Own the ingestion pipelines."
        assert data["createdAt"]
        assert data["updatedAt"]

    @pytest.mark.asyncio
    async def test_owner_recorded(self, client, db_session, standard_admin, standard_headers):
        response = await client.post("/positions", json=NEW_POSITION, headers=standard_headers)

        position = await db_session.get(Position, response.json()["id"])
        assert position.created_by_admin_id == standard_admin.id
        assert position.status == RecordStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_defaults(self, client, superadmin_headers):
        payload = {"title": "Office Manager", "category": "Operations", "description": "Run the office."}
        response = await client.post("/positions", json=payload, headers=superadmin_headers)

        assert response.status_code == 201
        assert response.json()["workType"] == "onsite"
        assert response.json()["location"] is None

    @pytest.mark.asyncio
    async def test_requires_token(self, client, superadmin):
        response = await client.post("/positions", json=NEW_POSITION)

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_jwt"

    @pytest.mark.asyncio
    async def test_rejected_before_any_admin_exists(self, client):
        response = await client.post("/positions", json=NEW_POSITION)
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_work_type(self, client, superadmin_headers):
        response = await client.post(
            "/positions", json={**NEW_POSITION, "workType": "moon"}, headers=superadmin_headers
        )

        assert response.status_code == 400
        assert "workType" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_missing_fields(self, client, superadmin_headers):
        response = await client.post("/positions", json={"title": "x"}, headers=superadmin_headers)

        assert response.status_code == 400
        errors = response.json()["error"]
        assert "category" in errors
        assert "description" in errors


class TestReadPositions:
    """Test the public read endpoints."""

    @pytest.mark.asyncio
    async def test_list_hides_deleted(self, client, position, deleted_position):
        response = await client.get("/positions")

        assert response.status_code == 200
        body = response.json()
        assert [item["id"] for item in body["data"]] == [position.id]
        assert body["total"] == 1
        assert "description" not in body["data"][0]

    @pytest.mark.asyncio
    async def test_list_newest_first(self, client, db_session, position):
        newer = Position(
            title="Frontend Engineer",
            category="Engineering",
            description="Build the UI.",
            created_by_admin_id=position.created_by_admin_id,
        )
        db_session.add(newer)
        await db_session.commit()

        response = await client.get("/positions")
        assert [item["id"] for item in response.json()["data"]] == [newer.id, position.id]

    @pytest.mark.asyncio
    async def test_category_filter(self, client, db_session, position):
        db_session.add(Position(
            title="Recruiter",
            category="People",
            description="Hire people.",
            created_by_admin_id=position.created_by_admin_id,
        ))
        await db_session.commit()

        response = await client.get("/positions?category=People")

        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["title"] == "Recruiter"

    @pytest.mark.asyncio
    async def test_empty_list(self, client):
        response = await client.get("/positions")

        assert response.json() == {"data": [], "total": 0, "page": 1, "limit": 10, "totalPages": 0}

    @pytest.mark.asyncio
    async def test_detail(self, client, position):
        response = await client.get(f"/positions/{position.id}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Backend Engineer"
        assert data["workType"] == "remote"
        assert data["description"] == position.description

    @pytest.mark.asyncio
    async def test_deleted_detail_not_found(self, client, deleted_position):
        response = await client.get(f"/positions/{deleted_position.id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Position not found", "code": "not_found"}

    @pytest.mark.asyncio
    async def test_missing_detail_not_found(self, client):
        response = await client.get("/positions/4242")
        assert response.status_code == 404


class TestUpdatePosition:
    """Test partial updates."""

    @pytest.mark.asyncio
    async def test_partial_update(self, client, position, standard_headers):
        response = await client.put(
            f"/positions/{position.id}",
            json={"title": "Staff Backend Engineer", "workType": "hybrid"},
            headers=standard_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Staff Backend Engineer"
        assert data["workType"] == "hybrid"
        assert data["category"] == "Engineering"
        assert data["location"] == "Berlin"

    @pytest.mark.asyncio
    async def test_location_can_be_cleared(self, client, position, standard_headers):
        response = await client.put(
            f"/positions/{position.id}", json={"location": None}, headers=standard_headers
        )

        assert response.status_code == 200
        assert response.json()["location"] is None

    @pytest.mark.asyncio
    async def test_update_deleted_not_found(self, client, deleted_position, standard_headers):
        response = await client.put(
            f"/positions/{deleted_position.id}", json={"title": "x"}, headers=standard_headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_requires_token(self, client, position):
        response = await client.put(f"/positions/{position.id}", json={"title": "x"})
        assert response.status_code == 401


class TestDeletePosition:
    """Test soft deletion."""

    @pytest.mark.asyncio
    async def test_soft_delete(self, client, db_session, position, standard_headers):
        response = await client.delete(f"/positions/{position.id}", headers=standard_headers)

        assert response.status_code == 204
        assert (await client.get(f"/positions/{position.id}")).status_code == 404

        result = await db_session.execute(
            select(Position)
            .where(Position.id == position.id)
            .execution_options(populate_existing=True)
        )
        assert result.scalar_one().status == RecordStatus.DELETED

    @pytest.mark.asyncio
    async def test_delete_twice_not_found(self, client, position, standard_headers):
        await client.delete(f"/positions/{position.id}", headers=standard_headers)
        response = await client.delete(f"/positions/{position.id}", headers=standard_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_requires_token(self, client, position):
        response = await client.delete(f"/positions/{position.id}")
        assert response.status_code == 401
