"""Tests for card design API endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cardsmith.db.database import get_session
from cardsmith.main import app


@pytest.fixture
async def client(async_engine):
    """Provide an async test client with overridden database session."""
    async_session = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with async_session() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


class TestCreateDesign:
    async def test_create(self, client: AsyncClient, fire_styles: dict) -> None:
        response = await client.post("/designs", json={"name": "Fire", "styles": fire_styles})

        assert response.status_code == 201
        data = response.json()
        assert data["id"] is not None
        assert data["name"] == "Fire"
        assert data["styles"]["background"] == "#ff0000"
        assert data["styles"]["customCSS"] == "letter-spacing: 1px;"
        assert data["styles"]["borderStyle"] == "solid"
        assert "createdAt" in data

    async def test_duplicate_name(self, client: AsyncClient) -> None:
        await client.post("/designs", json={"name": "Fire"})

        response = await client.post("/designs", json={"name": "Fire"})

        assert response.status_code == 400
        data = response.json()
        assert data["kind"] == "duplicate_name"
        assert "already exists" in data["message"]

        listed = await client.get("/designs")
        assert len(listed.json()) == 1

    async def test_missing_name(self, client: AsyncClient) -> None:
        response = await client.post("/designs", json={"styles": {}})

        assert response.status_code == 400
        assert response.json()["kind"] == "missing_required"

    async def test_negative_border_width(self, client: AsyncClient) -> None:
        response = await client.post(
            "/designs", json={"name": "Bad", "styles": {"borderWidth": -1}}
        )

        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_input"


class TestListDesigns:
    async def test_empty(self, client: AsyncClient) -> None:
        response = await client.get("/designs")

        assert response.status_code == 200
        assert response.json() == []

    async def test_newest_first_with_exact_styles(
        self, client: AsyncClient, fire_styles: dict
    ) -> None:
        await client.post("/designs", json={"name": "Fire", "styles": fire_styles})
        await client.post("/designs", json={"name": "Water"})

        data = (await client.get("/designs")).json()

        assert [d["name"] for d in data] == ["Water", "Fire"]
        fire = data[1]["styles"]
        for key, value in fire_styles.items():
            assert fire[key] == value


class TestGetDesign:
    async def test_get(self, client: AsyncClient) -> None:
        created = (await client.post("/designs", json={"name": "Fire"})).json()

        response = await client.get(f"/designs/{created['id']}")

        assert response.status_code == 200
        assert response.json()["name"] == "Fire"

    async def test_not_found(self, client: AsyncClient) -> None:
        response = await client.get("/designs/999")

        assert response.status_code == 404
        assert response.json()["kind"] == "not_found"

    async def test_preview(self, client: AsyncClient, fire_styles: dict) -> None:
        created = (
            await client.post("/designs", json={"name": "Fire", "styles": fire_styles})
        ).json()

        response = await client.get(f"/designs/{created['id']}/preview")

        assert response.status_code == 200
        assert response.json()["background"] == "linear-gradient(45deg, #ff0000, #ffaa00)"


class TestUpdateDesign:
    async def test_update(self, client: AsyncClient) -> None:
        created = (
            await client.post(
                "/designs", json={"name": "Fire", "styles": {"borderWidth": 8}}
            )
        ).json()

        response = await client.put(
            f"/designs/{created['id']}",
            json={"name": "Fire", "styles": {"background": "#222222"}},
        )

        assert response.status_code == 200
        styles = response.json()["styles"]
        assert styles["background"] == "#222222"
        assert styles["borderWidth"] == 2

    async def test_update_not_found(self, client: AsyncClient) -> None:
        response = await client.put("/designs/999", json={"name": "Fire"})

        assert response.status_code == 404

    async def test_update_to_duplicate_name(self, client: AsyncClient) -> None:
        await client.post("/designs", json={"name": "Fire"})
        water = (await client.post("/designs", json={"name": "Water"})).json()

        response = await client.put(f"/designs/{water['id']}", json={"name": "Fire"})

        assert response.status_code == 400


class TestDeleteDesign:
    async def test_delete(self, client: AsyncClient) -> None:
        created = (await client.post("/designs", json={"name": "Fire"})).json()

        response = await client.delete(f"/designs/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Design deleted successfully"}
        assert (await client.get("/designs")).json() == []

    async def test_delete_not_found(self, client: AsyncClient) -> None:
        response = await client.delete("/designs/999")

        assert response.status_code == 404

    async def test_oversized_id_not_found(self, client: AsyncClient) -> None:
        too_big = "99999999999999999999"

        assert (await client.get(f"/designs/{too_big}")).status_code == 404
        assert (await client.get(f"/designs/{too_big}/preview")).status_code == 404
        assert (
            await client.put(f"/designs/{too_big}", json={"name": "Fire"})
        ).status_code == 404
        assert (await client.delete(f"/designs/{too_big}")).status_code == 404
