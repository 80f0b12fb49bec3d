"""Integration tests for Recommendations API."""

from typing import Any

import pytest
from httpx import AsyncClient


async def _category(client: AsyncClient, name: str = "Books") -> dict[str, Any]:
    response = await client.post("/api/v1/categories", json={"name": name})
    return response.json()["data"]  # type: ignore[no-any-return]


class TestRecommendationsAPI:
    @pytest.mark.asyncio
    async def test_create_and_list_by_category(self, authenticated_client: AsyncClient) -> None:
        books = await _category(authenticated_client, "Books")
        films = await _category(authenticated_client, "Films")
        for title in ["Dune", "Emma"]:
            await authenticated_client.post(
                "/api/v1/recommendations", json={"category_id": books["id"], "title": title}
            )
        await authenticated_client.post(
            "/api/v1/recommendations", json={"category_id": films["id"], "title": "Alien"}
        )

        response = await authenticated_client.get(
            "/api/v1/recommendations", params={"category_id": books["id"]}
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [r["title"] for r in data] == ["Dune", "Emma"]
        assert [r["position"] for r in data] == [0, 1]

    @pytest.mark.asyncio
    async def test_create_with_links(self, authenticated_client: AsyncClient) -> None:
        books = await _category(authenticated_client)

        response = await authenticated_client.post(
            "/api/v1/recommendations",
            json={
                "category_id": books["id"],
                "title": "Dune",
                "description": "Spice",
                "url": " https://example.com/dune ",
                "image_url": "https://example.com/dune.jpg",
            },
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["url"] == "https://example.com/dune"
        assert data["category_id"] == books["id"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "url",
        ["javascript:alert(1)", "ftp://example.com/file", "http://localhost:8000", "http://10.0.0.1"],
    )
    async def test_rejects_unsafe_urls(self, authenticated_client: AsyncClient, url: str) -> None:
        books = await _category(authenticated_client)

        response = await authenticated_client.post(
            "/api/v1/recommendations",
            json={"category_id": books["id"], "title": "Bad", "url": url},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_and_move(self, authenticated_client: AsyncClient) -> None:
        books = await _category(authenticated_client, "Books")
        films = await _category(authenticated_client, "Films")
        card = (
            await authenticated_client.post(
                "/api/v1/recommendations", json={"category_id": books["id"], "title": "Dune"}
            )
        ).json()["data"]

        response = await authenticated_client.patch(
            f"/api/v1/recommendations/{card['id']}",
            json={"title": "Dune (film)", "category_id": films["id"]},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Dune (film)"
        assert data["category_id"] == films["id"]

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, authenticated_client: AsyncClient) -> None:
        books = await _category(authenticated_client)
        card = (
            await authenticated_client.post(
                "/api/v1/recommendations", json={"category_id": books["id"], "title": "Dune"}
            )
        ).json()["data"]

        response = await authenticated_client.delete(f"/api/v1/recommendations/{card['id']}")

        assert response.status_code == 204
        assert (await authenticated_client.get("/api/v1/recommendations")).json()["data"] == []
        missing = await authenticated_client.patch(
            f"/api/v1/recommendations/{card['id']}", json={"title": "Back"}
        )
        assert missing.status_code == 404
        assert missing.json()["error_code"] == "RECOMMENDATION_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_unknown_category(self, authenticated_client: AsyncClient) -> None:
        response = await authenticated_client.post(
            "/api/v1/recommendations",
            json={"category_id": "00000000-0000-0000-0000-000000000000", "title": "Dune"},
        )

        assert response.status_code == 404
        assert response.json()["error_code"] == "CATEGORY_NOT_FOUND"
