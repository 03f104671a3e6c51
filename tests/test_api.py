"""
Tests for the HTTP routes.
"""
import asyncio

from fastapi.testclient import TestClient

from alias_app.config import settings

OWNER = {"X-Owner-Id": "u1"}


class TestCreateAlias:

    def test_create_alias(self, client: TestClient):
        response = client.post("/api/v1/aliases/", json={"original_url": "example.com"}, headers=OWNER)
        assert response.status_code == 201

        data = response.json()
        assert data["canonical_url"] == "https://example.com/"
        assert data["owner_id"] == "u1"
        assert data["visit_count"] == 0
        assert data["is_custom"] is False
        assert data["short_url"] == f"{settings.base_url}/{data['alias']}"

    def test_anonymous_create(self, client: TestClient):
        response = client.post("/api/v1/aliases/", json={"original_url": "https://example.com"})
        assert response.status_code == 201
        assert response.json()["owner_id"] == settings.anonymous_owner_id

    def test_same_url_same_owner_same_alias(self, client: TestClient):
        first = client.post("/api/v1/aliases/", json={"original_url": "https://example.com/x"}, headers=OWNER)
        second = client.post("/api/v1/aliases/", json={"original_url": "https://example.com/x/"}, headers=OWNER)
        assert first.json()["alias"] == second.json()["alias"]

    def test_invalid_url(self, client: TestClient):
        response = client.post("/api/v1/aliases/", json={"original_url": "not-a-valid-url"})
        assert response.status_code == 422

    def test_invalid_custom_slug_rejected_by_schema(self, client: TestClient):
        response = client.post(
            "/api/v1/aliases/",
            json={"original_url": "https://example.com", "custom_slug": "bad slug"}
        )
        assert response.status_code == 422

    def test_custom_slug_conflict(self, client: TestClient):
        payload = {"original_url": "https://example.com", "custom_slug": "promo"}
        assert client.post("/api/v1/aliases/", json=payload, headers=OWNER).status_code == 201

        response = client.post("/api/v1/aliases/", json=payload, headers={"X-Owner-Id": "u2"})
        assert response.status_code == 409
        assert "promo" in response.json()["detail"]


class TestRedirect:

    def test_redirect_and_count_visit(self, client: TestClient, cache):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://www.github.com"}, headers=OWNER)
        alias = created.json()["alias"]
        # Cache miss path counts the visit before responding
        asyncio.run(cache.clear())

        response = client.get(f"/{alias}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.github.com/"

        info = client.get(f"/api/v1/aliases/{alias}")
        assert info.json()["visit_count"] == 1

    def test_redirect_from_cache(self, client: TestClient):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://www.python.org"})
        alias = created.json()["alias"]

        response = client.get(f"/{alias}", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://www.python.org/"

    def test_redirect_unknown_alias(self, client: TestClient):
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 404

    def test_redirect_unknown_alias_to_frontend(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(settings, "not_found_redirect_url", "http://localhost:5173/404")
        response = client.get("/nonexistent", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "http://localhost:5173/404"


class TestManageAliases:

    def test_get_unknown_alias(self, client: TestClient):
        assert client.get("/api/v1/aliases/nonexistent").status_code == 404

    def test_rename(self, client: TestClient):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://example.com"}, headers=OWNER)
        alias = created.json()["alias"]

        response = client.put(f"/api/v1/aliases/{alias}", json={"slug": "renamed"}, headers=OWNER)
        assert response.status_code == 200
        assert response.json()["alias"] == "renamed"

        assert client.get(f"/{alias}", follow_redirects=False).status_code == 404
        assert client.get("/renamed", follow_redirects=False).status_code == 302

    def test_rename_requires_owner(self, client: TestClient):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://example.com"}, headers=OWNER)
        alias = created.json()["alias"]

        response = client.put(f"/api/v1/aliases/{alias}", json={"slug": "renamed"})
        assert response.status_code == 401

    def test_delete(self, client: TestClient):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://www.python.org"}, headers=OWNER)
        alias = created.json()["alias"]

        response = client.delete(f"/api/v1/aliases/{alias}", headers=OWNER)
        assert response.status_code == 204

        assert client.get(f"/{alias}", follow_redirects=False).status_code == 404

    def test_delete_other_owners_alias(self, client: TestClient):
        created = client.post("/api/v1/aliases/", json={"original_url": "https://www.python.org"}, headers=OWNER)
        alias = created.json()["alias"]

        response = client.delete(f"/api/v1/aliases/{alias}", headers={"X-Owner-Id": "u2"})
        assert response.status_code == 404

    def test_list_and_stats(self, client: TestClient):
        client.post("/api/v1/aliases/", json={"original_url": "https://example.com/a"}, headers=OWNER)
        client.post("/api/v1/aliases/", json={"original_url": "https://example.com/b"}, headers=OWNER)
        client.post("/api/v1/aliases/", json={"original_url": "https://example.com/c"})

        listed = client.get("/api/v1/aliases/", headers=OWNER)
        assert listed.status_code == 200
        assert len(listed.json()) == 2

        stats = client.get("/api/v1/aliases/stats", headers=OWNER)
        assert stats.status_code == 200
        assert stats.json()["total_aliases"] == 2
        assert stats.json()["total_visits"] == 0

    def test_list_requires_owner(self, client: TestClient):
        assert client.get("/api/v1/aliases/").status_code == 401


class TestMeta:

    def test_health(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
