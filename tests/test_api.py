"""
Tests for the HTTP API.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from character_catalog.characters import CharacterCatalog, InMemoryCharacterStore
from character_catalog.core.config import (
    AssetStorageConfig,
    Config,
    DatabaseConfig,
    Environment,
)
from character_catalog.core.exceptions import (
    AssetNotFoundError,
    AssetTooLargeError,
    CatalogError,
    CharacterNotFoundError,
    ConfigurationError,
    InvalidSortFieldError,
    StorageError,
)
from character_catalog.web import create_app
from character_catalog.web.error_handlers import error_status

API = "/api/v1/characters"


@pytest.fixture
def client(test_config: Config, catalog: CharacterCatalog) -> TestClient:
    return TestClient(create_app(test_config, catalog))


@pytest.fixture
def metrics_client(temp_dir: Path, catalog: CharacterCatalog) -> TestClient:
    """Client for an app with request metrics enabled."""
    config = Config(
        environment=Environment.DEVELOPMENT,
        database=DatabaseConfig(path=temp_dir / "catalog.db"),
        storage=AssetStorageConfig(upload_dir=temp_dir / "uploads"),
    )
    return TestClient(create_app(config, catalog))


def create(client: TestClient, **payload) -> dict:
    response = client.post(API, json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def assert_error_body(response, status_code: int, error: str) -> None:
    assert response.status_code == status_code
    body = response.json()
    assert set(body) == {"timestamp", "error", "message"}
    assert body["error"] == error


class TestCharacterEndpoints:
    """Test character CRUD over HTTP."""

    def test_create_applies_defaults(self, client: TestClient) -> None:
        body = create(client, name="Villager")

        assert body["type"] == "NPC"
        assert body["base_health"] == 100
        assert body["base_speed"] == 10
        assert "is_deleted" not in body
        assert body["created_at"] is not None

    def test_create_hero_and_villain(self, client: TestClient) -> None:
        hero = client.post(f"{API}/hero", json={"name": "Aria", "type": "VILLAIN"})
        villain = client.post(f"{API}/villain", json={"name": "Morg"})

        assert hero.status_code == 201
        assert hero.json()["type"] == "HERO"
        assert villain.json()["type"] == "VILLAIN"

    def test_create_validation_error(self, client: TestClient) -> None:
        """Malformed bodies are rejected by request validation."""
        assert client.post(API, json={"description": "no name"}).status_code == 422
        assert client.post(API, json={"name": "x" * 51}).status_code == 422

    def test_list_and_get(self, client: TestClient) -> None:
        aria = create(client, name="Aria")
        create(client, name="Bram")

        listed = client.get(API)
        assert [c["name"] for c in listed.json()] == ["Aria", "Bram"]

        fetched = client.get(f"{API}/{aria['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Aria"

    def test_get_missing(self, client: TestClient) -> None:
        response = client.get(f"{API}/404")
        assert_error_body(response, 404, "Resource not found")
        assert response.json()["message"] == "Character with id 404 not found"

    def test_paginated(self, client: TestClient) -> None:
        for i in range(12):
            create(client, name=f"C{i:02d}", base_attack=i)

        response = client.get(
            f"{API}/paginated",
            params={"page": 0, "sort_by": "baseAttack", "sort_direction": "desc"},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["size"] == 10
        assert body["total_elements"] == 12
        assert body["total_pages"] == 2
        assert body["first"] is True
        assert body["last"] is False
        assert body["items"][0]["name"] == "C11"

    def test_paginated_bad_input(self, client: TestClient) -> None:
        assert_error_body(
            client.get(f"{API}/paginated", params={"page": -1}), 400, "Invalid request"
        )
        assert_error_body(
            client.get(f"{API}/paginated", params={"sort_by": "secret"}),
            400,
            "Invalid request",
        )

    def test_search(self, client: TestClient) -> None:
        thorn = create(client, name="Thorn", type="HERO", base_attack=20)
        create(client, name="Thornix", type="VILLAIN", base_attack=80)
        zed = create(client, name="Zed", type="HERO", base_attack=50)
        client.delete(f"{API}/{zed['id']}")

        response = client.get(
            f"{API}/search", params={"search_term": "thorn", "type": "hero"}
        )

        body = response.json()
        assert response.status_code == 200
        assert [c["id"] for c in body["items"]] == [thorn["id"]]
        assert body["size"] == 12

    def test_search_stat_bounds(self, client: TestClient) -> None:
        create(client, name="Weak", base_attack=5)
        create(client, name="Strong", base_attack=60)

        response = client.get(
            f"{API}/search", params={"min_base_attack": 10, "max_base_attack": 100}
        )
        assert [c["name"] for c in response.json()["items"]] == ["Strong"]

        inverted = client.get(
            f"{API}/search", params={"min_base_attack": 50, "max_base_attack": 40}
        )
        assert inverted.json()["items"] == []

    def test_update(self, client: TestClient) -> None:
        aria = create(client, name="Aria", description="An elf")

        response = client.put(
            f"{API}/{aria['id']}",
            json={"base_magic": 80, "id": 999, "is_deleted": True},
        )

        body = response.json()
        assert response.status_code == 200
        assert body["id"] == aria["id"]
        assert body["base_magic"] == 80
        assert body["description"] == "An elf"
        assert client.get(f"{API}/{aria['id']}").status_code == 200

    def test_update_null_clears_or_rejects(self, client: TestClient) -> None:
        aria = create(client, name="Aria", description="An elf")

        cleared = client.put(f"{API}/{aria['id']}", json={"description": None})
        assert cleared.json()["description"] is None

        rejected = client.put(f"{API}/{aria['id']}", json={"name": None})
        assert_error_body(rejected, 400, "Invalid request")

    def test_soft_and_hard_delete(self, client: TestClient) -> None:
        aria = create(client, name="Aria")
        url = f"{API}/{aria['id']}"

        deleted = client.delete(url)
        assert deleted.status_code == 204
        assert deleted.content == b""
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404

        assert client.delete(f"{url}/permanent").status_code == 204
        assert client.delete(f"{url}/permanent").status_code == 404


class TestSpriteEndpoints:
    """Test sprite upload and static serving."""

    def test_upload_and_serve(self, client: TestClient) -> None:
        aria = create(client, name="Aria")

        response = client.post(
            f"{API}/{aria['id']}/sprite",
            files={"file": ("aria.png", b"\x89PNG-data", "image/png")},
        )

        assert response.status_code == 200
        sprite_path = response.json()["sprite_path"]
        assert sprite_path.startswith("/uploads/")
        assert sprite_path.endswith(".png")

        served = client.get(sprite_path)
        assert served.status_code == 200
        assert served.content == b"\x89PNG-data"

    def test_replacing_removes_previous_file(self, client: TestClient) -> None:
        aria = create(client, name="Aria")
        url = f"{API}/{aria['id']}/sprite"

        first = client.post(url, files={"file": ("a.png", b"one", "image/png")})
        second = client.post(url, files={"file": ("b.png", b"two", "image/png")})

        assert client.get(first.json()["sprite_path"]).status_code == 404
        assert client.get(second.json()["sprite_path"]).content == b"two"

    def test_upload_errors(self, client: TestClient) -> None:
        aria = create(client, name="Aria")
        url = f"{API}/{aria['id']}/sprite"

        assert_error_body(
            client.post(url, files={"file": ("a.png", b"", "image/png")}),
            400,
            "Invalid request",
        )
        assert_error_body(
            client.post(url, files={"file": ("a.png", b"x" * 2048, "image/png")}),
            413,
            "File too large",
        )
        assert_error_body(
            client.post(
                f"{API}/999/sprite", files={"file": ("a.png", b"x", "image/png")}
            ),
            404,
            "Resource not found",
        )


class TestFileEndpoints:
    """Test raw file upload, download and delete."""

    def test_round_trip(self, client: TestClient) -> None:
        uploaded = client.post(
            "/api/v1/files/upload", files={"file": ("map.png", b"tiles", "image/png")}
        )
        assert uploaded.status_code == 200
        name = uploaded.json()["file_name"]
        assert uploaded.json()["file_url"].endswith(f"/api/v1/files/{name}")

        downloaded = client.get(f"/api/v1/files/{name}")
        assert downloaded.status_code == 200
        assert downloaded.content == b"tiles"
        assert downloaded.headers["content-type"] == "image/png"
        assert downloaded.headers["content-disposition"] == f'inline; filename="{name}"'

        assert client.delete(f"/api/v1/files/{name}").json() == {
            "deleted": True,
            "file_name": name,
        }
        assert client.delete(f"/api/v1/files/{name}").json()["deleted"] is False
        assert client.get(f"/api/v1/files/{name}").status_code == 404

    def test_unsafe_name_rejected(self, client: TestClient) -> None:
        response = client.get("/api/v1/files/..secret")
        assert_error_body(response, 400, "Invalid request")


class TestOperationalEndpoints:
    """Test health, metrics, correlation headers and error mapping."""

    def test_health(self, client: TestClient) -> None:
        create(client, name="Aria")
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "components": {"assets": True, "characters": 1, "database": True},
        }

    def test_health_unhealthy(self, test_config: Config) -> None:
        store = MagicMock(spec=InMemoryCharacterStore)
        store.count_visible.side_effect = StorageError("locked")
        asset_store = MagicMock()
        asset_store.health_check.return_value = True
        client = TestClient(create_app(test_config, CharacterCatalog(store, asset_store)))

        response = client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"

    def test_storage_error_maps_to_500(self, test_config: Config) -> None:
        store = MagicMock(spec=InMemoryCharacterStore)
        store.find_all_visible.side_effect = StorageError("database is locked")
        client = TestClient(create_app(test_config, CharacterCatalog(store, MagicMock())))

        assert_error_body(client.get(API), 500, "Storage error")

    def test_metrics_disabled_in_testing(self, client: TestClient) -> None:
        assert client.get("/metrics").status_code == 404

    def test_metrics_enabled(self, metrics_client: TestClient) -> None:
        metrics_client.get(API)

        response = metrics_client.get("/metrics")

        assert response.status_code == 200
        assert "catalog_api_requests_total" in response.text

    def test_correlation_headers(self, client: TestClient) -> None:
        response = client.get(API, headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
        assert response.headers["X-Trace-ID"]

    def test_metric_labels_use_route_templates(
        self, metrics_client: TestClient
    ) -> None:
        """Ids, file names and unknown paths never become label values."""
        client = metrics_client
        aria = create(client, name="Aria")
        client.get(f"{API}/{aria['id']}")
        uploaded = client.post(
            "/api/v1/files/upload", files={"file": ("map.png", b"tiles", "image/png")}
        )
        name = uploaded.json()["file_name"]
        client.get(f"/api/v1/files/{name}")
        client.get(f"/uploads/{name}")
        client.get("/no/such/path")

        text = client.get("/metrics").text

        assert 'endpoint="/api/v1/characters/{character_id}"' in text
        assert 'endpoint="/api/v1/files/{name}"' in text
        assert 'endpoint="/uploads"' in text
        assert 'endpoint="unmatched"' in text
        assert name not in text
        assert "/no/such/path" not in text


class TestErrorStatus:
    """Test the mapping of catalog errors onto HTTP statuses."""

    @pytest.mark.parametrize(
        "error,expected",
        [
            (CharacterNotFoundError(1), (404, "Resource not found")),
            (AssetNotFoundError("a.png"), (404, "Resource not found")),
            (AssetTooLargeError(20, 10), (413, "File too large")),
            (InvalidSortFieldError("power"), (400, "Invalid request")),
            (StorageError("disk gone"), (500, "Storage error")),
            (ConfigurationError("bad"), (500, "Internal server error")),
            (CatalogError("unknown"), (500, "Internal server error")),
        ],
    )
    def test_error_status(self, error: CatalogError, expected: tuple) -> None:
        assert error_status(error) == expected

    def test_handler_uses_error_message(self, client: TestClient) -> None:
        response = client.get(f"{API}/search", params={"sort_by": "power"})
        assert_error_body(response, 400, "Invalid request")
        assert response.json()["message"] == "Cannot sort by unknown field 'power'"
