"""HTTP-level tests for the user directory endpoints.

The app runs against in-memory SQLite and a stub resolver, so every request
goes through routing, validation, enrichment, persistence and error mapping.
"""

from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine

from src.geodir.api.http.app import create_app
from src.geodir.api.http.app_data import ApplicationDependencies
from src.geodir.core.exceptions import ProviderUnavailableError, TimezoneNotFoundError
from src.geodir.core.services import DbSessionService
from tests.fixtures.services import StubLocationResolver


def create(client: TestClient, name="Ana", zipcode="10001") -> dict:
    response = client.post("/users", json={"name": name, "zipcode": zipcode})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateUser:
    def test_create_enriches_location(self, client: TestClient):
        response = client.post("/users", json={"name": "Ana", "zipcode": "10001"})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "Ana"
        assert body["zipcode"] == "10001"
        assert body["latitude"] == 40.75
        assert body["longitude"] == -73.99
        assert body["timezone"] == "America/New_York"
        assert body["id"]

        listed = client.get("/users").json()
        assert [user["id"] for user in listed] == [body["id"]]

    def test_client_supplied_location_is_ignored(self, client: TestClient):
        response = client.post(
            "/users",
            json={"name": "Ana", "zipcode": "10001", "latitude": 0, "timezone": "UTC"},
        )

        assert response.status_code == 201
        assert response.json()["latitude"] == 40.75
        assert response.json()["timezone"] == "America/New_York"

    @pytest.mark.parametrize(
        ("payload", "message"),
        [
            ({}, "Name and zipcode are required."),
            ({"name": "", "zipcode": ""}, "Name and zipcode are required."),
            ({"zipcode": "10001"}, "Name is required."),
            ({"name": "Ana"}, "Zipcode is required."),
            ({"name": "Ana", "zipcode": "1234"}, "Zipcode format is not valid."),
            ({"name": "Ana", "zipcode": "12345-678"}, "Zipcode format is not valid."),
            ({"name": "Ana", "zipcode": "abcde"}, "Zipcode format is not valid."),
        ],
    )
    def test_validation_errors(
        self,
        client: TestClient,
        stub_resolver: StubLocationResolver,
        payload: dict,
        message: str,
    ):
        response = client.post("/users", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": message}
        assert stub_resolver.calls == []
        assert client.get("/users").json() == []

    def test_malformed_body(self, client: TestClient, stub_resolver: StubLocationResolver):
        response = client.post(
            "/users",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid request body")
        assert stub_resolver.calls == []

    def test_wrong_field_type(self, client: TestClient):
        response = client.post("/users", json={"name": ["Ana"], "zipcode": "10001"})

        assert response.status_code == 400
        assert "name" in response.json()["error"]

    @pytest.mark.parametrize(
        "error",
        [
            TimezoneNotFoundError("10001"),
            ProviderUnavailableError("10001", "provider timed out"),
        ],
    )
    def test_resolution_failure(
        self, client: TestClient, stub_resolver: StubLocationResolver, error: Exception
    ):
        stub_resolver.error = error

        response = client.post("/users", json={"name": "Ana", "zipcode": "10001"})

        assert response.status_code == 500
        assert response.json() == {"error": error.message}
        assert client.get("/users").json() == []

    def test_unknown_zipcode(self, client: TestClient):
        response = client.post("/users", json={"name": "Ana", "zipcode": "00000"})

        assert response.status_code == 500
        assert "00000" in response.json()["error"]


class TestReadUsers:
    def test_list_empty(self, client: TestClient):
        response = client.get("/users")

        assert response.status_code == 200
        assert response.json() == []

    def test_get_by_id(self, client: TestClient):
        created = create(client)

        response = client.get(f"/users/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    def test_get_missing(self, client: TestClient):
        response = client.get("/users/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestUpdateUser:
    def test_same_zipcode_keeps_location(
        self, client: TestClient, stub_resolver: StubLocationResolver
    ):
        created = create(client)
        stub_resolver.calls.clear()

        response = client.put(
            f"/users/{created['id']}", json={"name": "Ana Maria", "zipcode": "10001"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Ana Maria"
        assert body["latitude"] == created["latitude"]
        assert body["longitude"] == created["longitude"]
        assert body["timezone"] == created["timezone"]
        assert stub_resolver.calls == []

    def test_new_zipcode_resolves_location(
        self, client: TestClient, stub_resolver: StubLocationResolver
    ):
        created = create(client)

        response = client.put(
            f"/users/{created['id']}", json={"name": "Ana", "zipcode": "90210"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["zipcode"] == "90210"
        assert body["latitude"] == 34.0901
        assert body["longitude"] == -118.4065
        assert body["timezone"] == "America/Los_Angeles"
        assert stub_resolver.calls == ["10001", "90210"]
        assert client.get(f"/users/{created['id']}").json() == body

    def test_resolution_failure_keeps_record(
        self, client: TestClient, stub_resolver: StubLocationResolver
    ):
        created = create(client)
        stub_resolver.error = ProviderUnavailableError("90210", "provider timed out")

        response = client.put(
            f"/users/{created['id']}", json={"name": "Renamed", "zipcode": "90210"}
        )

        assert response.status_code == 500
        assert client.get(f"/users/{created['id']}").json() == created

    def test_validation_error(self, client: TestClient):
        created = create(client)

        response = client.put(f"/users/{created['id']}", json={"name": "Ana"})

        assert response.status_code == 400
        assert response.json() == {"error": "Zipcode is required."}
        assert client.get(f"/users/{created['id']}").json() == created

    def test_missing_user(self, client: TestClient, stub_resolver: StubLocationResolver):
        response = client.put(
            "/users/does-not-exist", json={"name": "Ana", "zipcode": "10001"}
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}
        assert stub_resolver.calls == []


class TestDeleteUser:
    def test_delete(self, client: TestClient):
        created = create(client)

        response = client.delete(f"/users/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "User deleted successfully"}
        assert client.get(f"/users/{created['id']}").status_code == 404
        assert client.get("/users").json() == []

    def test_delete_missing(self, client: TestClient):
        response = client.delete("/users/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestRequestHandling:
    def test_request_id_is_generated(self, client: TestClient):
        response = client.get("/users")

        assert response.headers["X-Request-ID"]

    def test_request_id_is_echoed(self, client: TestClient):
        response = client.get("/users/missing", headers={"X-Request-ID": "req-123"})

        assert response.status_code == 404
        assert response.headers["X-Request-ID"] == "req-123"


class TestStoreFailure:
    @pytest.fixture
    def broken_client(
        self, empty_engine: Engine, stub_resolver: StubLocationResolver
    ) -> Generator[TestClient]:
        dependencies = ApplicationDependencies(
            database_service=DbSessionService(engine=empty_engine),
            location_resolver=stub_resolver,
        )
        with TestClient(create_app(dependencies)) as test_client:
            yield test_client

    def test_list_fails(self, broken_client: TestClient):
        response = broken_client.get("/users")

        assert response.status_code == 500
        assert response.json()["error"].startswith("Error during list:")

    def test_create_fails_after_resolution(
        self, broken_client: TestClient, stub_resolver: StubLocationResolver
    ):
        response = broken_client.post("/users", json={"name": "Ana", "zipcode": "10001"})

        assert response.status_code == 500
        assert response.json()["error"].startswith("Error during insert:")
        assert stub_resolver.calls == ["10001"]
