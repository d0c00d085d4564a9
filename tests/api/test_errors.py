"""Error responses carry a detail and the request id."""

import pytest

pytestmark = pytest.mark.api


async def test_unknown_route_includes_request_id(client):
    response = await client.get("/api/v1/nonexistent-endpoint")

    assert response.status_code == 404
    data = response.json()
    assert data["detail"] == "Not Found"
    assert data["request_id"]
    assert response.headers["X-Request-ID"] == data["request_id"]


async def test_missing_bearer_is_401(client):
    response = await client.get("/api/v1/projects")

    assert response.status_code == 401
    data = response.json()
    assert data["detail"] == "Missing or invalid authorization header"
    assert data["request_id"]


async def test_invalid_token_is_401(client):
    response = await client.get(
        "/api/v1/projects", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


async def test_validation_error_is_400_with_field(client, signed_in, project_service):
    response = await client.post("/api/v1/projects", json={"name": "Depot"})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("location: ")
    project_service.create_project.assert_not_awaited()


async def test_malformed_json_is_400(client, signed_in, project_service):
    response = await client.post(
        "/api/v1/projects",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid JSON body"


async def test_wrong_method_is_405(client):
    response = await client.put("/api/v1/tasks")

    assert response.status_code == 405
    assert "request_id" in response.json()


async def test_bare_options_is_204(client):
    response = await client.options("/api/v1/projects")

    assert response.status_code == 204
    assert response.content == b""


async def test_security_headers(client):
    response = await client.get("/api/v1/nonexistent-endpoint")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
