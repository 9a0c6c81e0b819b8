"""Generated API documentation and the root redirect."""

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


def test_root_redirects_to_docs(client: TestClient):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/api-docs"


def test_swagger_ui_is_served(client: TestClient):
    response = client.get("/api-docs")

    assert response.status_code == 200
    assert "swagger-ui" in response.text


def test_openapi_metadata(client: TestClient):
    schema = client.get("/openapi.json").json()

    assert schema["info"]["title"] == "API Libros"
    assert schema["info"]["version"] == "1.0.0"
    assert schema["info"]["license"]["name"] == "MIT"
    assert schema["servers"][0]["url"] == "http://localhost:8083"


def test_openapi_documents_libro_operations(client: TestClient):
    paths = client.get("/openapi.json").json()["paths"]

    assert set(paths["/libro"]) == {"get", "post"}
    assert set(paths["/libro/{libro_id}"]) == {"get", "put", "delete"}
    assert "404" in paths["/libro/{libro_id}"]["get"]["responses"]
    assert "/" not in paths


def test_cors_preflight_allows_configured_methods(client: TestClient):
    response = client.options(
        "/libro",
        headers={
            "Origin": "https://frontend.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert "POST" in response.headers["access-control-allow-methods"]
