"""Resource handler tests with the storage gateway mocked out."""

from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from libros_api.core.errors import StorageFailure
from libros_api.entities.libro import Libro, LibroData


def _storage_failure(operation: str) -> StorageFailure:
    cause = OperationalError("INSERT", {}, Exception("Can't connect to MySQL server on 'db'"))
    return StorageFailure(operation, cause)


class TestCreateHandler:
    def test_invalid_payload_never_reaches_storage(self, stub_client, fake_gateway: AsyncMock):
        response = stub_client.post("/libro", json={"titulo": "Dune"})

        assert response.status_code == 400
        assert response.json()["fields"] == ["autor", "anio"]
        fake_gateway.create.assert_not_awaited()

    def test_created_libro_is_returned_with_201(self, stub_client, fake_gateway, dune):
        fake_gateway.create.return_value = Libro(id=1, **dune)

        response = stub_client.post("/libro", json=dune)

        assert response.status_code == 201
        assert response.json() == {"id": 1, **dune}
        fake_gateway.create.assert_awaited_once_with(LibroData(**dune))

    def test_storage_failure_is_generic_500(self, stub_client, fake_gateway, dune):
        fake_gateway.create.side_effect = _storage_failure("create")

        response = stub_client.post("/libro", json=dune)

        assert response.status_code == 500
        assert response.json() == {
            "error": "storage_failure",
            "detail": "Internal storage error",
        }
        assert "MySQL" not in response.text

    def test_malformed_json_is_400(self, stub_client, fake_gateway):
        response = stub_client.post(
            "/libro",
            content=b'{"titulo": "Dune",',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_failed"
        fake_gateway.create.assert_not_awaited()


class TestReadHandlers:
    def test_list_returns_array(self, stub_client, fake_gateway, dune):
        fake_gateway.list_all.return_value = [Libro(id=1, **dune)]

        response = stub_client.get("/libro")

        assert response.status_code == 200
        assert response.json() == [{"id": 1, **dune}]

    def test_list_storage_failure(self, stub_client, fake_gateway):
        fake_gateway.list_all.side_effect = _storage_failure("list_all")

        response = stub_client.get("/libro")

        assert response.status_code == 500
        assert response.json()["error"] == "storage_failure"

    def test_get_missing_is_404(self, stub_client, fake_gateway):
        fake_gateway.get_by_id.return_value = None

        response = stub_client.get("/libro/5")

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "Libro 5 not found"}
        fake_gateway.get_by_id.assert_awaited_once_with(5)

    def test_non_integer_id_is_400(self, stub_client, fake_gateway):
        response = stub_client.get("/libro/abc")

        assert response.status_code == 400
        assert response.json()["fields"] == ["libro_id"]
        fake_gateway.get_by_id.assert_not_awaited()


class TestUpdateHandler:
    def test_update_returns_updated_representation(self, stub_client, fake_gateway, dune):
        fake_gateway.update.return_value = 1

        response = stub_client.put("/libro/1", json={"id": 1, **dune, "anio": 1966})

        assert response.status_code == 200
        assert response.json() == {"id": 1, **dune, "anio": 1966}
        fake_gateway.update.assert_awaited_once_with(1, LibroData(**{**dune, "anio": 1966}))

    def test_update_zero_rows_is_404(self, stub_client, fake_gateway, dune):
        fake_gateway.update.return_value = 0

        response = stub_client.put("/libro/9", json=dune)

        assert response.status_code == 404

    def test_update_with_conflicting_body_id_is_400(self, stub_client, fake_gateway, dune):
        response = stub_client.put("/libro/1", json={"id": 2, **dune})

        assert response.status_code == 400
        assert response.json()["fields"] == ["id"]
        fake_gateway.update.assert_not_awaited()

    def test_update_invalid_fields_is_400(self, stub_client, fake_gateway):
        response = stub_client.put("/libro/1", json={"titulo": "", "autor": "X", "anio": "x"})

        assert response.status_code == 400
        assert response.json()["fields"] == ["titulo", "anio"]
        fake_gateway.update.assert_not_awaited()


class TestDeleteHandler:
    def test_delete_confirms(self, stub_client, fake_gateway):
        fake_gateway.delete.return_value = 1

        response = stub_client.delete("/libro/3")

        assert response.status_code == 200
        assert response.json() == {"message": "Libro eliminado", "id": 3}

    def test_delete_missing_is_404(self, stub_client, fake_gateway):
        fake_gateway.delete.return_value = 0

        response = stub_client.delete("/libro/3")

        assert response.status_code == 404

    def test_delete_storage_failure(self, stub_client, fake_gateway):
        fake_gateway.delete.side_effect = _storage_failure("delete")

        response = stub_client.delete("/libro/3")

        assert response.status_code == 500


class TestFrameworkErrors:
    """Routing and body parsing errors use the same error body."""

    def test_undecodable_body_is_400(self, stub_client, fake_gateway):
        response = stub_client.post(
            "/libro",
            content=b'{"titulo": "\xff\xfe", "autor": "Herbert", "anio": 1965}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_failed"
        assert response.json()["fields"] == ["body"]
        fake_gateway.create.assert_not_awaited()

    def test_unsupported_method_is_405(self, stub_client, dune):
        response = stub_client.put("/libro", json=dune)

        assert response.status_code == 405
        assert response.json() == {
            "error": "method_not_allowed",
            "detail": "Method Not Allowed",
        }
        assert "GET" in response.headers["allow"]

    def test_unknown_route_is_404(self, stub_client):
        response = stub_client.get("/libros/1")

        assert response.status_code == 404
        assert response.json() == {"error": "not_found", "detail": "Not Found"}

    def test_id_beyond_64_bits_is_400(self, stub_client, fake_gateway):
        response = stub_client.get("/libro/99999999999999999999")

        assert response.status_code == 400
        assert response.json()["fields"] == ["libro_id"]
        fake_gateway.get_by_id.assert_not_awaited()

    def test_bad_fields_and_conflicting_id_reported_together(self, stub_client, fake_gateway):
        response = stub_client.put(
            "/libro/1", json={"id": 2, "titulo": "", "autor": "X", "anio": 1965}
        )

        assert response.status_code == 400
        assert response.json()["fields"] == ["id", "titulo"]
        fake_gateway.update.assert_not_awaited()
