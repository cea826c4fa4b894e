"""Route tests through the real repository dependency with no reachable database."""

from __future__ import annotations

import psycopg2
import pytest
from fastapi.testclient import TestClient

from services.database_service import create_app


@pytest.fixture
def down_db(fake_db):
    fake_db.is_initialized = False
    fake_db.initialize.side_effect = psycopg2.OperationalError("Connection refused")
    return fake_db


@pytest.fixture
def down_client(service_config, down_db):
    app = create_app(service_config, db=down_db)
    with TestClient(app) as test_client:
        yield test_client


class TestValidationBeforeConnecting:
    def test_bad_email_is_400(self, down_client, down_db):
        down_db.initialize.reset_mock()
        response = down_client.post("/api/users", json={"name": "x", "email": "bad"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid email format"
        down_db.initialize.assert_not_called()

    @pytest.mark.parametrize("method", ["get", "delete"])
    def test_bad_id_is_400(self, down_client, method):
        response = getattr(down_client, method)("/api/users/abc")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid user ID"

    def test_update_without_fields_is_400(self, down_client):
        response = down_client.put("/api/users/1", json={})

        assert response.status_code == 400


class TestDatabaseFailureMessages:
    @pytest.mark.parametrize("method,path,body,message", [
        ("get", "/api/users", None, "Failed to retrieve users"),
        ("post", "/api/users", {"name": "Li Si", "email": "lisi@example.com"}, "Failed to create user"),
        ("get", "/api/users/1", None, "Failed to retrieve user"),
        ("put", "/api/users/1", {"name": "Wang Wu"}, "Failed to update user"),
        ("delete", "/api/users/1", None, "Failed to delete user"),
    ])
    def test_connection_error_is_500_with_verb_message(self, down_client, method, path, body, message):
        kwargs = {"json": body} if body is not None else {}
        response = down_client.request(method.upper(), path, **kwargs)

        assert response.status_code == 500
        assert response.json()["message"] == message
        assert response.json()["error"] == "Connection refused"
