"""
API endpoint tests for login and user registration.

Tests cover:
- POST /connexion success and uniform failures
- POST /utilisateurs creation, duplicates and store failures
- GET /utilisateurs listing
- Request ID propagation
"""

from unittest.mock import MagicMock

import pytest

from cardex.core import security
from cardex.core.errors import StoreError
from cardex.core.jwt import decode_token
from cardex.db import get_executor
from cardex.main import app
from cardex.models.user import User

pytestmark = pytest.mark.integration


class TestLoginEndpoint:
    """Tests for POST /connexion."""

    def test_login_success(self, client, sample_user):
        response = client.post("/connexion", json={"pseudo": "kaiba", "mot_de_passe": "testpassword123"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert decode_token(data["token"])["sub"] == str(sample_user.id)

    def test_login_accepts_english_field_names(self, client, sample_user):
        response = client.post("/connexion", json={"username": "kaiba", "password": "testpassword123"})

        assert response.status_code == 200

    def test_login_failures_are_identical(self, client, sample_user):
        """Unknown user and wrong password produce the same response."""
        unknown = client.post("/connexion", json={"pseudo": "pegasus", "mot_de_passe": "testpassword123"})
        wrong = client.post("/connexion", json={"pseudo": "kaiba", "mot_de_passe": "wrong"})

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()
        assert unknown.json()["success"] is False

    def test_login_missing_fields_is_401(self, client, sample_user):
        response = client.post("/connexion", json={})

        assert response.status_code == 401

    def test_login_with_empty_principal_in_store_is_401(self, client, test_session):
        test_session.add(User(id=9, username="", hashed_password=security.get_password_hash("")))
        test_session.commit()

        for body in ({}, {"pseudo": "", "mot_de_passe": ""}):
            response = client.post("/connexion", json=body)
            assert response.status_code == 401
            assert "access_token" not in response.json()

    def test_login_store_failure_is_500(self, client):
        broken = MagicMock()
        broken.fetch_all.side_effect = StoreError("boom")
        app.dependency_overrides[get_executor] = lambda: broken

        response = client.post("/connexion", json={"pseudo": "kaiba", "mot_de_passe": "x"})

        assert response.status_code == 500
        assert "boom" not in response.text


class TestUsersEndpoint:
    """Tests for /utilisateurs."""

    def test_register_user(self, client):
        response = client.post("/utilisateurs", json={"pseudo": "joey", "mot_de_passe": "red-eyes"})

        assert response.status_code == 201
        assert response.json()["success"] is True

        login = client.post("/connexion", json={"pseudo": "joey", "mot_de_passe": "red-eyes"})
        assert login.status_code == 200

    def test_register_duplicate_is_conflict(self, client, sample_user):
        response = client.post("/utilisateurs", json={"pseudo": "kaiba", "mot_de_passe": "other"})

        assert response.status_code == 409

    def test_register_requires_both_fields(self, client):
        response = client.post("/utilisateurs", json={"pseudo": "joey"})

        assert response.status_code == 422

    @pytest.mark.parametrize("body", [
        {"pseudo": "", "mot_de_passe": ""},
        {"pseudo": "", "mot_de_passe": "red-eyes"},
        {"pseudo": "joey", "mot_de_passe": ""},
    ])
    def test_register_rejects_empty_fields(self, client, body):
        response = client.post("/utilisateurs", json=body)

        assert response.status_code == 422
        assert client.get("/utilisateurs").json() == []
        assert client.post("/connexion", json={}).status_code == 401

    def test_register_store_failure_is_500(self, client):
        broken = MagicMock()
        broken.execute.side_effect = StoreError("disk full")
        app.dependency_overrides[get_executor] = lambda: broken

        response = client.post("/utilisateurs", json={"pseudo": "joey", "mot_de_passe": "red-eyes"})

        assert response.status_code == 500
        assert response.json() == {"detail": "Server error"}

    def test_list_users(self, client, sample_user):
        client.post("/utilisateurs", json={"pseudo": "joey", "mot_de_passe": "red-eyes"})

        response = client.get("/utilisateurs")

        assert response.status_code == 200
        assert response.json() == [
            {"id": 1, "pseudo": "kaiba"},
            {"id": 2, "pseudo": "joey"},
        ]


class TestRequestContext:
    """Tests for the request context middleware."""

    def test_generates_request_id(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"].startswith("req_")

    def test_echoes_safe_request_id(self, client):
        response = client.get("/", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_replaces_unsafe_request_id(self, client):
        response = client.get("/", headers={"X-Request-ID": "bad id; with spaces"})

        assert response.headers["X-Request-ID"] != "bad id; with spaces"
