"""Tests for collaborator failures — the data store and the token signer surface as opaque 500s."""
import jwt
import pytest
from sqlalchemy.exc import OperationalError

from wlp.errors import CollaboratorFailure, format_validation_errors
from wlp.models.user import Role
from wlp.security import tokens
from wlp.security.tokens import SessionTokenService
from wlp.services import credential_store
from tests.conftest import signup, signup_employer


def _boom(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("connection refused"))


class TestDatabaseFailure:
    def test_database_error_is_opaque_500(self, client, monkeypatch):
        signup_employer(client, company=None)
        monkeypatch.setattr(credential_store, "get_user", _boom)
        resp = client.get("/api/me")
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}
        assert "connection refused" not in resp.text


class TestSignerFailure:
    def test_issue_failure_is_collaborator_failure(self, monkeypatch):
        def broken_encode(*args, **kwargs):
            raise jwt.PyJWTError("key unusable")

        monkeypatch.setattr(tokens.jwt, "encode", broken_encode)
        with pytest.raises(CollaboratorFailure) as exc_info:
            SessionTokenService("secret-0123456789abcdef-0123456789").issue("u1", Role.EMPLOYER)
        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Internal server error"

    def test_login_with_broken_signer_is_500(self, client, make_client, monkeypatch):
        signup(client, "signer@acme.example.com")

        def broken_encode(*args, **kwargs):
            raise jwt.PyJWTError("key unusable")

        monkeypatch.setattr(tokens.jwt, "encode", broken_encode)
        resp = make_client().post("/api/login", json={"email": "signer@acme.example.com", "password": "correct-horse"})
        assert resp.status_code == 500
        assert resp.json() == {"detail": "Internal server error"}
        assert "set-cookie" not in resp.headers


class TestValidationMessages:
    def test_field_and_reason(self):
        errors = [
            {"loc": ("body", "headcount"), "msg": "Input should be greater than or equal to 1"},
            {"loc": ("body",), "msg": "Value error, stay_end must be after stay_start"},
        ]
        assert format_validation_errors(errors) == (
            "headcount: Input should be greater than or equal to 1; stay_end must be after stay_start"
        )

    def test_empty_errors(self):
        assert format_validation_errors([]) == "Invalid payload"
