"""Tests for identity middleware and the authorization guard."""
import pytest

from wlp.errors import AuthenticationFailure, AuthorizationFailure
from wlp.main import token_service
from wlp.models.user import Role
from wlp.security.guard import require_authenticated, require_role
from wlp.security.principal import Principal
from tests.conftest import signup_employer, signup_frontdesk


class TestRequireRole:
    """401 for no principal always wins over 403 for a wrong role."""

    def test_no_principal_is_401(self):
        guard = require_role(Role.ADMIN)
        with pytest.raises(AuthenticationFailure):
            guard(None)

    def test_wrong_role_is_403(self):
        guard = require_role(Role.ADMIN)
        with pytest.raises(AuthorizationFailure):
            guard(Principal("u1", Role.EMPLOYER))

    def test_allowed_role_passes_through(self):
        guard = require_role(Role.FRONTDESK, Role.ADMIN)
        principal = Principal("u1", Role.FRONTDESK)
        assert guard(principal) is principal

    def test_require_authenticated(self):
        with pytest.raises(AuthenticationFailure):
            require_authenticated(None)
        principal = Principal("u1", Role.EMPLOYER)
        assert require_authenticated(principal) is principal


class TestGuardOverHttp:
    def test_anonymous_gets_401(self, client):
        resp = client.get("/api/frontdesk/requests")
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Unauthorized"

    def test_employer_on_staff_route_gets_403(self, client):
        signup_employer(client)
        resp = client.get("/api/frontdesk/requests")
        assert resp.status_code == 403

    def test_frontdesk_on_admin_route_gets_403(self, client):
        signup_frontdesk(client)
        assert client.get("/api/admin/users").status_code == 403

    def test_staff_on_employer_route_gets_403(self, client):
        signup_frontdesk(client)
        assert client.get("/api/employer/requests").status_code == 403


class TestIdentityMiddleware:
    def test_invalid_cookie_does_not_block_public_route(self, client):
        client.cookies.set("session", "garbage.token.value")
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_invalid_cookie_is_anonymous_on_protected_route(self, client):
        client.cookies.set("session", "garbage.token.value")
        assert client.get("/api/me").status_code == 401

    def test_valid_cookie_resolves_principal(self, client):
        user = signup_employer(client, company=None)
        assert user["role"] == "EMPLOYER"

    def test_token_for_role_is_honoured_without_db_lookup(self, client):
        """The role in the token is what the guard checks."""
        client.cookies.set("session", token_service.issue("no-such-user", Role.FRONTDESK))
        resp = client.get("/api/frontdesk/requests")
        assert resp.status_code == 200
        assert resp.json() == {"items": []}

    def test_resolve_returns_none_for_missing_token(self):
        from wlp.security.middleware import IdentityMiddleware

        mw = IdentityMiddleware(app=None, token_service=token_service, cookie_name="session")
        assert mw.resolve(None) is None
        assert mw.resolve("") is None
        assert mw.resolve("junk") is None
        assert mw.resolve(token_service.issue("u1", Role.ADMIN)) == Principal("u1", Role.ADMIN)
