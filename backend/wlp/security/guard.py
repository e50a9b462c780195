"""Authorization guard dependencies.

``require_authenticated`` and ``require_role`` are applied per route with
``Depends``. A missing principal is always 401 and is checked before the
role, which is 403.
"""
from typing import Optional

from fastapi import Depends, Request

from wlp.errors import AuthenticationFailure, AuthorizationFailure
from wlp.models.user import Role
from wlp.security.principal import Principal
from wlp.security.tokens import SessionTokenService


def get_principal(request: Request) -> Optional[Principal]:
    return getattr(request.state, "principal", None)


def get_token_service(request: Request) -> SessionTokenService:
    return request.app.state.token_service


def require_authenticated(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
    if principal is None:
        raise AuthenticationFailure()
    return principal


def require_role(*allowed: Role):
    """Build a dependency that admits only principals holding one of ``allowed``."""
    allowed_roles = frozenset(Role(r) for r in allowed)

    def _guard(principal: Optional[Principal] = Depends(get_principal)) -> Principal:
        if principal is None:
            raise AuthenticationFailure()
        if principal.role not in allowed_roles:
            raise AuthorizationFailure()
        return principal

    return _guard


RequireEmployer = Depends(require_role(Role.EMPLOYER))
RequireStaff = Depends(require_role(Role.FRONTDESK, Role.ADMIN))
RequireAdmin = Depends(require_role(Role.ADMIN))
