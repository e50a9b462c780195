"""Authentication routes — signup, login, logout and the current user."""
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wlp.config import settings
from wlp.database import get_db
from wlp.errors import AuthenticationFailure, AuthorizationFailure
from wlp.models.user import Role
from wlp.schemas.auth import LoginRequest, SignupRequest, UserOut
from wlp.security.cookies import clear_session_cookie, set_session_cookie
from wlp.security.guard import get_token_service, require_authenticated
from wlp.security.principal import Principal
from wlp.security.tokens import SessionTokenService
from wlp.services import credential_store

logger = logging.getLogger(__name__)
router = APIRouter()

LOGIN_FAILED = "Invalid email or password"


def _invite_code_matches(role: Role, code: Optional[str]) -> bool:
    """Staff roles need an invite code; an unset code disables that role's signup."""
    if role == Role.EMPLOYER:
        return True
    if role == Role.ADMIN:
        accepted = [settings.ADMIN_INVITE_CODE]
    elif role == Role.FRONTDESK:
        accepted = [settings.FRONTDESK_INVITE_CODE, settings.ADMIN_INVITE_CODE]
    else:
        return False
    return bool(code) and any(
        expected and hmac.compare_digest(code.encode("utf-8"), expected.encode("utf-8"))
        for expected in accepted
    )


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
    tokens: SessionTokenService = Depends(get_token_service),
):
    """Create an account and start a session. Staff roles require an invite code."""
    role = payload.role or Role.EMPLOYER
    if not _invite_code_matches(role, payload.admin_code):
        logger.warning("Refused %s signup: invite code missing or wrong", role.value)
        raise AuthorizationFailure("Invite code required for this role")

    user = credential_store.create_user(
        db, name=payload.name, email=payload.email, password=payload.password, role=role
    )
    set_session_cookie(response, tokens.issue(user.user_id, user.role))
    return {"ok": True}


@router.post("/login")
def login(
    payload: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    tokens: SessionTokenService = Depends(get_token_service),
):
    """Start a session. Unknown email and wrong password fail identically."""
    user = credential_store.authenticate(db, payload.email, payload.password)
    if user is None:
        raise AuthenticationFailure(LOGIN_FAILED)
    set_session_cookie(response, tokens.issue(user.user_id, user.role))
    logger.info("User %s logged in", user.user_id)
    return {"ok": True}


@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"ok": True}


@router.get("/me")
def me(principal: Principal = Depends(require_authenticated), db: Session = Depends(get_db)):
    user = credential_store.get_user(db, principal.subject_id)
    return {"user": UserOut.model_validate(user)}
