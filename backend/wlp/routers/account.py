"""Self-service account routes."""
import logging
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.schemas.account import PasswordChange, ProfileUpdate
from wlp.schemas.auth import UserOut
from wlp.security.guard import require_authenticated
from wlp.security.principal import Principal
from wlp.services import credential_store

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/account")
def get_account(
    response: Response,
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    response.headers["Cache-Control"] = "no-store"
    user = credential_store.get_user(db, principal.subject_id)
    return {"user": UserOut.model_validate(user)}


@router.put("/account")
def update_account(
    payload: ProfileUpdate,
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    """Rename the current user."""
    user = credential_store.get_user(db, principal.subject_id)
    user.name = payload.name.strip()
    db.commit()
    db.refresh(user)
    logger.info("Updated profile of user %s", user.user_id)
    return {"user": UserOut.model_validate(user)}


@router.put("/account/password")
def change_password(
    payload: PasswordChange,
    principal: Principal = Depends(require_authenticated),
    db: Session = Depends(get_db),
):
    credential_store.change_password(db, principal.subject_id, payload.current_password, payload.new_password)
    return {"ok": True}
