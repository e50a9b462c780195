"""Admin routes — users, roles, hotels and the audit trail."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.models.event_log import EventLogEntry
from wlp.models.hotel import Hotel
from wlp.models.user import User
from wlp.schemas.admin import EventLogOut, HotelCreate, HotelOut, RoleUpdate
from wlp.schemas.auth import UserOut
from wlp.security.guard import RequireAdmin
from wlp.security.principal import Principal
from wlp.services import credential_store, dashboard_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/summary")
def admin_summary(principal: Principal = RequireAdmin, db: Session = Depends(get_db)):
    return dashboard_service.admin_summary(db)


@router.get("/users")
def list_users(principal: Principal = RequireAdmin, db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.created_at.desc()).limit(100).all()
    return {"items": [UserOut.model_validate(u) for u in users]}


@router.patch("/users/{user_id}/role")
def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    principal: Principal = RequireAdmin,
    db: Session = Depends(get_db),
):
    """Change a user's role. Takes effect at the user's next login."""
    credential_store.set_role(db, user_id, payload.role)
    return {"ok": True}


@router.post("/hotels", status_code=status.HTTP_201_CREATED)
def create_hotel(payload: HotelCreate, principal: Principal = RequireAdmin, db: Session = Depends(get_db)):
    hotel = Hotel(name=payload.name.strip())
    db.add(hotel)
    db.commit()
    db.refresh(hotel)
    logger.info("Created hotel '%s' (%s)", hotel.name, hotel.hotel_id)
    return {"hotel": HotelOut.model_validate(hotel)}


@router.get("/events")
def list_events(
    limit: int = Query(50, ge=1, le=500),
    principal: Principal = RequireAdmin,
    db: Session = Depends(get_db),
):
    """Most recent audit entries first."""
    entries = db.query(EventLogEntry).order_by(EventLogEntry.ts.desc()).limit(limit).all()
    return {"items": [EventLogOut.model_validate(e) for e in entries]}
