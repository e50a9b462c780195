"""Front-desk routes — decisions and occupancy tracking for all employers' requests."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.models.extension_request import ExtensionStatus
from wlp.models.room_request import RoomRequestStatus
from wlp.schemas.room_request import DecisionRequest, ExtensionOut, RoomRequestOut, TransitionNote
from wlp.schemas.worker import ReservationCreate, ReservationOut
from wlp.security.guard import RequireStaff
from wlp.security.principal import Principal
from wlp.services import dashboard_service, reservation_service, room_request_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/summary")
def frontdesk_summary(principal: Principal = RequireStaff, db: Session = Depends(get_db)):
    return dashboard_service.frontdesk_summary(db)


@router.get("/requests")
def list_requests(
    status_filter: Optional[RoomRequestStatus] = Query(None, alias="status"),
    limit: int = Query(room_request_service.DEFAULT_LIST_LIMIT, ge=1, le=200),
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    items = room_request_service.list_room_requests(db, principal, status_filter, limit)
    return {"items": [RoomRequestOut.model_validate(rr) for rr in items]}


@router.get("/requests/{request_id}")
def get_request(request_id: str, principal: Principal = RequireStaff, db: Session = Depends(get_db)):
    rr = room_request_service.get_room_request(db, principal, request_id)
    return {"request": RoomRequestOut.model_validate(rr)}


@router.post("/requests/{request_id}/decision")
def decide_request(
    request_id: str,
    payload: DecisionRequest,
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    """Accept or reject a submitted request (only while it is still SUBMITTED)."""
    rr = room_request_service.decide(db, principal, request_id, payload.decision, payload.note)
    return {"ok": True, "status": rr.status.value}


def _apply(action: str, request_id: str, payload: Optional[TransitionNote], principal: Principal, db: Session):
    note = payload.note if payload else None
    rr = room_request_service.transition(db, principal, request_id, action, note)
    return {"ok": True, "status": rr.status.value}


@router.post("/requests/{request_id}/assign")
def assign_request(
    request_id: str,
    payload: Optional[TransitionNote] = None,
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    return _apply("ASSIGN", request_id, payload, principal, db)


@router.post("/requests/{request_id}/check-in")
def check_in_request(
    request_id: str,
    payload: Optional[TransitionNote] = None,
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    return _apply("CHECK_IN", request_id, payload, principal, db)


@router.post("/requests/{request_id}/check-out")
def check_out_request(
    request_id: str,
    payload: Optional[TransitionNote] = None,
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    return _apply("CHECK_OUT", request_id, payload, principal, db)


@router.get("/extensions")
def list_extensions(
    status_filter: Optional[ExtensionStatus] = Query(None, alias="status"),
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    items = room_request_service.list_extensions(db, principal, status_filter)
    return {"items": [ExtensionOut.model_validate(ext) for ext in items]}


@router.post("/extensions/{extension_id}/decision")
def decide_extension(
    extension_id: str,
    payload: DecisionRequest,
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    """Accept or reject a submitted extension. The parent request's dates are not changed."""
    ext = room_request_service.decide_extension(db, principal, extension_id, payload.decision)
    return {"ok": True, "status": ext.status.value}


@router.get("/reservations")
def list_reservations(
    request_id: Optional[str] = Query(None, max_length=36),
    principal: Principal = RequireStaff,
    db: Session = Depends(get_db),
):
    items = reservation_service.list_reservations(db, principal, request_id)
    return {"items": [ReservationOut.model_validate(r) for r in items]}


@router.post("/reservations", status_code=status.HTTP_201_CREATED)
def create_reservation(payload: ReservationCreate, principal: Principal = RequireStaff, db: Session = Depends(get_db)):
    """Place a worker in a room for a room request."""
    resv = reservation_service.create_reservation(db, principal, payload)
    return {"reservation": ReservationOut.model_validate(resv)}


@router.post("/reservations/{reservation_id}/check-out")
def check_out_reservation(reservation_id: str, principal: Principal = RequireStaff, db: Session = Depends(get_db)):
    resv = reservation_service.check_out(db, principal, reservation_id)
    return {"reservation": ReservationOut.model_validate(resv)}
