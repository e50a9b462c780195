"""Employer room-request routes — delegates to room_request_service for the lifecycle."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from wlp.database import get_db
from wlp.models.room_request import RoomRequestStatus
from wlp.schemas.room_request import ExtensionCreate, ExtensionOut, RoomRequestCreate, RoomRequestOut
from wlp.security.guard import RequireEmployer
from wlp.security.principal import Principal
from wlp.services import room_request_service

router = APIRouter()


@router.post("/requests", status_code=status.HTTP_201_CREATED)
def create_room_request(
    payload: RoomRequestCreate,
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    """Create a room request for the current user's employer."""
    rr = room_request_service.create_room_request(db, principal, payload)
    return {"id": rr.request_id, "status": rr.status.value}


@router.get("/requests")
def list_room_requests(
    status_filter: Optional[RoomRequestStatus] = Query(None, alias="status"),
    limit: int = Query(room_request_service.DEFAULT_LIST_LIMIT, ge=1, le=200),
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    items = room_request_service.list_room_requests(db, principal, status_filter, limit)
    return {"items": [RoomRequestOut.model_validate(rr) for rr in items]}


@router.get("/requests/{request_id}")
def get_room_request(request_id: str, principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    rr = room_request_service.get_room_request(db, principal, request_id)
    return {"request": RoomRequestOut.model_validate(rr)}


@router.post("/requests/{request_id}/submit")
def submit_room_request(request_id: str, principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    """Submit a draft request to the front desk."""
    rr = room_request_service.submit(db, principal, request_id)
    return {"ok": True, "status": rr.status.value}


@router.patch("/requests/{request_id}/cancel")
def cancel_room_request(request_id: str, principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    """Cancel a request that is still waiting for a decision."""
    rr = room_request_service.cancel(db, principal, request_id)
    return {"ok": True, "status": rr.status.value}


@router.post("/requests/{request_id}/extend", status_code=status.HTTP_201_CREATED)
def extend_room_request(
    request_id: str,
    payload: ExtensionCreate,
    principal: Principal = RequireEmployer,
    db: Session = Depends(get_db),
):
    """Ask for an extension of at most one week."""
    ext = room_request_service.create_extension(db, principal, request_id, payload)
    return {"id": ext.extension_id, "status": ext.status.value}


@router.get("/requests/{request_id}/extensions")
def list_request_extensions(request_id: str, principal: Principal = RequireEmployer, db: Session = Depends(get_db)):
    items = room_request_service.list_extensions_for_request(db, principal, request_id)
    return {"items": [ExtensionOut.model_validate(ext) for ext in items]}
