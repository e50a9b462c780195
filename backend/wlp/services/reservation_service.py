"""Front-desk reservations — places workers into rooms against a room request."""
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from wlp.errors import AuthorizationFailure, NotFound, StateConflict, ValidationFailure
from wlp.models.reservation import Reservation
from wlp.models.room_request import RoomRequest
from wlp.models.worker import Worker
from wlp.schemas.worker import ReservationCreate
from wlp.security.principal import Principal
from wlp.services import audit

logger = logging.getLogger(__name__)


def _require_staff(principal: Principal) -> None:
    if not principal.is_staff:
        raise AuthorizationFailure()


def create_reservation(db: Session, principal: Principal, payload: ReservationCreate) -> Reservation:
    """Place a worker in a room; employer and hotel come from the room request."""
    _require_staff(principal)
    rr = db.query(RoomRequest).filter(RoomRequest.request_id == payload.request_id).first()
    if not rr:
        raise NotFound("Room request not found")

    worker_name = (payload.worker_name or "").strip()
    if payload.worker_id:
        worker = db.query(Worker).filter(Worker.worker_id == payload.worker_id).first()
        if not worker:
            raise NotFound("Worker not found")
        if worker.employer_id != rr.employer_id:
            raise ValidationFailure("worker_id: worker belongs to another employer")
        worker_name = worker_name or worker.name

    resv = Reservation(
        employer_id=rr.employer_id,
        hotel_id=rr.hotel_id,
        request_id=rr.request_id,
        worker_id=payload.worker_id,
        worker_name=worker_name,
        room_no=payload.room_no,
        checkin_ts=payload.checkin_ts,
    )
    db.add(resv)
    db.commit()
    db.refresh(resv)
    logger.info("Reservation %s created for room request %s", resv.reservation_id, rr.request_id)

    audit.record(db, "Reservation", resv.reservation_id, "CREATE", principal, {"request_id": rr.request_id})
    return resv


def check_out(db: Session, principal: Principal, reservation_id: str, at: Optional[datetime] = None) -> Reservation:
    """Stamp the checkout time. A reservation checks out once."""
    _require_staff(principal)
    result = db.execute(
        update(Reservation)
        .where(Reservation.reservation_id == reservation_id, Reservation.checkout_ts.is_(None))
        .values(checkout_ts=at or datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        exists = db.query(Reservation.reservation_id).filter(Reservation.reservation_id == reservation_id).scalar()
        if exists is None:
            raise NotFound("Reservation not found")
        raise StateConflict("Reservation is already checked out")
    db.commit()
    resv = db.query(Reservation).filter(Reservation.reservation_id == reservation_id).one()
    logger.info("Reservation %s checked out by %s", reservation_id, principal.subject_id)

    audit.record(db, "Reservation", reservation_id, "CHECK_OUT", principal)
    return resv


def list_reservations(db: Session, principal: Principal, request_id: Optional[str] = None) -> list[Reservation]:
    _require_staff(principal)
    query = db.query(Reservation)
    if request_id:
        query = query.filter(Reservation.request_id == request_id)
    return query.order_by(Reservation.checkin_ts.desc()).limit(200).all()
