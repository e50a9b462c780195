"""Dashboard summaries for employers, the front desk and admins."""
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wlp.models.event_log import EventLogEntry
from wlp.models.extension_request import ExtensionRequest, ExtensionStatus
from wlp.models.hotel import Hotel
from wlp.models.reservation import Reservation
from wlp.models.room_request import TERMINAL_STATUSES, RoomRequest, RoomRequestStatus
from wlp.models.user import User
from wlp.security.principal import Principal
from wlp.services.credential_store import resolve_employer_id

EXTENSION_DUE_WINDOW = timedelta(days=7)


def _request_row(rr: RoomRequest) -> dict[str, Any]:
    return {
        "id": rr.request_id,
        "hotel_id": rr.hotel_id,
        "stay_start": rr.stay_start.isoformat(),
        "stay_end": rr.stay_end.isoformat(),
        "headcount": rr.headcount,
        "status": rr.status.value,
    }


def employer_summary(
    db: Session, principal: Principal, today: Optional[date] = None, now: Optional[datetime] = None
) -> dict[str, Any]:
    """Active requests, placed workers and extensions due for the principal's employer."""
    today = today or date.today()
    now = now or datetime.now(timezone.utc)
    employer_id = resolve_employer_id(db, principal)
    if not employer_id:
        return {
            "stats": {"activeRequests": 0, "inHouse": 0, "workersInHouse": 0, "extensionsDue": 0},
            "arrivals": [],
            "requests": [],
        }

    active = (
        db.query(RoomRequest)
        .filter(
            RoomRequest.employer_id == employer_id,
            RoomRequest.status.notin_(list(TERMINAL_STATUSES)),
        )
        .order_by(RoomRequest.stay_start)
        .limit(20)
        .all()
    )
    in_house = (
        db.query(func.count(RoomRequest.request_id))
        .filter(RoomRequest.employer_id == employer_id, RoomRequest.status == RoomRequestStatus.CHECKED_IN)
        .scalar()
    )
    extensions_due = (
        db.query(func.count(RoomRequest.request_id))
        .filter(
            RoomRequest.employer_id == employer_id,
            RoomRequest.status.notin_(list(TERMINAL_STATUSES)),
            RoomRequest.stay_end >= today,
            RoomRequest.stay_end <= today + EXTENSION_DUE_WINDOW,
        )
        .scalar()
    )
    workers_in_house = (
        db.query(func.count(Reservation.reservation_id))
        .filter(
            Reservation.employer_id == employer_id,
            Reservation.checkin_ts <= now,
            Reservation.checkout_ts.is_(None),
        )
        .scalar()
    )
    arrivals = (
        db.query(Reservation)
        .filter(Reservation.employer_id == employer_id, Reservation.checkin_ts.isnot(None))
        .order_by(Reservation.checkin_ts)
        .limit(10)
        .all()
    )
    return {
        "stats": {
            "activeRequests": len(active),
            "inHouse": in_house or 0,
            "workersInHouse": workers_in_house or 0,
            "extensionsDue": extensions_due or 0,
        },
        "arrivals": [
            {
                "worker": r.worker_name,
                "date": r.checkin_ts.isoformat(),
                "hotel": r.hotel.name if r.hotel else None,
            }
            for r in arrivals
        ],
        "requests": [_request_row(rr) for rr in active],
    }


def frontdesk_summary(db: Session, today: Optional[date] = None) -> dict[str, Any]:
    """Pending queue and occupancy counts across all employers."""
    today = today or date.today()

    def count_requests(*criteria) -> int:
        return db.query(func.count(RoomRequest.request_id)).filter(*criteria).scalar() or 0

    pending = (
        db.query(RoomRequest)
        .filter(RoomRequest.status == RoomRequestStatus.SUBMITTED)
        .order_by(RoomRequest.created_at)
        .limit(20)
        .all()
    )
    pending_extensions = (
        db.query(func.count(ExtensionRequest.extension_id))
        .filter(ExtensionRequest.status == ExtensionStatus.SUBMITTED)
        .scalar()
    )
    arrivals = (
        db.query(RoomRequest)
        .filter(
            RoomRequest.stay_start == today,
            RoomRequest.status.in_([RoomRequestStatus.ACCEPTED, RoomRequestStatus.ASSIGNED]),
        )
        .all()
    )
    return {
        "stats": {
            "pendingRequests": count_requests(RoomRequest.status == RoomRequestStatus.SUBMITTED),
            "arrivalsToday": len(arrivals),
            "inHouse": count_requests(RoomRequest.status == RoomRequestStatus.CHECKED_IN),
            "pendingExtensions": pending_extensions or 0,
        },
        "arrivals": [_request_row(rr) for rr in arrivals],
        "pending": [_request_row(rr) for rr in pending],
    }


def admin_summary(db: Session) -> dict[str, Any]:
    users = db.query(func.count(User.user_id)).scalar() or 0
    hotels = db.query(func.count(Hotel.hotel_id)).scalar() or 0
    recent = db.query(EventLogEntry).order_by(EventLogEntry.ts.desc()).limit(10).all()
    return {
        "stats": {"users": users, "hotels": hotels},
        "recentEvents": [
            {"obj_type": e.obj_type, "obj_id": e.obj_id, "action": e.action, "actor_id": e.actor_id}
            for e in recent
        ],
    }
