"""Worker roster — per-employer worker list, occupancy buckets and CSV bulk import.

Every read and write is scoped through ``resolve_employer_id``. A worker's
status is derived from their most recent reservation:

- no reservation                         → Unassigned
- checked in, not yet checked out        → In-house
- check-in in the future                 → Upcoming
- checked out                            → Checked-out
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from wlp.models.hotel import Hotel
from wlp.models.reservation import Reservation
from wlp.models.worker import Worker, WorkerStatus
from wlp.schemas.worker import WorkerIn
from wlp.security.principal import Principal
from wlp.services import audit
from wlp.services.credential_store import require_employer_id, resolve_employer_id

logger = logging.getLogger(__name__)

CHECKED_OUT_WINDOW = timedelta(days=30)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(ts: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if ts is None or ts.tzinfo is not None:
        return ts
    return ts.replace(tzinfo=timezone.utc)


def reservation_status(resv: Reservation, now: datetime) -> Optional[WorkerStatus]:
    checkin = as_utc(resv.checkin_ts)
    if resv.checkout_ts is None and checkin is not None and checkin <= now:
        return WorkerStatus.IN_HOUSE
    if checkin is not None and checkin > now:
        return WorkerStatus.UPCOMING
    if resv.checkout_ts is not None:
        return WorkerStatus.CHECKED_OUT
    return None


def _empty_roster() -> dict[str, Any]:
    return {
        "hotels": [],
        "buckets": {"byHotel": [], "unassigned": 0, "upcoming": 0, "checkedOut30d": 0},
        "workers": [],
    }


def _latest_by_worker(reservations: list[Reservation]) -> dict[str, Reservation]:
    """Most recent reservation per worker, keyed by worker id (or name for unlinked rows)."""
    latest: dict[str, Reservation] = {}
    floor = datetime.min.replace(tzinfo=timezone.utc)
    for resv in reservations:
        key = resv.worker_id or (resv.worker_name or "").strip()
        if not key:
            continue
        prev = latest.get(key)
        if prev is None or (as_utc(resv.checkin_ts) or floor) > (as_utc(prev.checkin_ts) or floor):
            latest[key] = resv
    return latest


def roster(
    db: Session,
    principal: Principal,
    q: Optional[str] = None,
    hotel_id: Optional[str] = None,
    status: Optional[str] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Workers of the principal's employer with their current placement.

    Filters: ``q`` matches name or phone (case-insensitive), ``hotel_id`` the
    hotel of the latest reservation, ``status`` the derived status, and
    ``start``/``end`` the check-in date (inclusive).
    """
    now = now or _utcnow()
    employer_id = resolve_employer_id(db, principal)
    if not employer_id:
        return _empty_roster()

    workers = db.query(Worker).filter(Worker.employer_id == employer_id).order_by(Worker.name).all()
    hotels = db.query(Hotel).order_by(Hotel.name).all()
    reservations = (
        db.query(Reservation)
        .filter(Reservation.employer_id == employer_id)
        .order_by(Reservation.checkin_ts.desc())
        .all()
    )

    in_house_by_hotel: dict[str, int] = {}
    upcoming = 0
    checked_out_30d = 0
    for resv in reservations:
        state = reservation_status(resv, now)
        if state == WorkerStatus.IN_HOUSE:
            in_house_by_hotel[resv.hotel_id] = in_house_by_hotel.get(resv.hotel_id, 0) + 1
        elif state == WorkerStatus.UPCOMING:
            upcoming += 1
        elif state == WorkerStatus.CHECKED_OUT and as_utc(resv.checkout_ts) >= now - CHECKED_OUT_WINDOW:
            checked_out_30d += 1

    by_hotel = [{"id": h.hotel_id, "name": h.name, "count": in_house_by_hotel.get(h.hotel_id, 0)} for h in hotels]

    latest = _latest_by_worker(reservations)
    rows = []
    for w in workers:
        match = latest.get(w.worker_id) or latest.get(w.name.strip())
        state = reservation_status(match, now) if match else None
        rows.append({
            "id": w.worker_id,
            "name": w.name,
            "phone": w.phone,
            "status": (state or WorkerStatus.UNASSIGNED).value,
            "hotel": match.hotel.name if match and match.hotel else None,
            "hotel_id": match.hotel_id if match else None,
            "room_no": match.room_no if match else None,
            "checkin_ts": as_utc(match.checkin_ts) if match else None,
            "checkout_ts": as_utc(match.checkout_ts) if match else None,
            "gov_id_type": w.gov_id_type,
            "gov_id_last4": w.gov_id_last4,
            "notes": w.notes,
        })

    if q:
        needle = q.strip().lower()
        rows = [r for r in rows if needle in r["name"].lower() or needle in (r["phone"] or "").lower()]
    if hotel_id:
        rows = [r for r in rows if r["hotel_id"] == hotel_id]
    if status:
        rows = [r for r in rows if r["status"].lower() == status.strip().lower()]
    if start or end:
        lo, hi = start or date.min, end or date.max
        rows = [r for r in rows if r["checkin_ts"] and lo <= r["checkin_ts"].date() <= hi]

    return {
        "hotels": by_hotel,
        "buckets": {
            "byHotel": by_hotel,
            "unassigned": sum(1 for r in rows if r["status"] == WorkerStatus.UNASSIGNED.value),
            "upcoming": upcoming,
            "checkedOut30d": checked_out_30d,
        },
        "workers": rows,
    }


def import_workers(db: Session, principal: Principal, items: list[WorkerIn]) -> int:
    """Upsert workers for the principal's employer.

    Rows with a phone number update the existing worker holding that phone;
    rows without one update a phoneless worker of the same name. Everything
    else is inserted. The whole batch commits or fails together.
    """
    employer_id = require_employer_id(db, principal)

    for item in items:
        query = db.query(Worker).filter(Worker.employer_id == employer_id)
        if item.phone:
            query = query.filter(Worker.phone == item.phone)
        else:
            query = query.filter(Worker.phone.is_(None), func.lower(Worker.name) == item.name.lower())
        worker = query.first()
        if worker is None:
            worker = Worker(employer_id=employer_id, phone=item.phone)
            db.add(worker)
        worker.name = item.name
        worker.notes = item.notes
        worker.gov_id_type = item.gov_id_type
        worker.gov_id_last4 = item.gov_id_last4
        # later rows in the same batch must see earlier ones
        db.flush()

    db.commit()
    logger.info("Imported %d workers for employer %s", len(items), employer_id)
    audit.record(db, "Worker", None, "IMPORT", principal, {"count": len(items)})
    return len(items)
