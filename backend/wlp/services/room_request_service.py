"""Room request lifecycle engine — enforces the status machine and tenant scoping.

Responsibilities:
- Legal transitions only, each gated by the actor's role
- Tenant isolation: employers read and write only their own employer's requests
  (404 for a missing request, 403 for a foreign one)
- Conditional updates: a transition only applies while the row still holds the
  expected source status, so of two racing decisions exactly one wins and the
  other gets a 409
- Extension requests: a narrower submit/decide machine under a room request
- Audit entries written after every committed transition
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from wlp.errors import AuthorizationFailure, NotFound, StateConflict
from wlp.models.extension_request import ExtensionRequest, ExtensionStatus
from wlp.models.hotel import Hotel
from wlp.models.room_request import RoomRequest, RoomRequestStatus
from wlp.models.user import Role
from wlp.schemas.room_request import ExtensionCreate, RoomRequestCreate
from wlp.security.principal import STAFF_ROLES, Principal
from wlp.services import audit
from wlp.services.credential_store import require_employer_id, resolve_employer_id

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50

EMPLOYER_ONLY = frozenset({Role.EMPLOYER})


@dataclass(frozen=True)
class Transition:
    action: str
    source: RoomRequestStatus
    target: RoomRequestStatus
    roles: frozenset
    owner_only: bool


TRANSITIONS: dict[str, Transition] = {
    t.action: t
    for t in (
        Transition("SUBMIT", RoomRequestStatus.DRAFT, RoomRequestStatus.SUBMITTED, EMPLOYER_ONLY, True),
        Transition("CANCEL", RoomRequestStatus.SUBMITTED, RoomRequestStatus.CANCELED, EMPLOYER_ONLY, True),
        Transition("ACCEPT", RoomRequestStatus.SUBMITTED, RoomRequestStatus.ACCEPTED, STAFF_ROLES, False),
        Transition("REJECT", RoomRequestStatus.SUBMITTED, RoomRequestStatus.REJECTED, STAFF_ROLES, False),
        Transition("ASSIGN", RoomRequestStatus.ACCEPTED, RoomRequestStatus.ASSIGNED, STAFF_ROLES, False),
        Transition("CHECK_IN", RoomRequestStatus.ASSIGNED, RoomRequestStatus.CHECKED_IN, STAFF_ROLES, False),
        Transition("CHECK_OUT", RoomRequestStatus.CHECKED_IN, RoomRequestStatus.CHECKED_OUT, STAFF_ROLES, False),
    )
}

DECISIONS = {"ACCEPT": ExtensionStatus.ACCEPTED, "REJECT": ExtensionStatus.REJECTED}


def _load_request(db: Session, request_id: str) -> RoomRequest:
    rr = db.query(RoomRequest).filter(RoomRequest.request_id == request_id).first()
    if not rr:
        raise NotFound("Room request not found")
    return rr


def _check_access(db: Session, principal: Principal, rr: RoomRequest) -> None:
    """Employers may only touch their own employer's requests; staff see all."""
    if principal.role == Role.EMPLOYER:
        if rr.employer_id != resolve_employer_id(db, principal):
            raise AuthorizationFailure("Room request belongs to another employer")
    elif principal.role not in STAFF_ROLES:
        raise AuthorizationFailure()


def _load_accessible(db: Session, principal: Principal, request_id: str) -> RoomRequest:
    rr = _load_request(db, request_id)
    _check_access(db, principal, rr)
    return rr


def _load_owned_for_write(db: Session, principal: Principal, request_id: str) -> RoomRequest:
    """Employer writes need a linked employer (400) before the request is fetched (404) or owned (403)."""
    employer_id = require_employer_id(db, principal)
    rr = _load_request(db, request_id)
    if rr.employer_id != employer_id:
        raise AuthorizationFailure("Room request belongs to another employer")
    return rr


# ── Reads ──────────────────────────────────────────────────────────


def get_room_request(db: Session, principal: Principal, request_id: str) -> RoomRequest:
    """Fetch one request; 404 if it does not exist, 403 if it is another tenant's."""
    return _load_accessible(db, principal, request_id)


def list_room_requests(
    db: Session,
    principal: Principal,
    status_filter: Optional[RoomRequestStatus] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[RoomRequest]:
    """List requests visible to the principal, newest first.

    An employer without a linked employer simply has no requests.
    """
    query = db.query(RoomRequest)
    if principal.role == Role.EMPLOYER:
        employer_id = resolve_employer_id(db, principal)
        if not employer_id:
            return []
        query = query.filter(RoomRequest.employer_id == employer_id)
    elif principal.role not in STAFF_ROLES:
        raise AuthorizationFailure()
    if status_filter:
        query = query.filter(RoomRequest.status == status_filter)
    return query.order_by(RoomRequest.created_at.desc()).limit(limit).all()


# ── Writes ─────────────────────────────────────────────────────────


def create_room_request(db: Session, principal: Principal, payload: RoomRequestCreate) -> RoomRequest:
    """Create a request for the principal's employer, submitted or as a draft."""
    if principal.role != Role.EMPLOYER:
        raise AuthorizationFailure()
    employer_id = require_employer_id(db, principal)

    hotel = db.query(Hotel).filter(Hotel.hotel_id == payload.hotel_id).first()
    if not hotel:
        raise NotFound("Hotel not found")

    initial = RoomRequestStatus.DRAFT if payload.draft else RoomRequestStatus.SUBMITTED
    rr = RoomRequest(
        employer_id=employer_id,
        hotel_id=payload.hotel_id,
        stay_start=payload.stay_start,
        stay_end=payload.stay_end,
        headcount=payload.headcount,
        room_type_mix=payload.room_type_mix.model_dump(),
        notes=payload.notes,
        status=initial,
    )
    db.add(rr)
    db.commit()
    db.refresh(rr)
    logger.info("Room request %s created as %s for employer %s", rr.request_id, initial.value, employer_id)

    audit.record(
        db, "RoomRequest", rr.request_id,
        "SUBMIT" if initial == RoomRequestStatus.SUBMITTED else "DRAFT",
        principal,
        {"headcount": payload.headcount},
    )
    return rr


def transition(
    db: Session,
    principal: Principal,
    request_id: str,
    action: str,
    note: Optional[str] = None,
) -> RoomRequest:
    """Apply one lifecycle transition.

    Raises ``AuthorizationFailure`` if the role may not perform ``action`` or the
    request belongs to another tenant, ``NotFound`` if the request does not
    exist and ``StateConflict`` if it is not in the transition's source status
    at the moment of the update.
    """
    t = TRANSITIONS[action]
    if principal.role not in t.roles:
        raise AuthorizationFailure()

    if t.owner_only:
        rr = _load_owned_for_write(db, principal, request_id)
    else:
        rr = _load_request(db, request_id)

    values = {"status": t.target}
    if note is not None:
        values["decision_note"] = note
    result = db.execute(
        update(RoomRequest)
        .where(RoomRequest.request_id == request_id, RoomRequest.status == t.source)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        current = db.query(RoomRequest.status).filter(RoomRequest.request_id == request_id).scalar()
        if current is None:
            raise NotFound("Room request not found")
        raise StateConflict(f"Room request is {current.value}; {action} requires {t.source.value}")
    db.commit()
    db.refresh(rr)
    logger.info("Room request %s: %s -> %s by %s", request_id, t.source.value, t.target.value, principal.subject_id)

    audit.record(db, "RoomRequest", request_id, action, principal, {"note": note} if note else None)
    return rr


def submit(db: Session, principal: Principal, request_id: str) -> RoomRequest:
    return transition(db, principal, request_id, "SUBMIT")


def cancel(db: Session, principal: Principal, request_id: str) -> RoomRequest:
    return transition(db, principal, request_id, "CANCEL")


def decide(db: Session, principal: Principal, request_id: str, decision: str, note: Optional[str] = None) -> RoomRequest:
    """Accept or reject a submitted request. Not tenant-scoped: any staff member may decide."""
    if decision not in DECISIONS:
        raise ValueError(f"Unknown decision {decision!r}")
    return transition(db, principal, request_id, decision, note)


# ── Extensions ─────────────────────────────────────────────────────


def create_extension(db: Session, principal: Principal, request_id: str, payload: ExtensionCreate) -> ExtensionRequest:
    """Submit an extension against an owned request, whatever the request's status."""
    if principal.role != Role.EMPLOYER:
        raise AuthorizationFailure()
    _load_owned_for_write(db, principal, request_id)

    ext = ExtensionRequest(
        request_id=request_id,
        week_start=payload.week_start,
        week_end=payload.week_end,
        scope=payload.scope,
        status=ExtensionStatus.SUBMITTED,
    )
    db.add(ext)
    db.commit()
    db.refresh(ext)
    logger.info("Extension %s submitted for room request %s", ext.extension_id, request_id)

    audit.record(db, "Extension", ext.extension_id, "SUBMIT", principal, {"request_id": request_id})
    return ext


def list_extensions_for_request(db: Session, principal: Principal, request_id: str) -> list[ExtensionRequest]:
    _load_accessible(db, principal, request_id)
    return (
        db.query(ExtensionRequest)
        .filter(ExtensionRequest.request_id == request_id)
        .order_by(ExtensionRequest.week_start)
        .all()
    )


def list_extensions(
    db: Session,
    principal: Principal,
    status_filter: Optional[ExtensionStatus] = None,
    limit: int = DEFAULT_LIST_LIMIT,
) -> list[ExtensionRequest]:
    if principal.role not in STAFF_ROLES:
        raise AuthorizationFailure()
    query = db.query(ExtensionRequest)
    if status_filter:
        query = query.filter(ExtensionRequest.status == status_filter)
    return query.order_by(ExtensionRequest.created_at.desc()).limit(limit).all()


def decide_extension(
    db: Session,
    principal: Principal,
    extension_id: str,
    decision: str,
) -> ExtensionRequest:
    """Accept or reject a submitted extension.

    Only the extension's own status changes; the parent request's stay_end is
    left as it was.
    """
    if principal.role not in STAFF_ROLES:
        raise AuthorizationFailure()
    target = DECISIONS[decision]

    result = db.execute(
        update(ExtensionRequest)
        .where(
            ExtensionRequest.extension_id == extension_id,
            ExtensionRequest.status == ExtensionStatus.SUBMITTED,
        )
        .values(status=target, decided_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        current = (
            db.query(ExtensionRequest.status)
            .filter(ExtensionRequest.extension_id == extension_id)
            .scalar()
        )
        if current is None:
            raise NotFound("Extension request not found")
        raise StateConflict(f"Extension request is already {current.value}")
    db.commit()
    ext = db.query(ExtensionRequest).filter(ExtensionRequest.extension_id == extension_id).one()
    logger.info("Extension %s %s by %s", extension_id, target.value, principal.subject_id)

    audit.record(db, "Extension", extension_id, decision, principal, {"request_id": ext.request_id})
    return ext
