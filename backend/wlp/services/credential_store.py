"""Credential store — user lookup, password checks, role and employer linkage.

Also the single place that resolves a principal's tenant (employer id);
every employer-scoped read and write goes through ``resolve_employer_id``.
"""
import logging
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wlp.errors import NotFound, StateConflict, ValidationFailure
from wlp.models.employer import Employer
from wlp.models.user import Role, User
from wlp.security.passwords import hash_password, verify_password
from wlp.security.principal import Principal

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both failure paths cost one bcrypt check
_DUMMY_HASH: Optional[str] = None


def _dummy_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = hash_password("wlp-timing-equaliser")
    return _DUMMY_HASH


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()


def get_user(db: Session, user_id: str) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise NotFound("User not found")
    return user


def create_user(db: Session, name: str, email: str, password: str, role: Role = Role.EMPLOYER) -> User:
    """Insert a user. A duplicate email (case-insensitive) is a 409."""
    if find_user_by_email(db, email):
        raise StateConflict("Email already in use")

    user = User(
        name=name.strip(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race against a concurrent signup for the same email
        db.rollback()
        raise StateConflict("Email already in use")
    db.refresh(user)
    logger.info("Created user %s with role %s", user.user_id, user.role.value)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user when the email/password pair matches, else ``None``."""
    user = find_user_by_email(db, email)
    if user is None:
        verify_password(password, _dummy_hash())
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def change_password(db: Session, user_id: str, current_password: str, new_password: str) -> None:
    user = get_user(db, user_id)
    if not verify_password(current_password, user.password_hash):
        raise ValidationFailure("currentPassword: current password is incorrect")
    user.password_hash = hash_password(new_password)
    db.commit()
    logger.info("Password changed for user %s", user_id)


def set_role(db: Session, user_id: str, role: Role) -> User:
    user = get_user(db, user_id)
    user.role = role
    db.commit()
    db.refresh(user)
    logger.info("User %s role set to %s", user_id, role.value)
    return user


def resolve_employer_id(db: Session, principal: Principal) -> Optional[str]:
    """Return the employer linked to the principal's user, or ``None``."""
    return (
        db.query(User.employer_id)
        .filter(User.user_id == principal.subject_id)
        .scalar()
    )


def require_employer_id(db: Session, principal: Principal) -> str:
    employer_id = resolve_employer_id(db, principal)
    if not employer_id:
        raise ValidationFailure("no employer")
    return employer_id


def get_linked_employer(db: Session, principal: Principal) -> Optional[Employer]:
    employer_id = resolve_employer_id(db, principal)
    if not employer_id:
        return None
    return db.query(Employer).filter(Employer.employer_id == employer_id).first()


def create_and_link_employer(db: Session, principal: Principal, name: str, notes: Optional[str]) -> Employer:
    """Create an employer and link it to the principal's user.

    The link is write-once: the user row is only updated while its
    ``employer_id`` is still empty, so a second (or racing) call is a 409.
    """
    if resolve_employer_id(db, principal):
        raise StateConflict("Employer already exists for this user")

    employer = Employer(name=name.strip(), notes=notes)
    db.add(employer)
    db.flush()

    result = db.execute(
        update(User)
        .where(User.user_id == principal.subject_id, User.employer_id.is_(None))
        .values(employer_id=employer.employer_id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        raise StateConflict("Employer already exists for this user")
    db.commit()
    db.refresh(employer)
    logger.info("Created employer %s and linked user %s", employer.employer_id, principal.subject_id)
    return employer


def update_linked_employer(db: Session, principal: Principal, name: str, notes: Optional[str]) -> Employer:
    employer = get_linked_employer(db, principal)
    if employer is None:
        raise ValidationFailure("no employer linked to this user")
    employer.name = name.strip()
    employer.notes = notes
    db.commit()
    db.refresh(employer)
    logger.info("Updated employer %s", employer.employer_id)
    return employer
