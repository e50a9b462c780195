"""The identity resolved from a verified session token."""
from dataclasses import dataclass

from wlp.models.user import Role

STAFF_ROLES = frozenset({Role.FRONTDESK, Role.ADMIN})


@dataclass(frozen=True)
class Principal:
    subject_id: str
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in STAFF_ROLES
