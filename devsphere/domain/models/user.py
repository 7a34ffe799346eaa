"""User domain model for account management and authorization."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


def serialize_roles(roles: Iterable[Role]) -> List[str]:
    """Return role tags in declaration order, e.g. ``["USER", "ADMIN"]``."""
    present = set(roles)
    return [role.value for role in Role if role in present]


@dataclass(frozen=True, slots=True)
class ResetChallenge:
    """Pending password reset: hash of the issued code and when it stops being valid."""

    token_hash: str
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(slots=True)
class User:
    """
    User entity for both regular and administrator accounts.

    Attributes:
        id: Opaque unique identifier, assigned by the store
        email: Normalised login email (unique)
        password_hash: bcrypt hash of the current password
        roles: Non-empty set of role tags
        firstname: Optional given name
        lastname: Optional family name
        reset_challenge: Pending password reset, if any
        created_at: Account creation timestamp
        updated_at: Last update timestamp
    """

    id: str
    email: str
    password_hash: str
    roles: FrozenSet[Role]
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    reset_challenge: Optional[ResetChallenge] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    def __post_init__(self) -> None:
        if not self.roles:
            raise ValueError("A user must hold at least one role.")

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email} roles={serialize_roles(self.roles)}>"
