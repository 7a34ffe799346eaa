from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ..models import Role, User


class UserRepository(Protocol):
    """Credential store for user accounts. Emails are passed already normalised."""

    def find_by_email(self, email: str) -> Optional[User]:
        ...

    def find_by_id(self, user_id: str) -> Optional[User]:
        ...

    def create(
        self,
        email: str,
        password_hash: str,
        roles: Iterable[Role],
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
    ) -> User:
        """Insert a new account; raises ``EmailExists`` when the email is taken."""
        ...

    def save(self, user: User) -> User:
        """Persist every mutable field of ``user`` in a single statement."""
        ...


class NotificationSender(Protocol):
    """Out-of-band delivery of one-time codes."""

    def send_password_reset_otp(self, to_email: str, otp: str, ttl_minutes: int) -> None:
        ...
