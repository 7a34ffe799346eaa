"""One-time codes for password resets."""

from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from ..domain.errors import InvalidOrExpiredOtp
from ..domain.models import ResetChallenge, User
from ..domain.ports.persistence import UserRepository

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


def hash_otp(otp: str) -> str:
    return hashlib.sha256(otp.encode("utf-8")).hexdigest()


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class OtpManager:
    """Issues, verifies and consumes the reset challenge stored on a user."""

    def __init__(
        self,
        users: UserRepository,
        *,
        ttl_minutes: int = 10,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._users = users
        self._ttl = timedelta(minutes=ttl_minutes)
        self._clock = clock or _utcnow

    @property
    def ttl_minutes(self) -> int:
        return int(self._ttl.total_seconds() // 60)

    async def issue(self, user: User) -> str:
        """Attach a fresh challenge to ``user``, persist it and return the plaintext code."""
        otp = str(OTP_MIN + secrets.randbelow(OTP_MAX - OTP_MIN + 1))
        user.reset_challenge = ResetChallenge(
            token_hash=hash_otp(otp),
            expires_at=self._clock() + self._ttl,
        )
        await asyncio.to_thread(self._users.save, user)
        logger.info("Password reset code issued for user %s", user.id)
        return otp

    async def verify(self, email: str, otp: str) -> User:
        user = await asyncio.to_thread(self._users.find_by_email, email)
        if user is None or not self.matches(user, otp):
            raise InvalidOrExpiredOtp()
        return user

    def matches(self, user: User, otp: str) -> bool:
        challenge = user.reset_challenge
        if challenge is None or not challenge.is_active(self._clock()):
            return False
        return hmac.compare_digest(challenge.token_hash, hash_otp(otp.strip()))

    @staticmethod
    def consume(user: User) -> None:
        user.reset_challenge = None
