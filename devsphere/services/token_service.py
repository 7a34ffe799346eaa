"""
JWT access and refresh token issuance and verification.

Access and refresh tokens are signed with distinct secrets and carry a
``type`` claim so one kind can never be replayed as the other. The
algorithm is pinned to HS256.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, FrozenSet, Optional

import jwt

from ..domain.errors import ConfigurationError, TokenError
from ..domain.models import Role, User, serialize_roles

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "iat", "exp", "type"]

Clock = Callable[[], datetime]


class TokenKind(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenClaims:
    subject: str
    roles: FrozenSet[Role]
    issued_at: datetime
    expires_at: datetime
    kind: TokenKind

    def has_any_role(self, allowed) -> bool:
        return bool(self.roles & frozenset(allowed))


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenService:
    """Signs and verifies bearer tokens for authenticated users."""

    def __init__(
        self,
        access_secret: str,
        refresh_secret: str,
        *,
        access_exp_minutes: int = 30,
        refresh_exp_days: int = 7,
        clock: Optional[Clock] = None,
    ) -> None:
        access_secret = (access_secret or "").strip()
        refresh_secret = (refresh_secret or "").strip()
        if access_secret and access_secret == refresh_secret:
            raise RuntimeError("JWT_SECRET and JWT_REFRESH_SECRET must be different.")
        if not access_secret:
            logger.warning("JWT_SECRET is not configured; protected routes will fail.")
        if not refresh_secret:
            logger.warning("JWT_REFRESH_SECRET is not configured; token refresh will fail.")
        self._secrets: Dict[TokenKind, str] = {
            TokenKind.ACCESS: access_secret,
            TokenKind.REFRESH: refresh_secret,
        }
        self._lifetimes: Dict[TokenKind, timedelta] = {
            TokenKind.ACCESS: timedelta(minutes=access_exp_minutes),
            TokenKind.REFRESH: timedelta(days=refresh_exp_days),
        }
        self._clock = clock or _utcnow

    def is_configured(self, kind: TokenKind) -> bool:
        return bool(self._secrets[kind])

    def issue_access(self, user: User) -> str:
        return self._issue(user, TokenKind.ACCESS)

    def issue_refresh(self, user: User) -> str:
        return self._issue(user, TokenKind.REFRESH)

    def verify(self, token: str, kind: TokenKind) -> TokenClaims:
        """
        Decode ``token`` as ``kind``.

        Raises:
            TokenError: ``TOKEN_EXPIRED``, ``TOKEN_BAD_SIGNATURE`` or ``TOKEN_INVALID``
            ConfigurationError: If no secret is configured for ``kind``
        """
        secret = self._secret_for(kind)
        try:
            payload = jwt.decode(
                token,
                secret,
                algorithms=[ALGORITHM],
                # Time claims are checked below against the service clock.
                options={"require": _REQUIRED_CLAIMS, "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise TokenError("Invalid signature", code=TokenError.BAD_SIGNATURE) from exc
        except jwt.InvalidTokenError as exc:
            raise TokenError("Invalid token", code=TokenError.INVALID) from exc

        if payload.get("type") != kind.value:
            raise TokenError("Invalid token", code=TokenError.INVALID)
        issued_at, expires_at = payload["iat"], payload["exp"]
        if not all(
            isinstance(value, (int, float)) and not isinstance(value, bool)
            for value in (issued_at, expires_at)
        ):
            raise TokenError("Invalid token", code=TokenError.INVALID)
        if expires_at <= self._clock().timestamp():
            raise TokenError("Token expired", code=TokenError.EXPIRED)
        try:
            roles = frozenset(Role(item) for item in payload.get("roles") or [])
        except (TypeError, ValueError) as exc:
            raise TokenError("Invalid token", code=TokenError.INVALID) from exc

        return TokenClaims(
            subject=str(payload["sub"]),
            roles=roles,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc),
            kind=kind,
        )

    def _issue(self, user: User, kind: TokenKind) -> str:
        secret = self._secret_for(kind)
        now = self._clock()
        payload = {
            "sub": str(user.id),
            "roles": serialize_roles(user.roles),
            "type": kind.value,
            "iat": now,
            "exp": now + self._lifetimes[kind],
        }
        return jwt.encode(payload, secret, algorithm=ALGORITHM)

    def _secret_for(self, kind: TokenKind) -> str:
        secret = self._secrets[kind]
        if not secret:
            raise ConfigurationError("JWT secret not configured")
        return secret
