from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from ...domain.errors import (
    EmailExists,
    InvalidCredentials,
    InvalidRefreshToken,
    NotFound,
    TokenError,
    ValidationFailed,
)
from ...domain.models import Role, User, serialize_roles
from ...domain.ports.persistence import NotificationSender, UserRepository
from ...services.otp_manager import OtpManager
from ...services.password_hasher import PasswordHasher
from ...services.token_service import TokenClaims, TokenKind, TokenService

logger = logging.getLogger(__name__)

MIN_NEW_PASSWORD_LENGTH = 8
FORGOT_PASSWORD_ACK = "If an account exists for this email, an OTP has been sent."


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass(slots=True)
class ProfilePatch:
    email: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class AccountService:
    """Registration, login, token refresh, profile and password-reset use cases."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenService,
        otp: OtpManager,
        notifier: NotificationSender,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._otp = otp
        self._notifier = notifier
        self._dummy_hash = hasher.hash("dummy-password")

    # ------------------------------------------------------------------
    async def ensure_default_admin(self, email: Optional[str], password: Optional[str]) -> Optional[User]:
        if not email or not password:
            return None
        email_clean = normalize_email(email)
        existing = await asyncio.to_thread(self._users.find_by_email, email_clean)
        if existing:
            return existing
        logger.info("Creating default administrator account for %s", email_clean)
        return await self._create(email_clean, password, [Role.ADMIN])

    async def register(
        self,
        email: str,
        password: str,
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
    ) -> Dict[str, Any]:
        user = await self._create(normalize_email(email), password, [Role.USER], firstname, lastname)
        logger.info("User %s registered", user.id)
        return public_projection(user)

    async def register_admin(
        self,
        email: str,
        password: str,
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
    ) -> Dict[str, Any]:
        user = await self._create(normalize_email(email), password, [Role.ADMIN], firstname, lastname)
        logger.info("Administrator %s registered", user.id)
        return public_projection(user)

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        user = await asyncio.to_thread(self._users.find_by_email, normalize_email(email))
        if user is None:
            # Spend the same bcrypt work as a real check.
            await asyncio.to_thread(self._hasher.verify, password, self._dummy_hash)
            raise InvalidCredentials()
        if not await asyncio.to_thread(self._hasher.verify, password, user.password_hash):
            raise InvalidCredentials()

        return {
            **public_projection(user),
            "access_token": self._tokens.issue_access(user),
            "refresh_token": self._tokens.issue_refresh(user),
        }

    async def refresh_access(self, refresh_token: str) -> str:
        try:
            claims = self._tokens.verify(refresh_token, TokenKind.REFRESH)
        except TokenError as exc:
            raise InvalidRefreshToken("Invalid or expired token") from exc
        user = await asyncio.to_thread(self._users.find_by_id, claims.subject)
        if user is None:
            raise InvalidRefreshToken()
        return self._tokens.issue_access(user)

    # Profile ----------------------------------------------------------
    async def get_profile(self, identity: TokenClaims) -> Dict[str, Any]:
        return profile_projection(await self._load(identity))

    async def update_profile(self, identity: TokenClaims, patch: ProfilePatch) -> Dict[str, Any]:
        user = await self._load(identity)

        if patch.email:
            email_clean = normalize_email(patch.email)
            if email_clean != user.email:
                other = await asyncio.to_thread(self._users.find_by_email, email_clean)
                if other is not None and other.id != user.id:
                    raise EmailExists()
                user.email = email_clean
        if patch.firstname:
            user.firstname = patch.firstname
        if patch.lastname:
            user.lastname = patch.lastname

        if patch.new_password:
            if not patch.current_password:
                raise ValidationFailed("Current password is required")
            matches = await asyncio.to_thread(
                self._hasher.verify, patch.current_password, user.password_hash
            )
            if not matches:
                raise ValidationFailed("Current password is incorrect")
            if len(patch.new_password) < MIN_NEW_PASSWORD_LENGTH:
                raise ValidationFailed(
                    f"New password must be at least {MIN_NEW_PASSWORD_LENGTH} characters"
                )
            user.password_hash = await self._hash(patch.new_password)

        await asyncio.to_thread(self._users.save, user)
        return profile_projection(user)

    # Password reset ---------------------------------------------------
    async def forgot_password(self, email: str) -> str:
        user = await asyncio.to_thread(self._users.find_by_email, normalize_email(email))
        if user is None:
            return FORGOT_PASSWORD_ACK

        otp = await self._otp.issue(user)
        try:
            await asyncio.to_thread(
                self._notifier.send_password_reset_otp, user.email, otp, self._otp.ttl_minutes
            )
        except Exception:
            logger.exception("Failed to send password reset email to user %s", user.id)
        return FORGOT_PASSWORD_ACK

    async def verify_otp(self, email: str, otp: str) -> None:
        await self._otp.verify(normalize_email(email), otp)

    async def reset_password(self, email: str, otp: str, new_password: str) -> None:
        user = await self._otp.verify(normalize_email(email), otp)
        user.password_hash = await self._hash(new_password)
        self._otp.consume(user)
        await asyncio.to_thread(self._users.save, user)
        logger.info("Password reset completed for user %s", user.id)

    # Helpers ----------------------------------------------------------
    async def _create(
        self,
        email: str,
        password: str,
        roles: Iterable[Role],
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
    ) -> User:
        if not email:
            raise ValidationFailed("Email is required")
        if not password:
            raise ValidationFailed("Password is required")
        if await asyncio.to_thread(self._users.find_by_email, email):
            raise EmailExists()
        password_hash = await self._hash(password)
        return await asyncio.to_thread(
            self._users.create, email, password_hash, list(roles), firstname, lastname
        )

    async def _load(self, identity: TokenClaims) -> User:
        user = await asyncio.to_thread(self._users.find_by_id, identity.subject)
        if user is None:
            raise NotFound("User not found")
        return user

    async def _hash(self, password: str) -> str:
        try:
            return await asyncio.to_thread(self._hasher.hash, password)
        except ValueError as exc:
            raise ValidationFailed(str(exc)) from exc


def public_projection(user: User) -> Dict[str, Any]:
    return {"email": user.email, "roles": serialize_roles(user.roles)}


def profile_projection(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "firstname": user.firstname,
        "lastname": user.lastname,
        "roles": serialize_roles(user.roles),
    }
