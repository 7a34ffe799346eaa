"""Error taxonomy shared by the account and quiz use cases."""

from typing import Optional


class DevSphereError(Exception):
    """Base error; carries the HTTP status and machine code it maps to."""

    status_code = 500
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, code: Optional[str] = None) -> None:
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationFailed(DevSphereError):
    """Missing or malformed input, weak passwords."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class EmailExists(ValidationFailed):
    """Duplicate email; a conflict reported with the validation status."""

    code = "EMAIL_EXISTS"
    default_message = "Email exists"


class InvalidOrExpiredOtp(ValidationFailed):
    code = "INVALID_OR_EXPIRED_OTP"
    default_message = "Invalid or expired OTP"


class AuthenticationFailure(DevSphereError):
    status_code = 401
    code = "UNAUTHORIZED"
    default_message = "Unauthorized"


class InvalidCredentials(AuthenticationFailure):
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid credentials"


class TokenError(AuthenticationFailure):
    """Bearer token rejected by the verifier."""

    EXPIRED = "TOKEN_EXPIRED"
    BAD_SIGNATURE = "TOKEN_BAD_SIGNATURE"
    INVALID = "TOKEN_INVALID"

    code = INVALID
    default_message = "Invalid token"


class Forbidden(DevSphereError):
    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden"


class InvalidRefreshToken(Forbidden):
    code = "INVALID_REFRESH_TOKEN"
    default_message = "Invalid refresh token"


class NotFound(DevSphereError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Not found"


class ConfigurationError(DevSphereError):
    """Server misconfiguration, e.g. an empty signing secret."""

    code = "SERVER_MISCONFIGURED"
    default_message = "Server misconfigured"


class GenerationError(DevSphereError):
    code = "GENERATION_FAILED"
    default_message = "Question generation failed"


class NotificationError(DevSphereError):
    """Outbound notification could not be delivered. Logged, never returned to clients."""

    code = "NOTIFICATION_FAILED"
    default_message = "Notification delivery failed"
