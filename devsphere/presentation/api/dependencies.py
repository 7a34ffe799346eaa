from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ...core.dependencies import get_token_service
from ...domain.errors import DevSphereError, TokenError
from ...domain.models import Role
from ...services.token_service import TokenClaims, TokenKind, TokenService

_bearer_scheme = HTTPBearer(auto_error=False)


def http_error(exc: DevSphereError) -> HTTPException:
    """Map a domain error onto the HTTP response returned to the client."""
    return HTTPException(
        status_code=exc.status_code,
        detail={"message": exc.message, "code": exc.code},
    )


def authenticate(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(_bearer_scheme),
    token_service: TokenService = Depends(get_token_service),
) -> TokenClaims:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "No token provided", "code": "TOKEN_MISSING"},
        )
    if not token_service.is_configured(TokenKind.ACCESS):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "JWT secret not configured", "code": "SERVER_MISCONFIGURED"},
        )
    try:
        identity = token_service.verify(credentials.credentials, TokenKind.ACCESS)
    except TokenError as exc:
        raise http_error(exc) from exc
    request.state.identity = identity
    return identity


def require_role(*allowed: Role) -> Callable[..., TokenClaims]:
    """Build a dependency admitting identities holding at least one of ``allowed``."""

    def _require_role(identity: TokenClaims = Depends(authenticate)) -> TokenClaims:
        if not identity.has_any_role(allowed):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"message": "Forbidden", "code": "FORBIDDEN"},
            )
        return identity

    return _require_role
