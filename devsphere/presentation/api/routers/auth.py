"""API router for account registration, login and password recovery."""

from fastapi import APIRouter, Depends, status

from ....application.services.account_service import AccountService, ProfilePatch
from ....core.dependencies import get_account_service
from ....domain.errors import DevSphereError
from ....domain.models import Role
from ....services.token_service import TokenClaims
from ...api.dependencies import authenticate, http_error, require_role
from ...api.schemas.auth import (
    AccountResponse,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    ProfileResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    ResetPasswordRequest,
    UpdateProfileRequest,
    VerifyOtpRequest,
)

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
) -> AccountResponse:
    try:
        account = await accounts.register(
            payload.email, payload.password, payload.firstname, payload.lastname
        )
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return AccountResponse(message="User registered", **account)


@router.post("/login", response_model=LoginResponse)
async def login(
    payload: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
) -> LoginResponse:
    try:
        result = await accounts.login(payload.email, payload.password)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return LoginResponse(message="success", **result)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    payload: RefreshRequest,
    accounts: AccountService = Depends(get_account_service),
) -> RefreshResponse:
    try:
        access_token = await accounts.refresh_access(payload.token)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return RefreshResponse(access_token=access_token)


@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    payload: ForgotPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        message = await accounts.forgot_password(payload.email)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message=message)


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp(
    payload: VerifyOtpRequest,
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        await accounts.verify_otp(payload.email, payload.otp)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="OTP verified successfully")


@router.post("/reset-password", response_model=MessageResponse)
async def reset_password(
    payload: ResetPasswordRequest,
    accounts: AccountService = Depends(get_account_service),
) -> MessageResponse:
    try:
        await accounts.reset_password(payload.email, payload.otp, payload.password)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return MessageResponse(message="Password updated successfully")


@router.post(
    "/admin/register",
    response_model=AccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_admin(
    payload: RegisterRequest,
    accounts: AccountService = Depends(get_account_service),
    _: TokenClaims = Depends(require_role(Role.ADMIN)),
) -> AccountResponse:
    try:
        account = await accounts.register_admin(
            payload.email, payload.password, payload.firstname, payload.lastname
        )
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return AccountResponse(message="Admin registered", **account)


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    identity: TokenClaims = Depends(authenticate),
    accounts: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    try:
        profile = await accounts.get_profile(identity)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return ProfileResponse(**profile)


@router.put("/me", response_model=ProfileResponse)
async def update_me(
    payload: UpdateProfileRequest,
    identity: TokenClaims = Depends(authenticate),
    accounts: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    patch = ProfilePatch(
        email=payload.email,
        firstname=payload.firstname,
        lastname=payload.lastname,
        current_password=payload.current_password,
        new_password=payload.new_password,
    )
    try:
        profile = await accounts.update_profile(identity, patch)
    except DevSphereError as exc:
        raise http_error(exc) from exc
    return ProfileResponse(message="updated", **profile)
