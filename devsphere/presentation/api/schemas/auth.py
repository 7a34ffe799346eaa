"""Pydantic schemas for the account endpoints."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    firstname: Optional[str] = None
    lastname: Optional[str] = None


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    token: str = Field(..., min_length=1)


class ForgotPasswordRequest(CamelModel):
    email: EmailStr


class VerifyOtpRequest(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: EmailStr
    otp: str = Field(..., min_length=1)


class ResetPasswordRequest(CamelModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    email: EmailStr
    otp: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UpdateProfileRequest(CamelModel):
    email: Optional[EmailStr] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class MessageResponse(CamelModel):
    message: str


class AccountResponse(CamelModel):
    message: str
    email: str
    roles: List[str]


class LoginResponse(AccountResponse):
    access_token: str
    refresh_token: str


class RefreshResponse(CamelModel):
    access_token: str


class ProfileResponse(CamelModel):
    message: str = "ok"
    id: str
    email: str
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    roles: List[str]
