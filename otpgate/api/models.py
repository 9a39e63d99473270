"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Input format rules live here, so the domain only ever sees pre-validated
values.
"""

import re
from datetime import datetime

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


class SignupRequest(BaseModel):
    """Request model for account signup."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=30,
        pattern=USERNAME_PATTERN,
        description="3-30 letters, digits or underscores",
    )
    email: EmailStr
    password: str = Field(
        ...,
        min_length=6,
        max_length=100,
        description="6-100 characters with upper case, lower case and a digit",
    )

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        return value


class SignupResponse(BaseModel):
    """Response model for successful signup."""

    message: str
    email: str


class VerifyMailRequest(BaseModel):
    """Request model for email verification."""

    email: EmailStr
    otp: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("otp", "otpEntered"),
        description="Verification code received by email",
    )


class VerifyMailResponse(BaseModel):
    """Response model for successful verification."""

    message: str
    email: str


class SigninRequest(BaseModel):
    """Request model for signin."""

    username: str = Field(..., min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    password: str = Field(..., min_length=1, max_length=100)


class UserResponse(BaseModel):
    """Public account fields."""

    id: str
    username: str
    email: str
    email_verified: bool
    created_at: datetime


class SigninResponse(BaseModel):
    """Response model for successful signin."""

    message: str
    user: UserResponse
    token: str


class SessionResponse(BaseModel):
    """Response model for GET /auth/session."""

    is_authenticated: bool
    user: UserResponse | None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
