"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from src.domain.ports import Credential


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    name: str = Field(..., description="Display name")
    email: EmailStr
    password: str = Field(..., description="Account password")
    mobile_number: str | None = Field(default=None, description="Optional phone number")


class UserProfile(BaseModel):
    """Public account fields."""

    user_id: int
    name: str
    email: str
    mobile_number: str | None = None
    is_email_verified: bool

    @classmethod
    def from_credential(cls, credential: Credential) -> "UserProfile":
        return cls(**credential.public_fields())


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    message: str
    user: UserProfile
    note: str
    expires_in_seconds: int
    otp: str | None = Field(
        default=None, description="Verification code; only present in debug deployments"
    )


class VerifyRequest(BaseModel):
    """Request model for email verification."""

    email: EmailStr
    otp: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^\d{6}$",
        description="6-digit verification code",
    )


class VerifyResponse(BaseModel):
    """Response model for successful verification."""

    message: str
    email: str


class LoginRequest(BaseModel):
    """Request model for login."""

    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    """Response model for successful login."""

    message: str
    token: str
    user: UserProfile


class ProfileResponse(BaseModel):
    """Response model for the authenticated profile."""

    message: str
    user: UserProfile


class CodeLookupResponse(BaseModel):
    """Response model for the debug code lookup."""

    email: str
    otp: str
    expires_at: datetime
    expired: bool


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    kind: str
