"""
API v1 routes.

Defines REST endpoints for registration, email verification, login and
the authenticated profile. Domain errors raised by the service are turned
into responses by the handler in src.api.errors.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_account_service, get_bearer_token
from src.api.models import (
    CodeLookupResponse,
    ErrorResponse,
    LoginRequest,
    LoginResponse,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
    UserProfile,
    VerifyRequest,
    VerifyResponse,
)
from src.config.settings import Settings, get_settings
from src.domain.accounts import AccountService
from src.domain.codes import describe_lifetime

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing required fields"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"model": ErrorResponse, "description": "Request body failed validation"},
    },
    summary="Register a new user",
    description="Create an account and email a 6-digit verification code.",
)
def register(
    request_data: RegisterRequest,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> RegisterResponse:
    """
    Register a new user and send verification code.

    - **name**: Display name
    - **email**: Email address to register
    - **password**: Password
    - **mobile_number**: Optional phone number

    The code itself is only echoed back when EXPOSE_VERIFICATION_CODE is on.
    """
    result = service.register(
        request_data.name,
        request_data.email,
        request_data.password,
        request_data.mobile_number,
    )
    return RegisterResponse(
        message="User registered successfully. Please verify your email.",
        user=UserProfile.from_credential(result.credential),
        note="OTP has been sent to your email. "
        f"It expires in {describe_lifetime(settings.code_ttl_seconds)}.",
        expires_in_seconds=settings.code_ttl_seconds,
        otp=result.code if settings.expose_verification_code else None,
    )


@router.post(
    "/verify",
    response_model=VerifyResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Code expired"},
        404: {"model": ErrorResponse, "description": "Invalid code"},
        422: {"model": ErrorResponse, "description": "Request body failed validation"},
    },
    summary="Verify email with one-time code",
    description="Consume the 6-digit code sent at registration and mark the email verified.",
)
def verify(
    request_data: VerifyRequest,
    service: AccountService = Depends(get_account_service),
) -> VerifyResponse:
    """
    Verify an email address.

    - **email**: Registered email address
    - **otp**: 6-digit verification code from email
    """
    service.verify_code(request_data.email, request_data.otp)
    return VerifyResponse(
        message="Email verified successfully", email=request_data.email.strip().lower()
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        422: {"model": ErrorResponse, "description": "Request body failed validation"},
    },
    summary="Log in",
    description="Exchange email and password for a bearer token valid for one hour.",
)
def login(
    request_data: LoginRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    """Unknown email and wrong password produce the same error."""
    result = service.login(request_data.email, request_data.password)
    return LoginResponse(
        message="Login successful",
        token=result.token,
        user=UserProfile.from_credential(result.credential),
    )


@router.get(
    "/profile",
    response_model=ProfileResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired token"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
    summary="Get the authenticated profile",
)
def profile(
    token: str | None = Depends(get_bearer_token),
    service: AccountService = Depends(get_account_service),
) -> ProfileResponse:
    credential = service.authenticate_and_fetch_profile(token)
    return ProfileResponse(
        message="Profile fetched successfully",
        user=UserProfile.from_credential(credential),
    )


@router.get(
    "/debug/codes/{email}",
    response_model=CodeLookupResponse,
    include_in_schema=False,
)
def latest_code(
    email: str,
    service: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
) -> CodeLookupResponse:
    """Latest issued code for an email; only served when EXPOSE_VERIFICATION_CODE is on."""
    if not settings.expose_verification_code:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")

    record = service.latest_code(email)
    return CodeLookupResponse(
        email=record.email,
        otp=record.code,
        expires_at=record.expires_at,
        expired=record.is_expired(service.clock()),
    )
