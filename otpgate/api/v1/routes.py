"""
API v1 routes.

Defines REST endpoints for signup, email verification, signin,
logout and session inspection.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from otpgate.api.dependencies import (
    get_authentication_service,
    get_optional_session,
    get_registration_service,
    get_session_tokens,
    get_settings,
    require_session,
)
from otpgate.api.models import (
    ErrorResponse,
    MessageResponse,
    SessionResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
    UserResponse,
    VerifyMailRequest,
    VerifyMailResponse,
)
from otpgate.config.settings import Settings
from otpgate.domain.authentication import AuthenticationService
from otpgate.domain.exceptions import (
    AccountNotFound,
    AccountNotVerified,
    BadPassword,
    DeliveryFailed,
    DuplicateEmail,
    DuplicateUsername,
    OtpMismatch,
)
from otpgate.domain.ports import AccountProfile, SessionClaims, SessionTokens
from otpgate.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["v1"])


def _user_response(profile: AccountProfile) -> UserResponse:
    return UserResponse(
        id=profile.id,
        username=profile.username,
        email=profile.email,
        email_verified=profile.email_verified,
        created_at=profile.created_at,
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Username or email already registered"},
        422: {"description": "Validation error"},
        503: {"model": ErrorResponse, "description": "Verification email could not be sent"},
    },
    summary="Register a new account",
    description="Submit username, email and password. "
    "A 6-digit verification code is emailed to the given address.",
)
def signup(
    request_data: SignupRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SignupResponse:
    try:
        email = service.register(request_data.username, request_data.email, request_data.password)
    except DuplicateEmail:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered",
        ) from None
    except DuplicateUsername:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username is already taken",
        ) from None
    except DeliveryFailed:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not send verification email. Please try signing up again.",
        ) from None
    return SignupResponse(message=f"Verification code sent to {email}", email=email)


@router.post(
    "/verify-mail",
    response_model=VerifyMailResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid verification code"},
        404: {"model": ErrorResponse, "description": "No account with this email"},
        422: {"description": "Validation error"},
    },
    summary="Verify email with the emailed code",
)
def verify_mail(
    request_data: VerifyMailRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> VerifyMailResponse:
    try:
        email = service.verify_email(request_data.email, request_data.otp)
    except AccountNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enter the email you signed up with",
        ) from None
    except OtpMismatch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid verification code",
        ) from None
    return VerifyMailResponse(message="Email verified", email=email)


@router.post(
    "/signin",
    response_model=SigninResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid username or password"},
        403: {"model": ErrorResponse, "description": "Email not verified"},
        422: {"description": "Validation error"},
    },
    summary="Sign in and receive a session token",
    description="On success the session token is returned in the body "
    "and set as an httpOnly cookie.",
)
def signin(
    request_data: SigninRequest,
    response: Response,
    service: AuthenticationService = Depends(get_authentication_service),
    tokens: SessionTokens = Depends(get_session_tokens),
    settings: Settings = Depends(get_settings),
) -> SigninResponse:
    try:
        profile = service.authenticate(request_data.username, request_data.password)
    except AccountNotVerified:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Please verify your email before signing in",
        ) from None
    except (AccountNotFound, BadPassword):
        # Same response for both so signin does not confirm which usernames exist
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password",
        ) from None

    token = tokens.issue(profile.id, profile.email)
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.token_ttl_seconds,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return SigninResponse(
        message=f"{profile.username} signed in",
        user=_user_response(profile),
        token=token,
    )


@router.post("/logout", response_model=MessageResponse, summary="Clear the session cookie")
def logout(response: Response, settings: Settings = Depends(get_settings)) -> MessageResponse:
    """
    Clear the session cookie.

    Tokens are not tracked server-side, so a copy of the token held
    elsewhere stays valid until it expires.
    """
    response.delete_cookie(
        key=settings.cookie_name,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return MessageResponse(message="Logged out")


@router.get("/session", response_model=SessionResponse, summary="Report whether the caller is signed in")
def session(
    claims: SessionClaims | None = Depends(get_optional_session),
    service: AuthenticationService = Depends(get_authentication_service),
) -> SessionResponse:
    if claims is None:
        return SessionResponse(is_authenticated=False, user=None)

    try:
        profile = service.get_profile(claims.account_id)
    except Exception:
        # /session never fails; a lookup error reads as "not signed in"
        logger.exception("Session lookup failed for account %s", claims.account_id)
        return SessionResponse(is_authenticated=False, user=None)

    if profile is None:
        return SessionResponse(is_authenticated=False, user=None)

    return SessionResponse(is_authenticated=True, user=_user_response(profile))


@router.get(
    "/me",
    response_model=UserResponse,
    responses={
        401: {"model": ErrorResponse, "description": "No session token"},
        403: {"model": ErrorResponse, "description": "Invalid or expired token"},
    },
    summary="Profile of the signed-in account",
)
def me(
    claims: SessionClaims = Depends(require_session),
    service: AuthenticationService = Depends(get_authentication_service),
) -> UserResponse:
    profile = service.get_profile(claims.account_id)
    if profile is None:
        logger.info("Valid token for missing account %s", claims.account_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return _user_response(profile)
