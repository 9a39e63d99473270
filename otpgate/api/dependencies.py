"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes, plus the
session token dependencies that resolve the caller's identity.
"""

from fastapi import Depends, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from otpgate.adapters.repository.postgres import PostgresAccountRepository
from otpgate.config.settings import Settings
from otpgate.domain.authentication import AuthenticationService
from otpgate.domain.exceptions import TokenError, TokenExpired
from otpgate.domain.passwords import PasswordHasher
from otpgate.domain.ports import EmailSender, SessionClaims, SessionTokens
from otpgate.domain.registration import RegistrationService


def get_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresAccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountRepository(pool)


def get_email_sender(request: Request) -> EmailSender:
    """Get the email sender built at startup (console or SMTP)."""
    return request.app.state.email_sender


def get_session_tokens(request: Request) -> SessionTokens:
    """Get the session token issuer/verifier built at startup."""
    return request.app.state.session_tokens


def get_password_hasher(settings: Settings = Depends(get_settings)) -> PasswordHasher:
    return PasswordHasher(rounds=settings.bcrypt_cost)


def get_registration_service(
    request: Request,
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, email sender and password hasher.
    """
    return RegistrationService(
        repository=get_repository(request),
        email_sender=get_email_sender(request),
        password_hasher=password_hasher,
    )


def get_authentication_service(
    request: Request,
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthenticationService:
    """Create authentication service with injected dependencies."""
    return AuthenticationService(
        repository=get_repository(request),
        password_hasher=password_hasher,
    )


def extract_token(request: Request, settings: Settings = Depends(get_settings)) -> str | None:
    """
    Find a bearer token on the request.

    Checks the session cookie first, then the Authorization header.
    Tokens passed as a ?token= query parameter never reach this point:
    QueryTokenMiddleware moves them into the cookie and redirects.
    """
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    return None


def get_optional_session(
    token: str | None = Depends(extract_token),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> SessionClaims | None:
    """
    Resolve the caller's session, or None.

    Never fails: a missing, invalid or expired token all mean
    "not authenticated".
    """
    if token is None:
        return None
    try:
        return tokens.verify(token)
    except TokenError:
        return None


def require_session(
    token: str | None = Depends(extract_token),
    tokens: SessionTokens = Depends(get_session_tokens),
) -> SessionClaims:
    """
    Resolve the caller's session for a protected route.

    Raises:
        HTTPException: 401 when no token is present, 403 when the token
            is invalid or expired
    """
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return tokens.verify(token)
    except TokenExpired:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Token has expired",
        ) from None
    except TokenError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token",
        ) from None
