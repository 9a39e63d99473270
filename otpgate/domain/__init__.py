"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for signup, email
verification and signin. It defines its own port interfaces for
infrastructure abstraction, ensuring hexagonal architecture decoupling.
"""

from .authentication import AuthenticationService
from .exceptions import (
    AccountNotFound,
    AccountNotVerified,
    AuthenticationFailed,
    BadPassword,
    DeliveryFailed,
    DuplicateEmail,
    DuplicateUsername,
    IdentityError,
    InvalidToken,
    OtpMismatch,
    RegistrationError,
    TokenError,
    TokenExpired,
    VerificationFailed,
)
from .ports import (
    Account,
    AccountProfile,
    AccountRepository,
    EmailSender,
    SessionClaims,
    SessionTokens,
    VerifyResult,
)
from .registration import RegistrationService

__all__ = [
    "Account",
    "AccountNotFound",
    "AccountNotVerified",
    "AccountProfile",
    "AccountRepository",
    "AuthenticationFailed",
    "AuthenticationService",
    "BadPassword",
    "DeliveryFailed",
    "DuplicateEmail",
    "DuplicateUsername",
    "EmailSender",
    "IdentityError",
    "InvalidToken",
    "OtpMismatch",
    "RegistrationError",
    "RegistrationService",
    "SessionClaims",
    "SessionTokens",
    "TokenError",
    "TokenExpired",
    "VerificationFailed",
    "VerifyResult",
]
