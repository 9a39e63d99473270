"""
Domain exceptions - Semantic error types for the identity flow.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""


class IdentityError(Exception):
    """Base class for identity domain errors."""

    pass


class RegistrationError(IdentityError):
    """Base class for signup failures."""

    pass


class DuplicateUsername(RegistrationError):
    """Username is already taken by another account."""

    pass


class DuplicateEmail(RegistrationError):
    """Email is already registered to another account."""

    pass


class DeliveryFailed(RegistrationError):
    """Verification code could not be delivered; the account was rolled back."""

    pass


class VerificationFailed(IdentityError):
    """Email verification did not succeed."""

    pass


class OtpMismatch(VerificationFailed):
    """Submitted code does not match the active verification code."""

    pass


class AuthenticationFailed(IdentityError):
    """Signin did not succeed."""

    pass


class AccountNotVerified(AuthenticationFailed):
    """Account exists but its email has not been verified yet."""

    pass


class BadPassword(AuthenticationFailed):
    """Password does not match the stored hash."""

    pass


class AccountNotFound(VerificationFailed, AuthenticationFailed):
    """No account matches the given email or username."""

    pass


class TokenError(IdentityError):
    """Session token was rejected."""

    pass


class InvalidToken(TokenError):
    """Token is malformed, tampered with, or signed with another key."""

    pass


class TokenExpired(TokenError):
    """Token signature is valid but its lifetime has elapsed."""

    pass
