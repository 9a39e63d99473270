"""
JWT session token adapter - Implements SessionTokens protocol.

Tokens are HS256 JWTs signed with the server secret, carrying the account
id (sub), email, iat and exp. Verification needs only the secret and the
clock; nothing is stored server-side, so a token stays valid until exp
even after logout.
"""

from datetime import UTC, datetime, timedelta

import jwt

from otpgate.domain.exceptions import InvalidToken, TokenExpired
from otpgate.domain.ports import SessionClaims

JWT_ALGORITHM = "HS256"
_REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]


class JwtSessionTokens:
    """
    Implements SessionTokens protocol via PyJWT.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, secret: str, ttl: timedelta = timedelta(days=4)) -> None:
        self._secret = secret
        self._ttl = ttl

    def issue(self, account_id: str, email: str, *, now: datetime | None = None) -> str:
        """
        Mint a signed session token.

        Args:
            account_id: Account id, stored as the sub claim
            email: Account email
            now: Issue time; defaults to the current UTC time

        Returns:
            Encoded JWT string
        """
        issued_at = now or datetime.now(UTC)
        payload = {
            "sub": account_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> SessionClaims:
        """
        Verify signature and expiry of a session token.

        Raises:
            TokenExpired: exp is in the past
            InvalidToken: Any other decoding or signature failure
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken("Invalid token") from exc

        account_id = payload["sub"]
        email = payload["email"]
        if not isinstance(account_id, str) or not isinstance(email, str):
            raise InvalidToken("Invalid token")

        return SessionClaims(
            account_id=account_id,
            email=email,
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
