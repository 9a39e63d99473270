"""Password hashing - bcrypt salted hash and constant-effort verify."""

from dataclasses import dataclass
from functools import lru_cache

import bcrypt

# bcrypt only reads the first 72 bytes; newer releases reject longer input.
_BCRYPT_MAX_BYTES = 72


@lru_cache
def _dummy_hash(rounds: int) -> bytes:
    """
    Hash checked against when no account exists.

    Built at the hasher's own cost so the not-found path pays the same
    bcrypt work as a real comparison.
    """
    return bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(rounds))


def _encode(password: str) -> bytes:
    return password.encode()[:_BCRYPT_MAX_BYTES]


@dataclass(frozen=True)
class PasswordHasher:
    """bcrypt wrapper with a configurable cost factor."""

    rounds: int = 10

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode()

    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Malformed stored hashes count as a mismatch rather than an error.
        """
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode())
        except ValueError:
            return False

    def burn(self, password: str) -> None:
        """Run a throwaway comparison to equalize timing for unknown accounts."""
        bcrypt.checkpw(_encode(password), _dummy_hash(self.rounds))
