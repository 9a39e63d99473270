"""Session token adapters."""

from .jwt_tokens import JwtSessionTokens

__all__ = ["JwtSessionTokens"]
