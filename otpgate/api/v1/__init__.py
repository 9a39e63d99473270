"""
API v1 package.

Contains versioned API routes for signup, verification and sessions.
"""

from otpgate.api.v1.routes import router

__all__ = ["router"]
