"""
Query-string token middleware.

Clients may hand over a session token as ?token=... (e.g. from an email
link). The token is accepted by storing it in the session cookie, and the
request is redirected to the same URL without the parameter so the token
does not linger in logs, history or Referer headers.
"""

from urllib.parse import urlencode

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

TOKEN_QUERY_PARAM = "token"


class QueryTokenMiddleware(BaseHTTPMiddleware):
    """Move a ?token= query parameter into the session cookie."""

    def __init__(
        self,
        app,
        cookie_name: str = "token",
        cookie_secure: bool = True,
        cookie_samesite: str = "lax",
        max_age: int = 4 * 24 * 60 * 60,
    ) -> None:
        super().__init__(app)
        self._cookie_name = cookie_name
        self._cookie_secure = cookie_secure
        self._cookie_samesite = cookie_samesite
        self._max_age = max_age

    async def dispatch(self, request: Request, call_next) -> Response:
        token = request.query_params.get(TOKEN_QUERY_PARAM)
        if token is None:
            return await call_next(request)

        remaining = [
            (key, value)
            for key, value in request.query_params.multi_items()
            if key != TOKEN_QUERY_PARAM
        ]
        clean_url = request.url.replace(query=urlencode(remaining))

        # 307 keeps the method and body of the original request
        response = RedirectResponse(str(clean_url), status_code=307)
        response.headers["Referrer-Policy"] = "no-referrer"
        if token:
            response.set_cookie(
                key=self._cookie_name,
                value=token,
                max_age=self._max_age,
                path="/",
                httponly=True,
                secure=self._cookie_secure,
                samesite=self._cookie_samesite,
            )
        return response
