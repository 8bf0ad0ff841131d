"""
Visitor session cookie.

Every visitor gets a random token in the session cookie. It's readable by
site scripts (not HttpOnly) so the tracking snippet can send it with
/api/event, which is how clicks and on-site events are stitched together.

The token is put on request.state before the handler runs, so the click
recorded on a visitor's first request already carries it.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.config import get_settings
from app.core.identifiers import new_session_token

SESSION_MAX_AGE = 60 * 60 * 24 * 365


class SessionCookieMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        cookie_name = get_settings().session_cookie_name
        token = request.cookies.get(cookie_name)
        is_new = not token
        if is_new:
            token = new_session_token()
        request.state.session_token = token

        response: Response = await call_next(request)

        if is_new:
            response.set_cookie(
                key=cookie_name,
                value=token,
                max_age=SESSION_MAX_AGE,
                path="/",
                samesite="lax",
                httponly=False,
            )
        return response


def get_session_token(request: Request) -> str | None:
    token = getattr(request.state, "session_token", None)
    return token or request.cookies.get(get_settings().session_cookie_name)
