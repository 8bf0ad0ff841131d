"""
Response header policy.

  /r/...      → never cached; no Referer leaks the short link to the destination
  /admin...   → never cached; dashboard and exports carry click data
  everything  → no framing, no MIME sniffing

A cached redirect is a click we never see, so /r/ must hit the app on
every visit.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

_UNCACHED_PREFIXES = ("/r/", "/admin")

_NO_STORE = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}

_ALWAYS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
}


def referrer_policy(path: str) -> str:
    return "no-referrer" if path.startswith("/r/") else "same-origin"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        path = request.url.path

        if path.startswith(_UNCACHED_PREFIXES):
            response.headers.update(_NO_STORE)
        response.headers["Referrer-Policy"] = referrer_policy(path)
        response.headers.update(_ALWAYS)
        response.headers.setdefault("Content-Security-Policy", "frame-ancestors 'none'")

        return response
