"""
Admin authentication — HTTP Basic.

Single operator account from settings (CT_ADMIN_USERNAME / CT_ADMIN_PASSWORD).
Gates everything under /admin: link creation, dashboard, estimates, exports.
The redirect path (/r/) and event ingest (/api/event) stay public.

Credentials are compared in constant time.
"""

import secrets
from dataclasses import dataclass

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from app.config import Settings, get_settings

import structlog

logger = structlog.get_logger()

basic_auth = HTTPBasic(realm="admin", auto_error=False)


@dataclass
class AdminContext:
    """Resolved admin identity for the current request."""
    username: str


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode(), expected.encode())


async def require_admin(
    credentials: HTTPBasicCredentials | None = Depends(basic_auth),
    settings: Settings = Depends(get_settings),
) -> AdminContext:
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Auth required",
            headers={"WWW-Authenticate": 'Basic realm="admin"'},
        )

    user_ok = _matches(credentials.username, settings.admin_username)
    pass_ok = _matches(credentials.password, settings.admin_password)
    if not (user_ok and pass_ok):
        logger.warning("admin_auth_failed", username=credentials.username)
        raise HTTPException(
            status_code=401,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": 'Basic realm="admin"'},
        )

    return AdminContext(username=credentials.username)
