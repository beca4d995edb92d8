"""
Authentication Module for the Kiosk API
=======================================

Admin endpoints (menu, settings, payment connection, printer diagnostics) are
protected by a single shared secret sent in the ``X-Admin-Password`` header.
The admin panel stores the password locally after the first prompt and sends
it with every request.

Security Features:
------------------
- **Timing Attack Prevention**: Uses ``secrets.compare_digest()`` so the
  comparison takes the same time however many characters match.

- **Fail Closed**: If ADMIN_PASSWORD is not configured, admin endpoints return
  503 Service Unavailable rather than allowing unauthenticated access.

There is no lockout, backoff or expiry; a wrong or missing header simply
returns 401.

Usage:
------
    from kiosk_api.auth import verify_admin_password

    @router.get("/admin/settings")
    def get_settings(
        _admin: None = Depends(verify_admin_password),
        db: Session = Depends(get_db),
    ):
        ...
"""

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import APIKeyHeader

from . import config


# auto_error=False so a missing header is reported as 401 rather than 403
admin_password_header = APIKeyHeader(name=config.ADMIN_HEADER_NAME, auto_error=False)


def verify_admin_password(
    password: Optional[str] = Depends(admin_password_header),
) -> None:
    """
    Verify the admin secret header.

    Raises:
        HTTPException (503): ADMIN_PASSWORD environment variable is not set.
        HTTPException (401): Header missing or wrong.
    """
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    if password is None or not secrets.compare_digest(
        password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
