#/backend/expiry_notifier/services/auth.py

import hmac
from typing import Optional

from fastapi import Header, HTTPException, status

from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import AuthorizationDenied


def check_cron_secret(provided: Optional[str]) -> None:
    """Raise AuthorizationDenied unless provided matches the configured secret"""
    expected = settings.cron_secret
    if not expected:
        # No secret configured: development mode, accept every caller
        return

    if provided is None or not hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8")):
        raise AuthorizationDenied("invalid cron secret")


def verify_cron_secret(x_cron_secret: Optional[str] = Header(None)) -> None:
    """FastAPI dependency guarding the scan trigger"""
    try:
        check_cron_secret(x_cron_secret)
    except AuthorizationDenied:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized: invalid cron secret"
        )
