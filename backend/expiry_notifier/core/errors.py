# backend/expiry_notifier/core/errors.py
"""
Exception types for the expiry notifier.

Data problems found during a scan (missing household, user without a token)
are not exceptions; they travel as Skipped outcomes so the scan can go on.
"""


class ExpiryNotifierError(Exception):
    """Base class for all expiry notifier errors"""


class AuthorizationDenied(ExpiryNotifierError):
    """Caller did not present the configured cron secret"""


class InitializationError(ExpiryNotifierError):
    """Store or push provider could not be initialized"""


class DeliveryError(ExpiryNotifierError):
    """A single push message could not be delivered"""

    def __init__(self, reason: str, token: str = ""):
        super().__init__(reason)
        self.reason = reason
        self.token = token
