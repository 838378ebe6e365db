# backend/expiry_notifier/services/push_transport.py
"""
Push delivery providers.

A transport sends exactly one message to one device token and either returns
the provider's message id or raises DeliveryError. Retrying is not its job.
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Dict
from uuid import uuid4

from firebase_admin import messaging

from expiry_notifier.core.errors import DeliveryError

logger = logging.getLogger(__name__)


class PushTransport(ABC):

    @abstractmethod
    def send(self, token: str, title: str, body: str, data: Dict[str, str]) -> str:
        """Send one push message; raise DeliveryError on failure"""


class FcmTransport(PushTransport):
    """Firebase Cloud Messaging"""

    def __init__(self, app=None):
        self.app = app

    def send(self, token: str, title: str, body: str, data: Dict[str, str]) -> str:
        message = messaging.Message(
            notification=messaging.Notification(
                title=title,
                body=body
            ),
            # FCM data payload values must be strings
            data={key: str(value) for key, value in data.items()},
            token=token
        )

        try:
            return messaging.send(message, app=self.app)
        except Exception as e:
            raise DeliveryError(str(e), token=token) from e


class MockPushTransport(PushTransport):
    """Dry-run provider: logs the message instead of delivering it"""

    def __init__(self, history_size: int = 100):
        # Only the latest messages are kept; the provider is cached for the process
        self.sent = deque(maxlen=history_size)

    def send(self, token: str, title: str, body: str, data: Dict[str, str]) -> str:
        message_id = f"mock-{uuid4()}"
        self.sent.append({
            "token": token,
            "title": title,
            "body": body,
            "data": dict(data),
            "message_id": message_id
        })
        logger.info(f"MOCK PUSH to {token[:8]}... | {title} | {body} | {data}")
        return message_id
