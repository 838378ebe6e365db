# backend/expiry_notifier/services/dispatcher.py
"""Send composed expiry messages, one attempt per user"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import DeliveryError
from expiry_notifier.models.records import ExpiryMessage
from expiry_notifier.services.push_transport import PushTransport

logger = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    sent_count: int = 0
    total_candidates: int = 0
    message_ids: Dict[str, str] = field(default_factory=dict)
    failures: Dict[str, str] = field(default_factory=dict)


async def _send_one(
    message: ExpiryMessage,
    transport: PushTransport,
    semaphore: asyncio.Semaphore
) -> Tuple[str, bool, str]:
    async with semaphore:
        try:
            message_id = await asyncio.to_thread(
                transport.send, message.token, message.title, message.body, message.data
            )
        except DeliveryError as e:
            logger.error(f"Push to user {message.user_id} (token {e.token[:8]}...) failed: {e.reason}")
            return message.user_id, False, e.reason
        except Exception as e:
            logger.error(f"Unexpected error sending push to user {message.user_id}: {str(e)}")
            return message.user_id, False, str(e)

    logger.info(f"Sent to {message.user_id}: {message.body}")
    return message.user_id, True, message_id


async def dispatch(
    messages: List[ExpiryMessage],
    transport: PushTransport,
    max_concurrency: int = None
) -> DispatchReport:
    """
    Deliver every message independently. A failed send is logged and counted
    as not sent; it never stops the remaining sends.
    """
    report = DispatchReport(total_candidates=len(messages))
    if not messages:
        return report

    semaphore = asyncio.Semaphore(max(1, max_concurrency or settings.max_concurrency))
    outcomes = await asyncio.gather(*[_send_one(m, transport, semaphore) for m in messages])

    for user_id, ok, detail in outcomes:
        if ok:
            report.sent_count += 1
            report.message_ids[user_id] = detail
        else:
            report.failures[user_id] = detail

    logger.info(f"Dispatched {report.sent_count}/{report.total_candidates} expiry notifications")
    return report
