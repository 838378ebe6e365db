# backend/expiry_notifier/services/expiry_notification_service.py
"""
Expiry scan pipeline.

window -> scan -> resolve -> compose -> dispatch. Each run is independent:
nothing is remembered between runs, so scanning the same day twice notifies
the same users twice.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from expiry_notifier.core.config import settings
from expiry_notifier.models.records import (
    Accepted, PipelineStage, ScanResult, ScanStatus, Skipped
)
from expiry_notifier.services.dispatcher import dispatch
from expiry_notifier.services.expiry_scanner import scan_expiring_items
from expiry_notifier.services.expiry_window import compute_scan_window
from expiry_notifier.services.message_composer import compose_message
from expiry_notifier.services.push_transport import PushTransport
from expiry_notifier.services.recipient_resolver import RecipientResolver
from expiry_notifier.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class ExpiryNotificationService:
    """Runs one expiry scan and reports how many users were notified"""

    def __init__(
        self,
        store: RecordStore,
        transport: PushTransport,
        scan_timezone: Optional[str] = None,
        min_token_length: int = None,
        max_concurrency: int = None
    ):
        self.store = store
        self.transport = transport
        self.scan_timezone = scan_timezone if scan_timezone is not None else settings.scan_timezone
        self.max_concurrency = max_concurrency or settings.max_concurrency
        self.resolver = RecipientResolver(
            store,
            min_token_length=min_token_length,
            max_concurrency=self.max_concurrency
        )

    async def run(self, now: Optional[datetime] = None) -> ScanResult:
        stage = PipelineStage.IDLE
        sent_count = 0
        total_candidates = 0
        skipped_items = 0

        logger.info("Starting expiry scan...")
        try:
            window = compute_scan_window(now or datetime.now().astimezone(), self.scan_timezone)
            stage = PipelineStage.WINDOW_COMPUTED
            logger.info(f"Scanning from {window.start.isoformat()} to {window.end.isoformat()}")

            outcomes = await asyncio.to_thread(scan_expiring_items, self.store, window)
            stage = PipelineStage.SCANNED

            if not outcomes:
                return ScanResult(status=ScanStatus.NO_ITEMS, stage=stage)

            items = [o.item for o in outcomes if isinstance(o, Accepted)]
            skipped_items = sum(1 for o in outcomes if isinstance(o, Skipped))

            resolution = await self.resolver.resolve(items)
            stage = PipelineStage.RESOLVED
            skipped_items += len(resolution.skipped)

            if not resolution.targets:
                logger.info("Items found but no user has a valid push token - nothing to send")
                return ScanResult(
                    status=ScanStatus.NO_RECIPIENTS,
                    skipped_items=skipped_items,
                    stage=stage
                )

            messages = [compose_message(target) for target in resolution.targets.values()]
            total_candidates = len(messages)
            logger.info(f"Preparing to notify {total_candidates} users")

            report = await dispatch(messages, self.transport, self.max_concurrency)
            stage = PipelineStage.DISPATCHED
            sent_count = report.sent_count

            return ScanResult(
                status=ScanStatus.DISPATCHED,
                sent_count=sent_count,
                total_candidates=total_candidates,
                skipped_items=skipped_items,
                stage=PipelineStage.DONE
            )

        except Exception as e:
            logger.exception(f"Expiry scan failed after stage '{stage.value}': {str(e)}")
            return ScanResult(
                status=ScanStatus.INTERNAL_ERROR,
                sent_count=sent_count,
                total_candidates=total_candidates,
                skipped_items=skipped_items,
                detail=str(e),
                stage=PipelineStage.FAILED
            )
