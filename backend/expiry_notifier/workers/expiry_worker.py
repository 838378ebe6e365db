# backend/expiry_notifier/workers/expiry_worker.py
"""
Expiry scan worker for deployments without an external cron.

    python -m expiry_notifier.workers.expiry_worker        # loop, scan daily at SCAN_HOUR
    python -m expiry_notifier.workers.expiry_worker once   # single scan, then exit
"""

import asyncio
import logging
import signal
import sys
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import InitializationError
from expiry_notifier.models.records import ScanResult
from expiry_notifier.services.expiry_notification_service import ExpiryNotificationService
from expiry_notifier.services.providers import get_push_transport, get_record_store

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    if settings.scan_timezone:
        return datetime.now(ZoneInfo(settings.scan_timezone))
    return datetime.now().astimezone()


class ExpiryWorker:
    """Triggers one expiry scan per day at the configured hour"""

    def __init__(self, service_factory=None, clock=_local_now):
        self.should_stop = False
        self.service_factory = service_factory or self._default_service
        self.clock = clock
        self.last_scan_date = None

        # Handle graceful shutdown
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

    def _handle_shutdown(self, signum, frame):
        logger.info(f"Received signal {signum}, shutting down gracefully...")
        self.should_stop = True

    @staticmethod
    def _default_service() -> ExpiryNotificationService:
        return ExpiryNotificationService(get_record_store(), get_push_transport())

    def is_due(self, now: datetime) -> bool:
        return now.hour == settings.scan_hour and self.last_scan_date != now.date()

    async def run_once(self, now: Optional[datetime] = None) -> ScanResult:
        now = now or self.clock()
        service = self.service_factory()
        result = await service.run(now)
        logger.info(
            f"Expiry scan finished: status={result.status.value} "
            f"sent={result.sent_count}/{result.total_candidates} skipped={result.skipped_items}"
        )
        return result

    async def tick(self) -> Optional[ScanResult]:
        now = self.clock()
        if not self.is_due(now):
            return None

        # Mark before running so a crash does not re-trigger the same day
        self.last_scan_date = now.date()
        try:
            return await self.run_once(now)
        except Exception as e:
            logger.error(f"Expiry scan could not start: {str(e)}")
            return None

    async def run(self):
        logger.info(f"Starting expiry worker (daily scan at {settings.scan_hour:02d}:00)...")

        while not self.should_stop:
            await self.tick()
            await asyncio.sleep(settings.worker_poll_seconds)

        logger.info("Expiry worker stopped.")


async def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    worker = ExpiryWorker()

    if not argv:
        await worker.run()
        return 0

    mode = argv[0].lower()
    if mode == "once":
        try:
            result = await worker.run_once()
        except InitializationError as e:
            logger.error(f"Expiry scan could not start: {e}")
            return 1
        return 0 if result.success else 1

    logger.error(f"Unknown mode: {mode}")
    logger.info("Usage: python -m expiry_notifier.workers.expiry_worker [once]")
    return 2


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
