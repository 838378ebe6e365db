# backend/expiry_notifier/api/expiry.py
"""
Expiry scan trigger, called by an external scheduler (cron)
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from expiry_notifier.schemas.scan import ScanResponse
from expiry_notifier.services.auth import verify_cron_secret
from expiry_notifier.services.expiry_notification_service import ExpiryNotificationService
from expiry_notifier.services.providers import get_push_transport, get_record_store
from expiry_notifier.services.push_transport import PushTransport
from expiry_notifier.services.record_store import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["expiry"])


def get_expiry_service(
    store: RecordStore = Depends(get_record_store),
    transport: PushTransport = Depends(get_push_transport)
) -> ExpiryNotificationService:
    return ExpiryNotificationService(store, transport)


# The secret check sits in the decorator so it runs before the store is built
@router.get(
    "/check-expiry",
    response_model=ScanResponse,
    dependencies=[Depends(verify_cron_secret)]
)
async def check_expiry(service: ExpiryNotificationService = Depends(get_expiry_service)):
    """Scan for items expiring tomorrow and notify household members"""
    result = await service.run()
    response = ScanResponse.from_result(result)

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response.model_dump(mode="json", by_alias=True)
        )
    return response
