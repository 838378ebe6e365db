from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse
from contextlib import asynccontextmanager
from expiry_notifier.api import expiry
from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import InitializationError
from expiry_notifier.models.records import ScanStatus
import logging

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Expiry notifier starting (env={settings.environment}, store={settings.record_store}, "
        f"push={settings.push_provider}, "
        f"cron secret {'set' if settings.cron_secret else 'NOT set'})"
    )
    yield
    logger.info("Expiry notifier stopped")

app = FastAPI(
    title="Expiry Notifier",
    description="Push notifications for household items expiring tomorrow",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(InitializationError)
async def initialization_error_handler(request: Request, exc: InitializationError):
    logger.error(f"Initialization failure: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "status": ScanStatus.INTERNAL_ERROR.value,
            "message": "Internal Server Error",
            "detail": str(exc)
        }
    )

# Include routers
app.include_router(expiry.router)


@app.get("/", response_class=PlainTextResponse)
def root():
    return "Notification Server is LIVE! 🚀"

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "record_store": settings.record_store,
        "push_provider": settings.push_provider
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port)
