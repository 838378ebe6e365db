from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    port: int = 10000

    # Shared secret expected in the x-cron-secret header (unset = open)
    cron_secret: Optional[str] = None

    # Firebase
    firebase_service_account: Optional[str] = None
    firebase_credentials_path: str = "./serviceAccountKey.json"

    # Record store: "firestore" or "sql"
    record_store: str = "firestore"
    database_url: str = "sqlite:///./expiry_notifier.db"

    inventory_collection: str = "inventory"
    households_collection: str = "households"
    users_collection: str = "users"
    expiry_field: str = "expiry_date"

    # Push: "fcm" or "mock"
    push_provider: str = "fcm"

    # Expiry scan
    scan_timezone: Optional[str] = None
    min_token_length: int = 11
    max_concurrency: int = 8

    # Worker
    scan_hour: int = 8
    worker_poll_seconds: int = 30

    class Config:
        env_file = ".env"


settings = Settings()
