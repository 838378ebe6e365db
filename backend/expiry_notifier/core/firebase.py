# backend/expiry_notifier/core/firebase.py
"""Firebase Admin SDK bootstrap shared by the Firestore store and FCM transport."""

import json
import logging

import firebase_admin
from firebase_admin import credentials

from expiry_notifier.core.config import settings
from expiry_notifier.core.errors import InitializationError

logger = logging.getLogger(__name__)


def _load_credentials() -> credentials.Certificate:
    """Build a certificate from inline JSON, falling back to the key file"""
    if settings.firebase_service_account:
        try:
            service_account = json.loads(settings.firebase_service_account)
        except ValueError as e:
            raise InitializationError(f"FIREBASE_SERVICE_ACCOUNT is not valid JSON: {e}") from e
        return credentials.Certificate(service_account)

    return credentials.Certificate(settings.firebase_credentials_path)


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase app, initializing it on first use"""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    try:
        cred = _load_credentials()
        app = firebase_admin.initialize_app(cred)
    except InitializationError:
        logger.error("Failed to initialize Firebase: invalid service account JSON")
        raise
    except Exception as e:
        logger.error(f"Failed to initialize Firebase: {str(e)}")
        raise InitializationError(f"Firebase initialization failed: {e}") from e

    logger.info("Firebase Admin SDK initialized")
    return app
