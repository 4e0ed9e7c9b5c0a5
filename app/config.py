import json
import logging
import os

import firebase_admin
from firebase_admin import credentials

from app.core.settings import Settings

logger = logging.getLogger("app.config")


def init_firebase(settings: Settings) -> bool:
    """Initialize the Firebase admin SDK for token verification.

    Behavior:
    - If FIREBASE_CERT_JSON is present, parse it as JSON and use it.
    - Else if FIREBASE_CERT_PATH points at an existing file, use that path.
    - Else, do nothing (avoid raising at startup) and return False.
    """
    if firebase_admin._apps:
        return True

    if settings.firebase_cert_json:
        try:
            cred = credentials.Certificate(json.loads(settings.firebase_cert_json))
            firebase_admin.initialize_app(cred)
            return True
        except Exception as e:
            # Fall through to file-based loading which may still work
            logger.warning(f"Failed to init Firebase from FIREBASE_CERT_JSON: {e}")

    fb_path = settings.firebase_cert_path
    if fb_path and os.path.exists(fb_path):
        try:
            firebase_admin.initialize_app(credentials.Certificate(fb_path))
            return True
        except Exception as e:
            logger.warning(f"Failed to init Firebase from path {fb_path}: {e}")

    logger.warning("No Firebase credentials found; skipping Firebase initialization.")
    return False
