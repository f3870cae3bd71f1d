import logging

import firebase_admin
from firebase_admin import credentials

from .config import FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID

logger = logging.getLogger(__name__)


def get_firebase_app() -> firebase_admin.App:
    """Return the default Firebase Admin app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    if FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
        app = firebase_admin.initialize_app(cred, options)
        logger.info("Firebase Admin initialized with service account file")
    else:
        # Uses Application Default Credentials
        app = firebase_admin.initialize_app(options=options)
        logger.info("Firebase Admin initialized with default credentials")
    return app
