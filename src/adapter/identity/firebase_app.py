"""Firebase Admin SDK bootstrap.

The app handle is created once per process and handed to
FirebaseIdentityVerifier; it is never re-initialized.
"""

import os
import logging

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)

FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
FIREBASE_SERVICE_ACCOUNT_PATH = os.getenv('FIREBASE_SERVICE_ACCOUNT_PATH')

_app: firebase_admin.App | None = None


def get_firebase_app() -> firebase_admin.App:
    """Return the process-wide Firebase app, initializing it on first use.

    With FIREBASE_SERVICE_ACCOUNT_PATH set, the service account key is used.
    Otherwise only the project id is configured, which is enough to verify
    ID tokens against Google's public certificates.
    """
    global _app
    if _app is not None:
        return _app

    options = {'projectId': FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    if FIREBASE_SERVICE_ACCOUNT_PATH:
        credential = credentials.Certificate(FIREBASE_SERVICE_ACCOUNT_PATH)
        _app = firebase_admin.initialize_app(credential, options)
        logger.info("[FIREBASE] Initialized with service account", extra={"projectId": FIREBASE_PROJECT_ID})
    else:
        if not FIREBASE_PROJECT_ID:
            logger.warning("[FIREBASE] FIREBASE_PROJECT_ID not configured, ID token verification will fail")
        _app = firebase_admin.initialize_app(options=options)
        logger.info("[FIREBASE] Initialized with project id", extra={"projectId": FIREBASE_PROJECT_ID})
    return _app
