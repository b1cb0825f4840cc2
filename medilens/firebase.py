"""
Firebase Admin SDK client handle.

Instead of initialising a module-level default app at import time, callers
build a :class:`FirebaseClients` for one unit of work (a reminder pass, an API
request) and close it afterwards::

    with firebase_clients() as clients:
        run_reminder_pass(clients)

Every handle owns a uniquely named ``firebase_admin`` app, so overlapping
invocations inside one worker process never share or tear down each other's
clients.
"""
import json
import logging
import os
import uuid

import firebase_admin
from firebase_admin import credentials, firestore
from django.conf import settings

logger = logging.getLogger(__name__)


class FirebaseSetupError(RuntimeError):
    """Credentials or configuration are missing or invalid."""


def load_credential(service_account_json=None, credentials_path=None, allow_default=True):
    """
    Resolve the credential used to talk to Firebase.

    Order: an inline service-account JSON key, then a key file path, then
    (if allowed) Application Default Credentials, i.e. the identity of the
    platform the code runs on.
    """
    if service_account_json:
        try:
            info = json.loads(service_account_json)
        except ValueError as e:
            raise FirebaseSetupError(f"Error parsing service account key: {e}") from e
        try:
            return credentials.Certificate(info)
        except ValueError as e:
            raise FirebaseSetupError(f"Invalid service account key: {e}") from e

    if credentials_path:
        if not os.path.exists(credentials_path):
            raise FirebaseSetupError(f"Firebase service account key file not found at: {credentials_path}")
        try:
            return credentials.Certificate(credentials_path)
        except (ValueError, OSError) as e:
            raise FirebaseSetupError(f"Error loading Firebase credentials from file {credentials_path}: {e}") from e

    if not allow_default:
        raise FirebaseSetupError("No Firebase service credential configured.")

    logger.info("No service account configured; using Application Default Credentials.")
    return credentials.ApplicationDefault()


class FirebaseClients:
    """A Firebase app plus the Firestore client bound to it."""

    def __init__(self, app, db):
        self.app = app
        self.db = db
        self._closed = False

    @classmethod
    def initialize(cls, credential, project_id=None, database_id=None, http_timeout=None, name=None):
        options = {}
        if project_id:
            options['projectId'] = project_id
        if http_timeout:
            options['httpTimeout'] = http_timeout

        name = name or f"medilens-{uuid.uuid4().hex}"
        try:
            app = firebase_admin.initialize_app(credential, options, name=name)
        except ValueError as e:
            raise FirebaseSetupError(f"Error initializing Firebase Admin: {e}") from e

        try:
            db = firestore.client(app=app, database_id=database_id)
        except Exception as e:
            firebase_admin.delete_app(app)
            raise FirebaseSetupError(
                f"Error connecting to Firestore database {database_id or '(default)'}: {e}"
            ) from e

        logger.debug(f"Firebase app {name} initialized (database {database_id or '(default)'})")
        return cls(app, db)

    def close(self):
        if self._closed:
            return
        self._closed = True
        try:
            self.db.close()
        finally:
            firebase_admin.delete_app(self.app)
        logger.debug(f"Firebase app {self.app.name} closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def firebase_clients(service_account_json=None, credentials_path=None, allow_default=True):
    """
    Build a :class:`FirebaseClients`.

    An explicit key (JSON or path) takes precedence; otherwise the
    FIREBASE_SERVICE_ACCOUNT_KEY / FIREBASE_CREDENTIALS_PATH settings are used.
    """
    if not service_account_json and not credentials_path:
        service_account_json = settings.FIREBASE_SERVICE_ACCOUNT_KEY
        credentials_path = settings.FIREBASE_CREDENTIALS_PATH

    credential = load_credential(
        service_account_json=service_account_json,
        credentials_path=credentials_path,
        allow_default=allow_default,
    )
    return FirebaseClients.initialize(
        credential,
        project_id=settings.FIREBASE_PROJECT_ID,
        database_id=settings.FIRESTORE_DB_ID,
        http_timeout=settings.FCM_HTTP_TIMEOUT,
    )
