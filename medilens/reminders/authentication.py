import hmac
import logging

from django.conf import settings
from firebase_admin import auth
from rest_framework import exceptions, permissions, status
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from firebase import FirebaseSetupError, firebase_clients

logger = logging.getLogger(__name__)

TRIGGER_TOKEN_HEADER = 'X-Reminders-Trigger-Token'


class FirebaseUnavailable(exceptions.APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Firebase is not available.'
    default_code = 'firebase_unavailable'


class FirebaseUser:
    """The caller identified by a verified Firebase ID token."""
    is_authenticated = True
    is_anonymous = False

    def __init__(self, uid, claims=None):
        self.uid = uid
        self.claims = claims or {}

    def __str__(self):
        return self.uid


class FirebaseAuthentication(BaseAuthentication):
    """
    ``Authorization: Bearer <Firebase ID token>``, as issued to the web app
    by Firebase Authentication.

    The Firebase handle opened to verify the token becomes ``request.auth``,
    so the view works through the same app. Views using this class close it
    via ClosesFirebaseHandle.
    """
    keyword = 'Bearer'

    def authenticate(self, request):
        parts = get_authorization_header(request).split()
        if not parts or parts[0].lower() != self.keyword.lower().encode():
            return None
        if len(parts) != 2:
            raise exceptions.AuthenticationFailed('Invalid Authorization header.')

        try:
            id_token = parts[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed('Invalid token encoding.')

        try:
            clients = firebase_clients()
        except FirebaseSetupError as e:
            logger.error(f"Cannot verify ID token: {e}")
            raise FirebaseUnavailable()

        try:
            claims = self.verify(id_token, clients)
        except Exception:
            clients.close()
            raise

        request.firebase_clients = clients
        return FirebaseUser(claims['uid'], claims), clients

    def verify(self, id_token, clients):
        try:
            return auth.verify_id_token(id_token, app=clients.app)
        except auth.CertificateFetchError as e:
            logger.error(f"Cannot fetch token certificates: {e}")
            raise FirebaseUnavailable()
        except (auth.InvalidIdTokenError, ValueError):
            raise exceptions.AuthenticationFailed('Invalid or expired ID token.')

    def authenticate_header(self, request):
        return self.keyword


class ClosesFirebaseHandle:
    """View mixin: release the handle FirebaseAuthentication opened once the response is built."""

    def finalize_response(self, request, response, *args, **kwargs):
        try:
            return super().finalize_response(request, response, *args, **kwargs)
        finally:
            clients = getattr(request, 'firebase_clients', None)
            if clients is not None:
                clients.close()


class HasTriggerToken(permissions.BasePermission):
    """Service credential for the HTTP backup trigger. Disabled when no token is configured."""

    def has_permission(self, request, view):
        expected = settings.REMINDERS_TRIGGER_TOKEN
        supplied = request.headers.get(TRIGGER_TOKEN_HEADER, '')
        if not expected or not supplied:
            return False
        return hmac.compare_digest(supplied.encode(), expected.encode())
