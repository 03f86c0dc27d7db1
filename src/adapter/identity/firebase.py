"""Firebase implementation of IdentityTokenVerifier."""

from logging import getLogger

import firebase_admin
from firebase_admin import auth
from firebase_admin.exceptions import FirebaseError

from domain.model.auth import IdentityClaims
from domain.model.errors import InvalidTokenError

logger = getLogger(__name__)


class FirebaseIdentityVerifier:
    def __init__(self, app: firebase_admin.App):
        self.app = app

    def verify(self, token: str) -> IdentityClaims:
        """Verify a Firebase ID token once and map its claims.

        Every SDK rejection, including certificate fetch failures, surfaces
        as InvalidTokenError with the SDK message as the reason.
        """
        try:
            decoded = auth.verify_id_token(token, app=self.app)
        except (FirebaseError, ValueError) as e:
            logger.debug("Firebase ID token rejected", extra={"error": str(e)})
            raise InvalidTokenError(f"identity token rejected: {e}") from e

        return IdentityClaims(
            subject_id=decoded['uid'],
            email=decoded.get('email') or None,
            display_name=decoded.get('name'),
            photo_url=decoded.get('picture'),
            email_verified=bool(decoded.get('email_verified', False)),
            sign_in_provider=decoded.get('firebase', {}).get('sign_in_provider'),
        )
