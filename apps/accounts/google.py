import logging
from functools import lru_cache
from typing import Any, Dict

import jwt
from django.conf import settings
from jwt import PyJWKClient

from .exceptions import GoogleAuthUnavailable, InvalidGoogleToken

logger = logging.getLogger(__name__)

FIREBASE_ISSUER = "https://securetoken.google.com/{project_id}"


@lru_cache(maxsize=1)
def get_jwks_client() -> PyJWKClient:
    return PyJWKClient(settings.GOOGLE_SECURETOKEN_JWKS_URL, cache_keys=True)


def verify_firebase_token(id_token: str) -> Dict[str, Any]:
    """
    Verify a Firebase ID token against Google's published signing keys.

    Returns the decoded claims. The token must be RS256-signed, issued for
    the configured Firebase project and carry an email address.
    """
    project_id = settings.FIREBASE_PROJECT_ID
    if not project_id:
        raise GoogleAuthUnavailable()

    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(id_token)
        claims = jwt.decode(
            id_token,
            signing_key.key,
            algorithms=["RS256"],
            audience=project_id,
            issuer=FIREBASE_ISSUER.format(project_id=project_id),
        )
    except jwt.PyJWTError as e:
        logger.warning(f"Rejected Google ID token: {e}")
        raise InvalidGoogleToken()

    if not claims.get("email"):
        logger.warning("Google ID token without an email claim")
        raise InvalidGoogleToken()

    return claims
