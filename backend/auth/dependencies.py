import logging
from dataclasses import dataclass

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.auth import jwt_handler
from backend.core import config
from backend.core.errors import AuthenticationError

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

MISSING_CREDENTIAL = "MissingCredential"
MALFORMED_CREDENTIAL = "MalformedCredential"
EXPIRED_CREDENTIAL = "ExpiredCredential"
INVALID_CREDENTIAL = "InvalidCredential"


@dataclass(frozen=True)
class Claims:
    subject_id: int
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == config.ADMIN_ROLE


def verify_token(token: str) -> Claims:
    try:
        payload = jwt_handler.decode_access_token(token)
    except jwt.ExpiredSignatureError as exc:
        logger.warning("Rejected expired access token.")
        raise AuthenticationError("Access denied. Token has expired.", error_type=EXPIRED_CREDENTIAL) from exc
    except jwt.InvalidSignatureError as exc:
        logger.warning("Rejected access token with a bad signature.")
        raise AuthenticationError("Access denied. Invalid token.", error_type=INVALID_CREDENTIAL) from exc
    except jwt.DecodeError as exc:
        logger.warning("Rejected malformed access token: %s", exc)
        raise AuthenticationError("Access denied. Invalid token.", error_type=MALFORMED_CREDENTIAL) from exc
    except jwt.InvalidTokenError as exc:
        logger.warning("Rejected invalid access token: %s", exc)
        raise AuthenticationError("Access denied. Invalid token.", error_type=INVALID_CREDENTIAL) from exc

    try:
        subject_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise AuthenticationError("Access denied. Invalid token subject.", error_type=INVALID_CREDENTIAL) from exc

    return Claims(subject_id=subject_id, role=str(payload.get("role") or config.DEFAULT_ROLE))


def get_current_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Claims:
    # Fail on a missing secret before looking at the caller's credential.
    config.get_jwt_secret()

    if credentials is None or not credentials.credentials:
        raise AuthenticationError(
            "Access denied. No token provided or invalid format.",
            error_type=MISSING_CREDENTIAL,
        )
    return verify_token(credentials.credentials)
