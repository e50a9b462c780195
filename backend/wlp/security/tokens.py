"""Session token service — signed, self-contained, 7-day session tokens.

Tokens carry ``{uid, role, iss, aud, iat, exp}`` and are signed with HS256.
Verification is stateless: there is no server-side session store and no
revocation list, so a token stays valid until it expires.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import jwt

from wlp.errors import AuthenticationFailure, CollaboratorFailure
from wlp.models.user import Role
from wlp.security.principal import Principal

logger = logging.getLogger(__name__)

ISSUER = "wlp"
AUDIENCE = "user"
ALGORITHM = "HS256"
TOKEN_TTL = timedelta(days=7)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionTokenService:
    """Issues and verifies session tokens with one process-wide secret."""

    def __init__(self, secret: str, clock: Callable[[], datetime] = _utcnow):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._clock = clock

    def issue(self, subject_id: str, role: Role) -> str:
        now = self._clock()
        payload = {
            "uid": subject_id,
            "role": Role(role).value,
            "iss": ISSUER,
            "aud": AUDIENCE,
            "iat": int(now.timestamp()),
            "exp": int((now + TOKEN_TTL).timestamp()),
        }
        try:
            return jwt.encode(payload, self._secret, algorithm=ALGORITHM)
        except (jwt.PyJWTError, TypeError, ValueError):
            logger.exception("Signing a session token failed")
            raise CollaboratorFailure() from None

    def verify(self, token: str) -> Principal:
        """Return the token's principal or raise ``AuthenticationFailure``.

        Signature, issuer, audience and expiry failures, malformed tokens and
        unknown roles all raise the same error so callers cannot tell them
        apart. Expiry is judged against the service's clock, not PyJWT's.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                issuer=ISSUER,
                audience=AUDIENCE,
                options={
                    "require": ["uid", "role", "iss", "aud", "iat", "exp"],
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
        except jwt.PyJWTError as exc:
            logger.debug("Session token rejected: %s", type(exc).__name__)
            raise AuthenticationFailure() from None

        exp = claims["exp"]
        if isinstance(exp, bool) or not isinstance(exp, (int, float)) or exp <= self._clock().timestamp():
            logger.debug("Session token rejected: expired")
            raise AuthenticationFailure()

        subject_id = claims["uid"]
        if not isinstance(subject_id, str) or not subject_id:
            raise AuthenticationFailure()
        try:
            role = Role(claims["role"])
        except ValueError:
            logger.debug("Session token rejected: unknown role claim")
            raise AuthenticationFailure() from None
        return Principal(subject_id=subject_id, role=role)
