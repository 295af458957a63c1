"""
security.py — Authentication Utilities (Password Hashing & JWT Encoding)

Purpose:
- Hash & verify passwords (never store or log raw passwords).
- Issue and validate JWT access tokens carrying identity + role claims.

Key Constraints:
- Access tokens only (no refresh tokens, no revocation).
- Authentication is stateless: claims are rebuilt from the token per request.
- Tokens expire exactly ACCESS_TOKEN_TTL after issuance.
- Every token failure (bad structure, bad signature, missing claim, expired)
  collapses to the same `None` result so callers cannot tell them apart.

This module does NOT:
- Read the Authorization header → app/api/deps.py
- Look users up → app/services/accounts.py
"""

import datetime
from dataclasses import dataclass
from typing import Any, Dict, Optional

from jose import JWTError, jwt  # `python-jose` library for JWT
from passlib.context import CryptContext  # password hashing

from app.core.logging import get_logger

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = datetime.timedelta(hours=1)
ACCESS_TOKEN_TTL_LABEL = "1h"


# -----------------------------------------------------------------------------
# Password Hashing
# -----------------------------------------------------------------------------

class CredentialHasher:
    """
    bcrypt password hashing behind passlib's CryptContext.

    `rounds` is the bcrypt cost factor (see Settings.BCRYPT_ROUNDS).
    """

    def __init__(self, rounds: int = 10):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__default_rounds=rounds,
        )

    def hash(self, raw_password: str) -> str:
        """
        Hash a plaintext password using salted bcrypt.
        """
        return self._context.hash(raw_password)

    def verify(self, raw_password: str, hashed_password: str) -> bool:
        """
        Verify that a raw password matches its hashed stored version.

        Malformed or unrecognized digests return False instead of raising.
        """
        try:
            return self._context.verify(raw_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password digest could not be parsed")
            return False

    def dummy_verify(self) -> bool:
        """
        Spend about as long as a real verify. Used when no account matches so
        response timing does not reveal whether an email is registered.
        """
        return self._context.dummy_verify()


# -----------------------------------------------------------------------------
# JWT Token Handling
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class SessionClaims:
    """Identity facts carried by a verified access token."""
    subject_id: str
    email: str
    role: str
    issued_at: datetime.datetime
    expires_at: datetime.datetime


class TokenService:
    """
    Issue and verify HS256 access tokens.

    Payload format:
        {"sub": user_id, "email": ..., "role": ..., "iat": ..., "exp": ...}
    """

    def __init__(self, secret_key: str, ttl: datetime.timedelta = ACCESS_TOKEN_TTL):
        self._secret_key = secret_key
        self.ttl = ttl

    def issue(
        self,
        subject_id: str,
        email: str,
        role: str,
        now: Optional[datetime.datetime] = None,
    ) -> str:
        """
        Create a signed access token that expires `ttl` after `now`.

        `now` defaults to the current UTC time.
        """
        issued_at = int((now or datetime.datetime.now(datetime.timezone.utc)).timestamp())
        to_encode: Dict[str, Any] = {
            "sub": subject_id,
            "email": email,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + int(self.ttl.total_seconds()),
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Optional[SessionClaims]:
        """
        Decode and validate a token.
        Returns SessionClaims if valid, None for every kind of invalid token.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[JWT_ALGORITHM])
        except JWTError:
            return None

        try:
            return SessionClaims(
                subject_id=_require_str(payload, "sub"),
                email=_require_str(payload, "email"),
                role=_require_str(payload, "role"),
                issued_at=_timestamp(payload["iat"]),
                expires_at=_timestamp(payload["exp"]),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return None


def _require_str(payload: Dict[str, Any], key: str) -> str:
    value = payload[key]
    if not isinstance(value, str) or not value:
        raise ValueError(key)
    return value


def _timestamp(value: Any) -> datetime.datetime:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError("timestamp claim must be numeric")
    return datetime.datetime.fromtimestamp(value, tz=datetime.timezone.utc)
