"""
accounts.py — Account Directory (In-Memory User Store)

Purpose:
- Register users with case-insensitively unique emails (stored lowercase).
- Check login credentials without revealing whether an email is registered.
- Look users up by id.

Concurrency:
- One RLock guards the user table. Password hashing happens outside the lock;
  the uniqueness check and the insert happen together under it.
- Callers on the event loop should run `register` / `authenticate_credentials`
  through `run_in_threadpool`, since both hash or verify with bcrypt.
"""

import threading
import uuid
from typing import Dict, Optional

from app.core.errors import EmailExists, InvalidCredentials, NotFound
from app.core.logging import get_logger
from app.core.security import CredentialHasher
from app.models.user import DEFAULT_ROLE, Role, User, UserPublic

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountDirectory:
    def __init__(self, hasher: CredentialHasher):
        self._hasher = hasher
        self._lock = threading.RLock()
        self._users: Dict[str, User] = {}
        self._ids_by_email: Dict[str, str] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Optional[Role] = None,
    ) -> UserPublic:
        """
        Create a user and return its public view.

        Raises:
            EmailExists: another user already has this email (any casing)
        """
        normalized = normalize_email(email)

        # Fail fast before paying for a bcrypt hash
        with self._lock:
            if normalized in self._ids_by_email:
                raise EmailExists()

        password_hash = self._hasher.hash(password)
        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=normalized,
            password_hash=password_hash,
            role=role or DEFAULT_ROLE,
        )

        with self._lock:
            if normalized in self._ids_by_email:
                raise EmailExists()
            self._users[user.id] = user
            self._ids_by_email[normalized] = user.id

        logger.info("Registered user %s with role %s", user.id, user.role)
        return user.public()

    def authenticate_credentials(self, email: str, password: str) -> User:
        """
        Return the user whose email and password match.

        Raises:
            InvalidCredentials: unknown email or wrong password (indistinguishable)
        """
        user = self._find_by_email(normalize_email(email))
        if user is None:
            self._hasher.dummy_verify()
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()

        if not self._hasher.verify(password, user.password_hash):
            logger.info("Login rejected: invalid credentials")
            raise InvalidCredentials()

        return user

    def find_by_id(self, user_id: str) -> User:
        """
        Raises:
            NotFound: no user with this id
        """
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def _find_by_email(self, normalized_email: str) -> Optional[User]:
        with self._lock:
            user_id = self._ids_by_email.get(normalized_email)
            return self._users.get(user_id) if user_id else None
