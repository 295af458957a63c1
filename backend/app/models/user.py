"""
user.py — In-Memory Model for Application Users

Purpose:
- Represent registered users of the mock API.
- Stores hashed passwords only, never raw.
- `public()` produces the view returned to clients (no password digest).

Used by:
- services/accounts.py (registration, login, lookup)
- api/auth.py (responses)
"""

from typing import Literal

from app.models.base import Record

Role = Literal["user", "admin"]

DEFAULT_ROLE: Role = "user"
ADMIN_ROLE: Role = "admin"


class UserPublic(Record):
    id: str
    name: str
    email: str
    role: Role


class User(Record):
    id: str
    name: str

    # Authentication fields
    email: str  # always stored lowercase
    password_hash: str

    role: Role = DEFAULT_ROLE

    def public(self) -> UserPublic:
        return UserPublic(id=self.id, name=self.name, email=self.email, role=self.role)

    def __repr__(self):
        return f"<User {self.email}>"
