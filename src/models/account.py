# src/models/account.py

"""Account and role models for authenticated sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    """Roles a session can carry."""

    ADMIN = "admin"
    USER = "user"
    VIEWER = "viewer"


@dataclass(frozen=True)
class Account:
    """A registered user; the password hash never leaves the store."""

    id: str
    username: str
    email: str
    role: str | None
    created_at: datetime
