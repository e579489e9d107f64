# src/storage/account_store.py

"""SQLite-backed accounts and roles for signing in to SIMS."""

import logging
import sqlite3
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import bcrypt

from src.config.settings import Settings
from src.models.account import Account, Role
from src.models.errors import AuthError, DuplicateError, StoreError

logger = logging.getLogger("sims.accounts")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS accounts (
    id            TEXT PRIMARY KEY,
    username      TEXT NOT NULL UNIQUE COLLATE NOCASE,
    email         TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at    TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_roles (
    user_id TEXT PRIMARY KEY
            REFERENCES accounts(id) ON DELETE CASCADE,
    role    TEXT NOT NULL
);
"""


def username_to_email(username: str) -> str:
    """Map a username onto the synthetic login e-mail address."""
    return f"{username.lower()}@{Settings.EMAIL_DOMAIN}"


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=Settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("ascii")


class AccountStore:
    """Accounts, password hashes and role assignments."""

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(
                str(path), check_same_thread=False,
            )
            self._conn.execute("PRAGMA foreign_keys=ON")
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(
                f"Cannot open account database at {path}: {exc}"
            ) from exc
        logger.debug("AccountStore opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def _row_to_account(self, row: tuple[Any, ...]) -> Account:
        return Account(
            id=row[0],
            username=row[1],
            email=row[2],
            role=row[3],
            created_at=datetime.fromisoformat(row[4]),
        )

    def count(self) -> int:
        """Number of registered accounts."""
        return int(
            self._conn.execute("SELECT COUNT(*) FROM accounts").fetchone()[0]
        )

    def create_account(
        self,
        username: str,
        password: str,
        role: Role = Role.USER,
    ) -> Account:
        """Register a new account; ``DuplicateError`` if the name is taken."""
        password_hash = _hash_password(password)
        account_id = str(uuid.uuid4())
        created_at = datetime.now(timezone.utc)
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO accounts (id, username, email, "
                    "password_hash, created_at) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (
                        account_id,
                        username,
                        username_to_email(username),
                        password_hash,
                        created_at.isoformat(),
                    ),
                )
                self._conn.execute(
                    "INSERT INTO user_roles (user_id, role) VALUES (?, ?)",
                    (account_id, role.value),
                )
        except sqlite3.IntegrityError as exc:
            raise DuplicateError(
                "This username is already registered"
            ) from exc
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to create account: {exc}") from exc

        logger.info("Created account %s with role %s", username, role.value)
        return Account(
            id=account_id,
            username=username,
            email=username_to_email(username),
            role=role.value,
            created_at=created_at,
        )

    def find(self, username: str) -> Account | None:
        """Look up an account (case-insensitive) with its role."""
        row = self._conn.execute(
            "SELECT a.id, a.username, a.email, r.role, a.created_at "
            "FROM accounts a LEFT JOIN user_roles r ON r.user_id = a.id "
            "WHERE a.username = ?",
            (username,),
        ).fetchone()
        return self._row_to_account(row) if row else None

    def authenticate(self, username: str, password: str) -> Account:
        """Check credentials; ``AuthError`` on any mismatch."""
        row = self._conn.execute(
            "SELECT password_hash FROM accounts WHERE username = ?",
            (username,),
        ).fetchone()
        if row is None:
            logger.info("Sign-in failed for unknown user %s", username)
            raise AuthError("Invalid username or password")

        if not bcrypt.checkpw(
            password.encode("utf-8"), row[0].encode("ascii")
        ):
            logger.info("Sign-in failed for %s: bad password", username)
            raise AuthError("Invalid username or password")

        account = self.find(username)
        if account is None:
            raise AuthError("Invalid username or password")
        return account

    def set_role(self, username: str, role: Role) -> Account:
        """Assign *role* to an existing account."""
        account = self.find(username)
        if account is None:
            raise StoreError(f"Account {username} not found")
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO user_roles (user_id, role) VALUES (?, ?) "
                    "ON CONFLICT(user_id) DO UPDATE SET role = excluded.role",
                    (account.id, role.value),
                )
        except sqlite3.Error as exc:
            raise StoreError(f"Failed to set role: {exc}") from exc
        logger.info("Role of %s set to %s", username, role.value)
        updated = self.find(username)
        if updated is None:
            raise StoreError(
                f"Account {username} was removed while setting its role"
            )
        return updated
