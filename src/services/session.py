# src/services/session.py

"""Explicit session lifecycle: sign-up, sign-in, sign-out, notifications.

The current :class:`Session` is owned by a :class:`SessionManager` that
is passed to whoever needs it. A session is immutable; signing in builds
a new one and signing out drops it, and every change is pushed to the
registered listeners.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from src.filters.product_validator import ProductValidator
from src.models.account import Account, Role
from src.models.errors import AuthError, PermissionDeniedError
from src.services.access_policy import (
    Capabilities,
    parse_role,
    resolve_capabilities,
)
from src.storage.account_store import AccountStore

logger = logging.getLogger("sims.session")

SessionListener = Callable[["Session | None"], None]


@dataclass(frozen=True)
class Session:
    """An authenticated user together with their resolved capabilities."""

    account: Account
    role: Role | None
    capabilities: Capabilities = field(default_factory=Capabilities)

    @property
    def username(self) -> str:
        return self.account.username

    @property
    def role_label(self) -> str:
        """Role name for badges, e.g. ``Admin``; ``-`` without a role."""
        return self.role.value.capitalize() if self.role else "-"


def build_session(account: Account) -> Session:
    """Resolve the account's role into a new :class:`Session`."""
    # Accounts without a role row are plain users
    role = (
        Role.USER if account.role is None else parse_role(account.role)
    )
    return Session(
        account=account,
        role=role,
        capabilities=resolve_capabilities(role),
    )


class SessionManager:
    """Owns the current session and notifies listeners when it changes."""

    def __init__(self, accounts: AccountStore) -> None:
        self.accounts = accounts
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    @property
    def current(self) -> Session | None:
        return self._session

    @property
    def capabilities(self) -> Capabilities:
        """Capabilities of the active session, or none when signed out."""
        if self._session is None:
            return resolve_capabilities(None)
        return self._session.capabilities

    def require(self) -> Session:
        """Return the active session or raise :class:`AuthError`."""
        if self._session is None:
            raise AuthError("Please sign in first")
        return self._session

    def require_capability(self, name: str) -> Session:
        """Return the session if it has capability *name*."""
        session = self.require()
        if not getattr(session.capabilities, name):
            logger.warning(
                "Denied %s for %s (role=%s)",
                name,
                session.username,
                session.role_label,
            )
            raise PermissionDeniedError(
                "You do not have permission to perform this action"
            )
        return session

    # ── Notifications ────────────────────────────────────

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register *listener*; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _replace(self, session: Session | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    # ── Lifecycle ────────────────────────────────────────

    def sign_up(self, username: str, password: str) -> Account:
        """Register a new account; the very first account is an admin."""
        name = ProductValidator.validate_credentials(username, password)
        role = Role.ADMIN if self.accounts.count() == 0 else Role.USER
        return self.accounts.create_account(name, password, role)

    def authenticate(self, username: str, password: str) -> Account:
        """Check credentials without touching the current session.

        Safe to call from a worker thread; pair it with
        :meth:`start_session` on the thread that owns the listeners.
        """
        name = ProductValidator.validate_credentials(username, password)
        return self.accounts.authenticate(name, password)

    def sign_in(self, username: str, password: str) -> Session:
        """Authenticate and replace the current session."""
        return self.start_session(self.authenticate(username, password))

    def start_session(self, account: Account) -> Session:
        """Make *account* the signed-in user and notify listeners."""
        session = build_session(account)
        logger.info(
            "Signed in %s (role=%s)", session.username, session.role_label,
        )
        self._replace(session)
        return session

    def sign_out(self) -> None:
        """Tear down the current session."""
        if self._session is not None:
            logger.info("Signed out %s", self._session.username)
        self._replace(None)

    def refresh_role(self) -> Session | None:
        """Re-read the signed-in account's role and rebuild the session."""
        if self._session is None:
            return None
        account = self.accounts.find(self._session.username)
        if account is None:
            self._replace(None)
            return None
        session = build_session(account)
        self._replace(session)
        return session
