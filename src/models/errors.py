# src/models/errors.py

"""Error taxonomy for inventory operations.

Raised by the validator, the stores and the inventory service. The TUI
and CLI catch :class:`InventoryError` and turn it into a notification;
none of these errors is fatal and every failed action can be retried.
"""


class InventoryError(Exception):
    """Base class for all user-reportable inventory errors."""


class ValidationError(InventoryError):
    """Input failed a field constraint; detected before any store call."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class DuplicateError(InventoryError):
    """A uniqueness constraint was violated (product name/category or username)."""


class StoreError(InventoryError):
    """The store failed: missing record, I/O or database error."""


class EmptyExportError(InventoryError):
    """The selected report has no rows to export."""


class AuthError(InventoryError):
    """Sign-in failed or no session is active."""


class PermissionDeniedError(InventoryError):
    """The current session lacks the capability for this action."""
