# src/services/audit.py

"""Readable summaries of audit log entries."""

from collections import Counter
from collections.abc import Iterable
from decimal import Decimal, InvalidOperation

from src.config.locales import ui_text
from src.models.audit_entry import AuditEntry

TRACKED_KEYS: tuple[str, ...] = (
    "name",
    "category",
    "quantity",
    "price",
    "low_stock_threshold",
)

KNOWN_ACTIONS: tuple[str, ...] = ("create", "update", "delete")


def _differs(key: str, old: object, new: object) -> bool:
    """Compare snapshot values; prices compare by amount, not text."""
    if key == "price" and old is not None and new is not None:
        try:
            return Decimal(str(old)) != Decimal(str(new))
        except InvalidOperation:
            return old != new
    return old != new


def change_summary(entry: AuditEntry) -> str:
    """One-line description of what an entry changed.

    Creates and deletes show the product name; updates list every
    tracked field whose value differs as ``key: old → new``.
    """
    if entry.action == "create" and entry.new_data:
        return str(entry.new_data.get("name") or "-")
    if entry.action == "delete" and entry.old_data:
        return str(entry.old_data.get("name") or "-")
    if entry.action == "update" and entry.old_data and entry.new_data:
        changes = [
            f"{key}: {entry.old_data.get(key)} → {entry.new_data.get(key)}"
            for key in TRACKED_KEYS
            if _differs(key, entry.old_data.get(key), entry.new_data.get(key))
        ]
        return ", ".join(changes) if changes else "-"
    return "-"


def action_counts(entries: Iterable[AuditEntry]) -> dict[str, int]:
    """Entries per action; known actions always present."""
    counts = Counter(e.action for e in entries)
    result = {action: counts.get(action, 0) for action in KNOWN_ACTIONS}
    for action, count in counts.items():
        result.setdefault(action, count)
    return result


def action_label(action: str, locale: str) -> str:
    """Localized badge text for an audit action."""
    return ui_text(action, locale)
