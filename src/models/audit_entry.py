# src/models/audit_entry.py

"""Audit log entry model for product changes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class AuditEntry:
    """One recorded create/update/delete of a product."""

    id: int
    user_id: str | None
    user_email: str | None
    action: str
    table_name: str
    record_id: str | None
    old_data: dict[str, Any] | None
    new_data: dict[str, Any] | None
    created_at: datetime
