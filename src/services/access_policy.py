# src/services/access_policy.py

"""Role to capability mapping."""

import logging
from dataclasses import dataclass

from src.models.account import Role

logger = logging.getLogger("sims.access")


@dataclass(frozen=True)
class Capabilities:
    """What a session may do."""

    can_modify: bool = False
    can_view_audit: bool = False
    can_export: bool = False


NO_CAPABILITIES = Capabilities()

_POLICY: dict[Role, Capabilities] = {
    Role.ADMIN: Capabilities(
        can_modify=True, can_view_audit=True, can_export=True,
    ),
    Role.USER: Capabilities(can_modify=True),
    Role.VIEWER: NO_CAPABILITIES,
}


def parse_role(role: Role | str | None) -> Role | None:
    """Coerce a stored or user-supplied role value; unknown → ``None``."""
    if role is None or isinstance(role, Role):
        return role
    try:
        return Role(str(role).strip().lower())
    except ValueError:
        logger.warning("Unrecognized role %r, treating as no role", role)
        return None


def resolve_capabilities(role: Role | str | None) -> Capabilities:
    """Capabilities for *role*; unknown or missing roles get none."""
    parsed = parse_role(role)
    if parsed is None:
        return NO_CAPABILITIES
    return _POLICY[parsed]
