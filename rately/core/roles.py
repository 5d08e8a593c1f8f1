"""Roles and the per-route role allow-lists."""

from enum import Enum


class Role(str, Enum):
    """Closed set of account roles."""

    SYSTEM_ADMIN = "system_admin"
    NORMAL_USER = "normal_user"
    STORE_OWNER = "store_owner"


# Policy name -> roles allowed through. Routes pick a policy by name.
POLICIES: dict[str, frozenset[Role]] = {
    "admin": frozenset({Role.SYSTEM_ADMIN}),
    "normal_user": frozenset({Role.NORMAL_USER}),
    "store_owner": frozenset({Role.STORE_OWNER}),
}


def is_allowed(policy: str, role: Role | str) -> bool:
    """True if role passes the named policy. Unknown policies raise KeyError."""
    allowed = POLICIES[policy]
    try:
        return Role(role) in allowed
    except ValueError:
        return False
