"""
cvdesk_gateway.access.capabilities

Roles, capabilities, and the role-permission table.

Responsibilities:
- Define the closed `Role` and `Capability` vocabularies.
- Answer "does role R have capability C?" for any pair of strings.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


class Role(enum.StrEnum):
    admin = "admin"
    manager = "manager"
    designer = "designer"
    reviewer = "reviewer"


class Capability(enum.StrEnum):
    view_all = "view_all"
    edit_all = "edit_all"
    view_accounts = "view_accounts"
    manage_users = "manage_users"


# New sign-ins start here; see `services.sign_in`.
DEFAULT_ROLE = Role.designer


@dataclass(frozen=True, slots=True)
class RolePermissionTable:
    """
    Immutable role -> capability-set mapping.

    Stored as plain strings so lookups are exact string comparisons regardless of
    whether callers pass enum members or raw values.
    """

    grants: Mapping[str, frozenset[str]] = field(default_factory=dict)

    @classmethod
    def build(cls, grants: Mapping[Role, Iterable[Capability]]) -> RolePermissionTable:
        table = {role.value: frozenset() for role in Role}
        for role, capabilities in grants.items():
            table[Role(role).value] = frozenset(Capability(c).value for c in capabilities)
        return cls(grants=MappingProxyType(table))

    def capabilities_for(self, role: str) -> frozenset[str]:
        # Unknown roles hold nothing.
        return self.grants.get(str(role), frozenset())

    def has_capability(self, role: str, capability: str) -> bool:
        return str(capability) in self.capabilities_for(role)


DEFAULT_ROLE_GRANTS: dict[Role, tuple[Capability, ...]] = {
    Role.admin: (
        Capability.view_all,
        Capability.edit_all,
        Capability.view_accounts,
        Capability.manage_users,
    ),
    Role.manager: (Capability.view_all, Capability.edit_all),
    Role.designer: (),
    Role.reviewer: (),
}


# --- Module Notes -----------------------------------------------------------
# The same table answers both the routing guard and advisory UI checks
# (`guard.principal_has_capability`), so the two cannot drift apart.
