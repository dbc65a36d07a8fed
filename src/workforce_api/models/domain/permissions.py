"""Permission resolution.

A user's effective permissions are the strict union of the permissions of
every role they hold. There are no deny rules. Holding the super-admin role
yields the :class:`AllPermissions` variant, which answers every check with
``True`` before any set membership is consulted.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Iterable, Union
from uuid import UUID

SUPER_ADMIN_ROLE = "SUPER_ADMIN"


class Capability(StrEnum):
    """Closed set of permission-set shapes."""

    ALL = "all"
    GRANTED = "granted"


@dataclass(frozen=True)
class PermissionGrant:
    """A single permission code, optionally bound to one worksite."""

    code: str
    worksite_id: UUID | None = None


@dataclass(frozen=True)
class RoleAssignment:
    """Input to resolution: one role held by a user."""

    role_code: str
    permission_codes: tuple[str, ...]
    site_scoped: bool = False
    worksite_id: UUID | None = None


@dataclass(frozen=True)
class AllPermissions:
    """Wildcard capability held by super administrators."""

    capability: Capability = Capability.ALL

    @property
    def codes(self) -> frozenset[str]:
        return frozenset()

    def allows(self, code: str) -> bool:
        return True

    def allows_at(self, code: str, worksite_id: UUID | None) -> bool:
        return True


@dataclass(frozen=True)
class GrantedPermissions:
    """Explicit union of grants across a user's roles."""

    grants: frozenset[PermissionGrant] = field(default_factory=frozenset)
    capability: Capability = Capability.GRANTED

    @property
    def codes(self) -> frozenset[str]:
        return frozenset(grant.code for grant in self.grants)

    def allows(self, code: str) -> bool:
        """Check a permission ignoring worksite scope."""
        return code in self.codes

    def allows_at(self, code: str, worksite_id: UUID | None) -> bool:
        """Check a permission against a resource on a given worksite.

        Unscoped grants apply everywhere; site-scoped grants apply only to
        resources on their own worksite.
        """
        for grant in self.grants:
            if grant.code != code:
                continue
            if grant.worksite_id is None or grant.worksite_id == worksite_id:
                return True
        return False


PermissionSet = Union[AllPermissions, GrantedPermissions]


def resolve_permissions(assignments: Iterable[RoleAssignment]) -> PermissionSet:
    """Resolve the effective permission set for a list of role assignments.

    Args:
        assignments: Roles held by the user

    Returns:
        AllPermissions if any role is the super-admin role, otherwise the
        union of every role's grants. A site-scoped role held without a
        worksite grants nothing.
    """
    grants: set[PermissionGrant] = set()
    for assignment in assignments:
        if assignment.role_code == SUPER_ADMIN_ROLE:
            return AllPermissions()
        if assignment.site_scoped and assignment.worksite_id is None:
            continue
        scope = assignment.worksite_id if assignment.site_scoped else None
        for code in assignment.permission_codes:
            grants.add(PermissionGrant(code=code, worksite_id=scope))
    return GrantedPermissions(grants=frozenset(grants))
