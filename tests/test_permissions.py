"""Permission resolution tests."""

from uuid import uuid4

import pytest

from workforce_api.constants.permissions import PERMISSION_CATALOG, SYSTEM_ROLES, Permissions
from workforce_api.models.domain.permissions import (
    AllPermissions,
    GrantedPermissions,
    RoleAssignment,
    resolve_permissions,
)
from workforce_api.models.domain.user import CurrentUser


def _user(permission_set) -> CurrentUser:
    return CurrentUser(id=uuid4(), email="user@example.com", name="User", permission_set=permission_set)


class TestResolvePermissions:
    """Union of role grants."""

    def test_no_roles_grants_nothing(self) -> None:
        permissions = resolve_permissions([])
        assert isinstance(permissions, GrantedPermissions)
        assert not permissions.allows(Permissions.EMPLOYEES_VIEW)

    def test_union_of_roles(self) -> None:
        permissions = resolve_permissions(
            [
                RoleAssignment("HR", (Permissions.EMPLOYEES_VIEW,)),
                RoleAssignment("ACCOUNTANT", (Permissions.PAYROLL_VIEW,)),
            ]
        )
        assert permissions.allows(Permissions.EMPLOYEES_VIEW)
        assert permissions.allows(Permissions.PAYROLL_VIEW)
        assert not permissions.allows(Permissions.PAYROLL_APPROVE)

    def test_super_admin_is_wildcard(self) -> None:
        permissions = resolve_permissions(
            [RoleAssignment("HR", ()), RoleAssignment("SUPER_ADMIN", ())]
        )
        assert isinstance(permissions, AllPermissions)
        assert permissions.allows("anything.at_all")
        assert permissions.allows_at(Permissions.PAYROLL_APPROVE, uuid4())

    def test_site_scoped_grant_limited_to_worksite(self) -> None:
        site = uuid4()
        permissions = resolve_permissions(
            [RoleAssignment("FOREMAN", (Permissions.ATTENDANCE_CREATE,), site_scoped=True, worksite_id=site)]
        )
        assert permissions.allows_at(Permissions.ATTENDANCE_CREATE, site)
        assert not permissions.allows_at(Permissions.ATTENDANCE_CREATE, uuid4())
        # Unscoped checks see the code
        assert permissions.allows(Permissions.ATTENDANCE_CREATE)

    def test_unscoped_grant_applies_everywhere(self) -> None:
        permissions = resolve_permissions([RoleAssignment("HR", (Permissions.ATTENDANCE_VIEW,))])
        assert permissions.allows_at(Permissions.ATTENDANCE_VIEW, uuid4())

    def test_unscoped_role_ignores_worksite(self) -> None:
        site = uuid4()
        permissions = resolve_permissions(
            [RoleAssignment("HR", (Permissions.ATTENDANCE_VIEW,), site_scoped=False, worksite_id=site)]
        )
        assert permissions.allows_at(Permissions.ATTENDANCE_VIEW, uuid4())

    def test_site_scoped_role_without_worksite_grants_nothing(self) -> None:
        permissions = resolve_permissions(
            [
                RoleAssignment("FOREMAN", (Permissions.ATTENDANCE_EDIT,), site_scoped=True),
                RoleAssignment("VIEWER", (Permissions.ATTENDANCE_VIEW,)),
            ]
        )
        assert not permissions.allows(Permissions.ATTENDANCE_EDIT)
        assert not permissions.allows_at(Permissions.ATTENDANCE_EDIT, uuid4())
        assert permissions.allows(Permissions.ATTENDANCE_VIEW)


class TestCurrentUser:
    """Permission checks on the request user."""

    def test_super_admin_lists_wildcard(self) -> None:
        user = _user(AllPermissions())
        assert user.is_super_admin
        assert user.permissions == ["*"]

    def test_any_and_all(self) -> None:
        user = _user(resolve_permissions([RoleAssignment("HR", (Permissions.LEAVES_VIEW,))]))
        assert user.has_any_permission(Permissions.LEAVES_APPROVE, Permissions.LEAVES_VIEW)
        assert not user.has_all_permissions(Permissions.LEAVES_APPROVE, Permissions.LEAVES_VIEW)
        assert user.permissions == [Permissions.LEAVES_VIEW]


class TestCatalog:
    """Permission catalog and system roles."""

    def test_codes_are_module_dot_action(self) -> None:
        for code in PERMISSION_CATALOG:
            module, _, action = code.partition(".")
            assert module and action

    def test_catalog_has_no_duplicates(self) -> None:
        assert len(PERMISSION_CATALOG) == len(set(PERMISSION_CATALOG))

    @pytest.mark.parametrize("role_code", list(SYSTEM_ROLES))
    def test_system_role_grants_are_in_catalog(self, role_code: str) -> None:
        _, _, codes = SYSTEM_ROLES[role_code]
        assert set(codes) <= set(PERMISSION_CATALOG)

    def test_admin_holds_every_permission(self) -> None:
        _, _, codes = SYSTEM_ROLES["ADMIN"]
        assert set(codes) == set(PERMISSION_CATALOG)
