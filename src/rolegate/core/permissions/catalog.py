"""Built-in role and permission names."""

from enum import StrEnum


class SystemRole(StrEnum):
    """Roles created by the seed command.

    ``SUPER_ADMIN`` is the sentinel role: holders pass every permission check.
    """

    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    USERS = "Users"


class PermissionName(StrEnum):
    """Capabilities checked by the route permission table."""

    VIEW_USERS = "view_users"
    ADD_USERS = "add_users"
    UPDATE_USERS = "update_users"
    DELETE_USERS = "delete_users"

    VIEW_ROLES = "view_roles"
    ADD_ROLES = "add_roles"
    UPDATE_ROLES = "update_roles"
    DELETE_ROLES = "delete_roles"

    VIEW_PERMISSIONS = "view_permissions"
    ADD_PERMISSIONS = "add_permissions"
    UPDATE_PERMISSIONS = "update_permissions"
    DELETE_PERMISSIONS = "delete_permissions"


SUPER_ADMIN = SystemRole.SUPER_ADMIN.value

PERMISSION_DESCRIPTIONS: dict[PermissionName, str] = {
    PermissionName.VIEW_USERS: "List and view users",
    PermissionName.ADD_USERS: "Create users",
    PermissionName.UPDATE_USERS: "Update users",
    PermissionName.DELETE_USERS: "Delete users",
    PermissionName.VIEW_ROLES: "List and view roles",
    PermissionName.ADD_ROLES: "Create roles",
    PermissionName.UPDATE_ROLES: "Update roles and their permissions",
    PermissionName.DELETE_ROLES: "Delete roles",
    PermissionName.VIEW_PERMISSIONS: "List and view permissions",
    PermissionName.ADD_PERMISSIONS: "Create permissions",
    PermissionName.UPDATE_PERMISSIONS: "Update permissions",
    PermissionName.DELETE_PERMISSIONS: "Delete permissions",
}
