"""Role-based access control: models, permission resolution and route guards."""

from rolegate.core.permissions.catalog import SUPER_ADMIN, PermissionName, SystemRole
from rolegate.core.permissions.models import Permission, Role, RolePermission, UserRole


__all__ = [
    "SUPER_ADMIN",
    "Permission",
    "PermissionName",
    "Role",
    "RolePermission",
    "SystemRole",
    "UserRole",
]
