# Overview: Permission system package.
# Re-exports all public APIs for convenient imports.

from .categories import PermissionCategory
from .definitions import (
    PERMISSION_DEFINITIONS,
    USER_PERMISSIONS,
    PRODUCT_PERMISSIONS,
    CATEGORY_PERMISSIONS,
    ORDER_PERMISSIONS,
    PROVIDER_PERMISSIONS,
    REPORT_PERMISSIONS,
    SYSTEM_PERMISSIONS,
)
from .roles import (
    ADMIN,
    CUSTOMER,
    DEFAULT_ROLE_PERMISSIONS,
    MANAGER,
    PROVIDER,
    ROLE_DESCRIPTIONS,
    ROLE_NAMES,
    ROLE_RANK,
    ROLE_TYPES,
    SUPER_ADMIN,
    TOP_LEVEL_ROLE,
    role_rank,
)
from .helpers import (
    get_permission_definition,
    validate_permission_code,
)

__all__ = [
    "PermissionCategory",
    "PERMISSION_DEFINITIONS",
    "USER_PERMISSIONS",
    "PRODUCT_PERMISSIONS",
    "CATEGORY_PERMISSIONS",
    "ORDER_PERMISSIONS",
    "PROVIDER_PERMISSIONS",
    "REPORT_PERMISSIONS",
    "SYSTEM_PERMISSIONS",
    "ADMIN",
    "CUSTOMER",
    "DEFAULT_ROLE_PERMISSIONS",
    "MANAGER",
    "PROVIDER",
    "ROLE_DESCRIPTIONS",
    "ROLE_NAMES",
    "ROLE_RANK",
    "ROLE_TYPES",
    "SUPER_ADMIN",
    "TOP_LEVEL_ROLE",
    "role_rank",
    "get_permission_definition",
    "validate_permission_code",
]
