# Overview: All permission definitions organized by category.
# Each permission is defined as: (code, name, description, category)

from .categories import PermissionCategory


# -- USERS --

USER_PERMISSIONS = [
    (
        "user_create",
        "Create Users",
        "Create accounts for subordinate roles",
        PermissionCategory.USERS,
    ),
    (
        "user_read",
        "View Users",
        "View accounts inside the management hierarchy",
        PermissionCategory.USERS,
    ),
    (
        "user_update",
        "Edit Users",
        "Edit accounts inside the management hierarchy",
        PermissionCategory.USERS,
    ),
    (
        "user_delete",
        "Delete Users",
        "Remove accounts inside the management hierarchy",
        PermissionCategory.USERS,
    ),
]


# -- PRODUCTS --

PRODUCT_PERMISSIONS = [
    (
        "product_create",
        "Create Products",
        "Add catalog items owned by the acting user",
        PermissionCategory.PRODUCTS,
    ),
    (
        "product_read",
        "View Products",
        "View catalog items in scope",
        PermissionCategory.PRODUCTS,
    ),
    (
        "product_update",
        "Edit Products",
        "Edit catalog items in scope (price, stock)",
        PermissionCategory.PRODUCTS,
    ),
    (
        "product_delete",
        "Delete Products",
        "Remove catalog items in scope",
        PermissionCategory.PRODUCTS,
    ),
]


# -- CATEGORIES --

CATEGORY_PERMISSIONS = [
    (
        "category_create",
        "Create Categories",
        "Add catalog categories",
        PermissionCategory.CATEGORIES,
    ),
    (
        "category_read",
        "View Categories",
        "View catalog categories",
        PermissionCategory.CATEGORIES,
    ),
    (
        "category_update",
        "Edit Categories",
        "Edit catalog categories",
        PermissionCategory.CATEGORIES,
    ),
    (
        "category_delete",
        "Delete Categories",
        "Remove catalog categories",
        PermissionCategory.CATEGORIES,
    ),
]


# -- ORDERS --

ORDER_PERMISSIONS = [
    (
        "order_read",
        "View Orders",
        "View orders containing items in scope",
        PermissionCategory.ORDERS,
    ),
    (
        "order_update",
        "Update Orders",
        "Change order status",
        PermissionCategory.ORDERS,
    ),
    (
        "order_delete",
        "Delete Orders",
        "Remove orders",
        PermissionCategory.ORDERS,
    ),
]


# -- PROVIDERS --

PROVIDER_PERMISSIONS = [
    (
        "provider_create",
        "Create Providers",
        "Onboard fulfillment providers",
        PermissionCategory.PROVIDERS,
    ),
    (
        "provider_read",
        "View Providers",
        "View fulfillment providers in scope",
        PermissionCategory.PROVIDERS,
    ),
    (
        "provider_update",
        "Edit Providers",
        "Edit fulfillment providers in scope",
        PermissionCategory.PROVIDERS,
    ),
    (
        "provider_delete",
        "Delete Providers",
        "Remove fulfillment providers in scope",
        PermissionCategory.PROVIDERS,
    ),
]


# -- REPORTS --

REPORT_PERMISSIONS = [
    (
        "report_view",
        "View Reports",
        "View dashboards, revenue trends and geo rollups for the user's scope",
        PermissionCategory.REPORTS,
    ),
]


# -- SYSTEM --

SYSTEM_PERMISSIONS = [
    (
        "role_manage",
        "Manage Roles",
        "Edit role templates (top-level operator only)",
        PermissionCategory.SYSTEM,
    ),
    (
        "settings_manage",
        "Manage Settings",
        "Change storefront settings",
        PermissionCategory.SYSTEM,
    ),
]


PERMISSION_DEFINITIONS = (
    USER_PERMISSIONS
    + PRODUCT_PERMISSIONS
    + CATEGORY_PERMISSIONS
    + ORDER_PERMISSIONS
    + PROVIDER_PERMISSIONS
    + REPORT_PERMISSIONS
    + SYSTEM_PERMISSIONS
)
