# Overview: Role names, rank table and default role templates.

from types import MappingProxyType


SUPER_ADMIN = "super_admin"
ADMIN = "admin"
MANAGER = "manager"
PROVIDER = "provider"
CUSTOMER = "customer"

TOP_LEVEL_ROLE = SUPER_ADMIN

# Higher rank manages lower rank. Fixed at import time.
ROLE_RANK = MappingProxyType({
    SUPER_ADMIN: 5,
    ADMIN: 4,
    MANAGER: 3,
    PROVIDER: 2,
    CUSTOMER: 1,
})

ROLE_NAMES = tuple(sorted(ROLE_RANK, key=ROLE_RANK.get, reverse=True))

# Dashboard-capable roles vs storefront roles
ROLE_TYPES = MappingProxyType({
    SUPER_ADMIN: "admin",
    ADMIN: "admin",
    MANAGER: "user",
    PROVIDER: "user",
    CUSTOMER: "user",
})

ROLE_DESCRIPTIONS = MappingProxyType({
    SUPER_ADMIN: "Top-level operator with universal access",
    ADMIN: "Administrator delegated by the operator",
    MANAGER: "Regional manager with elevated privileges",
    PROVIDER: "Fulfillment provider with limited access",
    CUSTOMER: "Storefront customer",
})

# Baseline templates seeded at setup. The top-level role needs no template
# entries because it bypasses permission checks entirely.
DEFAULT_ROLE_PERMISSIONS = {
    SUPER_ADMIN: [],
    ADMIN: [
        "user_create", "user_read", "user_update", "user_delete",
        "product_create", "product_read", "product_update", "product_delete",
        "category_read",
        "order_read", "order_update",
        "provider_create", "provider_read", "provider_update", "provider_delete",
        "report_view",
    ],
    MANAGER: [
        "user_read",
        "product_create", "product_read", "product_update",
        "category_read",
        "order_read", "order_update",
        "provider_create", "provider_read", "provider_update",
        "report_view",
    ],
    PROVIDER: [
        "product_create", "product_read", "product_update",
        "category_read",
        "order_read",
    ],
    CUSTOMER: [
        "product_read",
        "category_read",
    ],
}


def role_rank(role: str) -> int:
    """Rank of a role name; unknown roles rank below every known one."""
    return ROLE_RANK.get(role, 0)
