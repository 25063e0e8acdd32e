# Overview: Permission category constants for grouping related permissions.


class PermissionCategory:
    """Permission categories for organization and UI display."""
    USERS = "USERS"
    PRODUCTS = "PRODUCTS"
    CATEGORIES = "CATEGORIES"
    ORDERS = "ORDERS"
    PROVIDERS = "PROVIDERS"
    REPORTS = "REPORTS"
    SYSTEM = "SYSTEM"
