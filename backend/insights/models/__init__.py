from .auth import User, UserPermission, Role, RolePermission, SessionToken
from .catalog import Product
from .orders import Order, OrderLine

__all__ = [
    'User', 'UserPermission', 'Role', 'RolePermission', 'SessionToken',
    'Product',
    'Order', 'OrderLine',
]
