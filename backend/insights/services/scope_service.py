# Overview: Ownership scope; which principals and catalog items a principal may see.

from __future__ import annotations

from insights.extensions import db
from insights.models import Product, User
from insights.services.hierarchy_service import HierarchyIndex, load_hierarchy
from insights.services.permission_service import is_top_level


class GlobalScope:
    """Unbounded scope used for the top-level role. Contains every id."""

    def __init__(self, name: str):
        self.name = name

    def __contains__(self, item_id) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<{self.name}>"


ALL = GlobalScope("ALL")
ALL_ITEMS = GlobalScope("ALL_ITEMS")


def is_global(scope) -> bool:
    return isinstance(scope, GlobalScope)


def scoped_user_ids(user: User, index: HierarchyIndex | None = None):
    """ALL for the top-level role, otherwise descendants ∪ {self}."""
    if is_top_level(user):
        return ALL

    index = index or load_hierarchy()
    if user.id not in index:
        # Principal is soft-deleted or unknown; it sees only itself
        return frozenset({user.id})
    return frozenset(index.descendants_of(user.id) | {user.id})


def product_ids_owned_by(user_ids) -> frozenset[int]:
    if is_global(user_ids):
        return known_product_ids()
    if not user_ids:
        return frozenset()
    rows = db.session.query(Product.id).filter(Product.owner_user_id.in_(sorted(user_ids))).all()
    return frozenset(row.id for row in rows)


def scoped_product_ids(user: User, index: HierarchyIndex | None = None):
    """ALL_ITEMS for the top-level role, otherwise ids of items owned inside scope."""
    if is_top_level(user):
        return ALL_ITEMS
    return product_ids_owned_by(scoped_user_ids(user, index))


def known_product_ids() -> frozenset[int]:
    """Every catalog item id currently on file; used to spot dangling line references."""
    return frozenset(product_id for (product_id,) in db.session.query(Product.id).all())


def count_products(product_scope) -> int:
    if is_global(product_scope):
        return db.session.query(Product).count()
    return len(product_scope)
