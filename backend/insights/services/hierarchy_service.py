# Overview: Management-tree traversal; descendants, ancestors and manage checks.

"""
Hierarchy Resolver

The management tree is held as an arena: every live principal indexed by id
with its superior id, plus a children map built once per request. Traversal
is iterative with a visited set, so any depth terminates and a cycle is
reported as a ConfigurationError instead of looping.

Soft-deleted principals are not loaded, so they (and anything reachable only
through them) never appear in a scope.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from ..errors import AuthorizationError, ConfigurationError, NotFoundError
from ..extensions import db
from ..models import User
from ..permissions import TOP_LEVEL_ROLE, role_rank


@dataclass(frozen=True)
class PrincipalNode:
    id: int
    role: str
    superior_id: int | None


@dataclass
class HierarchyIndex:
    nodes: dict[int, PrincipalNode] = field(default_factory=dict)
    children: dict[int, list[int]] = field(default_factory=dict)

    @classmethod
    def from_nodes(cls, nodes) -> "HierarchyIndex":
        index = cls()
        for node in nodes:
            index.nodes[node.id] = node
        for node in index.nodes.values():
            if node.superior_id is None or node.superior_id not in index.nodes:
                continue
            index.children.setdefault(node.superior_id, []).append(node.id)
        for child_ids in index.children.values():
            child_ids.sort()
        return index

    def __contains__(self, user_id: int) -> bool:
        return user_id in self.nodes

    def get(self, user_id: int) -> PrincipalNode:
        node = self.nodes.get(user_id)
        if node is None:
            raise NotFoundError(f"User {user_id} not found")
        return node

    def direct_reports(self, user_id: int) -> list[int]:
        return list(self.children.get(user_id, []))

    def descendants_of(self, user_id: int) -> set[int]:
        """
        All principals whose superior chain reaches user_id, excluding it.

        Breadth-first over direct-report edges. Reaching the root again, or
        any id twice, means the managed-by links contain a cycle.
        """
        self.get(user_id)

        visited: set[int] = set()
        queue = deque(self.children.get(user_id, []))
        while queue:
            current = queue.popleft()
            if current == user_id or current in visited:
                raise ConfigurationError(
                    f"Cycle detected in management tree at user {current} (root {user_id})"
                )
            visited.add(current)
            queue.extend(self.children.get(current, []))

        return visited

    def ancestors_of(self, user_id: int) -> list[int]:
        """Superior chain from the direct superior up to the root."""
        node = self.get(user_id)

        chain: list[int] = []
        seen = {user_id}
        current = node.superior_id
        while current is not None and current in self.nodes:
            if current in seen:
                raise ConfigurationError(
                    f"Cycle detected in management tree above user {user_id}"
                )
            seen.add(current)
            chain.append(current)
            current = self.nodes[current].superior_id

        return chain

    def is_in_hierarchy(self, superior_id: int, subordinate_id: int) -> bool:
        """True iff superior_id is a strict ancestor of subordinate_id."""
        if subordinate_id not in self.nodes:
            return False
        return superior_id in self.ancestors_of(subordinate_id)


def load_hierarchy() -> HierarchyIndex:
    """Build the arena from all live (not soft-deleted) principals."""
    rows = db.session.query(User.id, User.role, User.managed_by_user_id).filter(
        User.deleted_at.is_(None)
    ).all()
    return HierarchyIndex.from_nodes(
        PrincipalNode(id=row.id, role=row.role, superior_id=row.managed_by_user_id)
        for row in rows
    )


def get_principal(user_id: int) -> User:
    """Load a live principal or raise NotFoundError."""
    user = db.session.query(User).filter(
        User.id == user_id,
        User.deleted_at.is_(None),
    ).first()
    if not user:
        raise NotFoundError(f"User {user_id} not found")
    return user


def descendants_of(user_id: int, index: HierarchyIndex | None = None) -> set[int]:
    index = index or load_hierarchy()
    return index.descendants_of(user_id)


def is_in_hierarchy(superior_id: int, subordinate_id: int, index: HierarchyIndex | None = None) -> bool:
    index = index or load_hierarchy()
    return index.is_in_hierarchy(superior_id, subordinate_id)


def can_manage_role(user_role: str, target_role: str) -> bool:
    return role_rank(user_role) > role_rank(target_role)


def can_manage(user: User, target: User) -> bool:
    """True iff user is top-level or target's role ranks strictly below user's."""
    if user.role == TOP_LEVEL_ROLE:
        return True
    return can_manage_role(user.role, target.role)


def ensure_hierarchy_access(user: User, target_user_id: int, index: HierarchyIndex | None = None) -> None:
    """
    Require target to be the user or inside the user's management subtree.

    Raises AuthorizationError otherwise. The top-level role always passes.
    """
    if user.role == TOP_LEVEL_ROLE or user.id == target_user_id:
        return

    index = index or load_hierarchy()
    if not index.is_in_hierarchy(user.id, target_user_id):
        raise AuthorizationError("Access denied: user not in your management hierarchy")


def get_hierarchy_tree(user_id: int, index: HierarchyIndex | None = None) -> dict:
    """Nested {id, role, children} view of a principal's subtree."""
    index = index or load_hierarchy()
    # Validates the subtree before building it
    index.descendants_of(user_id)

    def _build(node_id: int) -> dict:
        node = index.nodes[node_id]
        return {
            "id": node.id,
            "role": node.role,
            "children": [_build(child) for child in index.direct_reports(node_id)],
        }

    return _build(user_id)
