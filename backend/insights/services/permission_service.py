# Overview: Permission resolution and role-template administration.

"""
Permission Resolution for the Two-Layer Model

Effective permissions = role template permissions ∪ principal additions.
The top-level role bypasses both layers and passes every check.

RULES:
- Deny by default; a permission must be granted by template or addition
- effective_permissions() returns a new value per call and never mutates
  the principal
- Missing template: warn and treat as empty (check_role_templates() is the
  strict audit used by operators)
"""

import logging

from ..errors import AuthorizationError, ConfigurationError, NotFoundError
from ..extensions import db
from ..models import Role, RolePermission, User, UserPermission
from ..permissions import (
    DEFAULT_ROLE_PERMISSIONS,
    ROLE_DESCRIPTIONS,
    ROLE_NAMES,
    ROLE_TYPES,
    TOP_LEVEL_ROLE,
    validate_permission_code,
)
from insights.time_utils import utcnow


logger = logging.getLogger(__name__)


class UniversalPermissions:
    """Sentinel permission set that contains every permission code."""

    def __contains__(self, code) -> bool:
        return True

    def __repr__(self) -> str:
        return "<ALL_PERMISSIONS>"


ALL_PERMISSIONS = UniversalPermissions()


def is_top_level(user: User) -> bool:
    return user.role == TOP_LEVEL_ROLE


def get_role_template(role_name: str) -> Role | None:
    return db.session.query(Role).filter_by(name=role_name).first()


def get_template_permissions(role_name: str) -> frozenset[str]:
    """
    Baseline permission codes for a role.

    A missing template contributes nothing; it is logged as a configuration
    warning so operators can repair the seed data.
    """
    role = get_role_template(role_name)
    if role is None:
        logger.warning("Role template missing for role %r; treating as empty", role_name)
        return frozenset()
    return frozenset(role.permission_codes)


def get_user_permissions(user_id: int) -> frozenset[str]:
    """Principal-specific additions."""
    rows = db.session.query(UserPermission.permission_code).filter_by(user_id=user_id).all()
    return frozenset(row.permission_code for row in rows)


def effective_permissions(user: User):
    """
    Compute the effective capability set for a principal.

    Returns ALL_PERMISSIONS for the top-level role, otherwise a new frozenset
    (template ∪ additions) on every call.
    """
    if is_top_level(user):
        return ALL_PERMISSIONS
    return get_template_permissions(user.role) | get_user_permissions(user.id)


def has_permission(user: User, permission_code: str) -> bool:
    """
    Check if user has a specific permission.

    Returns True if user has permission, False otherwise.
    """
    return permission_code in effective_permissions(user)


def require_permission(user: User, permission_code: str, resource: str | None = None) -> None:
    """
    Require user to have permission, raise AuthorizationError if not.

    Denials are logged; grants are not.

    Usage:
        require_permission(user, "report_view", resource="/api/dashboard/overview")
    """
    if has_permission(user, permission_code):
        return

    logger.warning(
        "Permission denied: user_id=%s role=%s permission=%s resource=%s",
        user.id, user.role, permission_code, resource,
    )
    raise AuthorizationError(f"Permission denied: {permission_code}")


def check_role_templates() -> list[str]:
    """
    Verify every known role has a template.

    Returns the list of role names checked. Raises ConfigurationError naming
    every missing template. The top-level role is exempt.
    """
    present = {name for (name,) in db.session.query(Role.name).all()}
    missing = [name for name in ROLE_NAMES if name != TOP_LEVEL_ROLE and name not in present]
    if missing:
        raise ConfigurationError(f"Missing role templates: {', '.join(missing)}")
    return [name for name in ROLE_NAMES if name != TOP_LEVEL_ROLE]


def _require_template_editor(acting_user: User | None) -> None:
    # None means a trusted caller (CLI, seeding)
    if acting_user is not None and not is_top_level(acting_user):
        raise AuthorizationError("Only the top-level role may edit role templates")


def _require_known_code(permission_code: str) -> None:
    if not validate_permission_code(permission_code):
        raise ValueError(f"Permission '{permission_code}' not found")


def initialize_role_templates() -> int:
    """
    Seed role templates from DEFAULT_ROLE_PERMISSIONS.

    Creates missing Role rows and missing RolePermission links.
    Idempotent: Safe to run multiple times (skips existing).
    Returns the number of rows created.
    """
    created_count = 0

    for role_name, permission_codes in DEFAULT_ROLE_PERMISSIONS.items():
        role = get_role_template(role_name)
        if not role:
            role = Role(
                name=role_name,
                type=ROLE_TYPES[role_name],
                description=ROLE_DESCRIPTIONS[role_name],
            )
            db.session.add(role)
            db.session.flush()
            created_count += 1

        existing = role.permission_codes
        for permission_code in permission_codes:
            if permission_code in existing:
                continue
            db.session.add(RolePermission(role_id=role.id, permission_code=permission_code))
            created_count += 1

    db.session.commit()
    return created_count


def grant_permission_to_role(role_name: str, permission_code: str, acting_user: User | None = None) -> RolePermission:
    """Grant a permission to a role template."""
    _require_template_editor(acting_user)
    _require_known_code(permission_code)

    role = get_role_template(role_name)
    if not role:
        raise NotFoundError(f"Role '{role_name}' not found")

    existing = db.session.query(RolePermission).filter_by(
        role_id=role.id,
        permission_code=permission_code,
    ).first()
    if existing:
        return existing  # Already granted

    role_permission = RolePermission(role_id=role.id, permission_code=permission_code)
    db.session.add(role_permission)
    db.session.commit()
    return role_permission


def revoke_permission_from_role(role_name: str, permission_code: str, acting_user: User | None = None) -> bool:
    """Revoke a permission from a role template."""
    _require_template_editor(acting_user)

    role = get_role_template(role_name)
    if not role:
        raise NotFoundError(f"Role '{role_name}' not found")

    role_permission = db.session.query(RolePermission).filter_by(
        role_id=role.id,
        permission_code=permission_code,
    ).first()

    if role_permission:
        db.session.delete(role_permission)
        db.session.commit()
        return True

    return False  # Wasn't granted in the first place


def set_role_permissions(role_name: str, permission_codes, acting_user: User | None = None) -> Role:
    """Replace a role template's permission set."""
    _require_template_editor(acting_user)

    codes = set(permission_codes)
    for code in codes:
        _require_known_code(code)

    role = get_role_template(role_name)
    if not role:
        raise NotFoundError(f"Role '{role_name}' not found")

    current = role.permission_codes
    for rp in list(role.role_permissions):
        if rp.permission_code not in codes:
            role.role_permissions.remove(rp)
    for code in sorted(codes - current):
        role.role_permissions.append(RolePermission(permission_code=code))

    db.session.commit()
    return role


def grant_user_permission(
    *,
    user_id: int,
    permission_code: str,
    granted_by_user_id: int | None = None,
) -> UserPermission:
    """Add a principal-specific permission on top of the role template."""
    _require_known_code(permission_code)

    user = db.session.get(User, user_id)
    if not user:
        raise NotFoundError(f"User {user_id} not found")

    grant = db.session.query(UserPermission).filter_by(
        user_id=user_id,
        permission_code=permission_code,
    ).first()
    if grant:
        return grant

    grant = UserPermission(
        user_id=user_id,
        permission_code=permission_code,
        granted_by_user_id=granted_by_user_id,
        granted_at=utcnow(),
    )
    db.session.add(grant)
    db.session.commit()
    return grant


def revoke_user_permission(*, user_id: int, permission_code: str) -> bool:
    """Remove a principal-specific permission. The role template is untouched."""
    grant = db.session.query(UserPermission).filter_by(
        user_id=user_id,
        permission_code=permission_code,
    ).first()

    if not grant:
        return False

    db.session.delete(grant)
    db.session.commit()
    return True
