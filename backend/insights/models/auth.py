from __future__ import annotations

from ..extensions import db


class User(db.Model):
    """
    Principal: an account holding one role in the management tree.

    HIERARCHY: managed_by_user_id points at the direct superior. It is null
    only for the top-level operator and for unaffiliated customers. The edges
    form a forest; the hierarchy service rejects cycles when it walks them.

    SOFT DELETE: rows are never physically removed by this engine. A non-null
    deleted_at hides the principal from every traversal and count.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.Index("ix_users_managed_by_deleted", "managed_by_user_id", "deleted_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    username = db.Column(db.String(64), nullable=False, unique=True, index=True)
    email = db.Column(db.String(255), nullable=False, unique=True)
    first_name = db.Column(db.String(30), nullable=False, default="")
    last_name = db.Column(db.String(30), nullable=False, default="")

    role = db.Column(db.String(32), nullable=False, default="customer", index=True)

    # Direct superior (tree edge)
    managed_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    deleted_at = db.Column(db.DateTime(timezone=True), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    managed_by = db.relationship("User", remote_side=[id], backref=db.backref("direct_reports", lazy=True))

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} role={self.role!r}>"


class UserPermission(db.Model):
    """
    Principal-specific permission additions.

    Additions only: they are unioned with the role template and never
    remove anything from it.
    """
    __tablename__ = "user_permissions"
    __table_args__ = (
        db.UniqueConstraint("user_id", "permission_code", name="uq_user_permissions"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    permission_code = db.Column(db.String(64), nullable=False, index=True)

    granted_by_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    granted_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    user = db.relationship("User", foreign_keys=[user_id], backref=db.backref("permission_grants", lazy=True))
    granted_by = db.relationship("User", foreign_keys=[granted_by_user_id])


class Role(db.Model):
    """
    Role template: the baseline permission set for one role name.

    Seeded at setup; editable by the top-level operator only.
    """
    __tablename__ = "roles"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(32), nullable=False, unique=True, index=True)
    type = db.Column(db.String(16), nullable=False, default="user")
    description = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    @property
    def permission_codes(self) -> set[str]:
        return {rp.permission_code for rp in self.role_permissions}


class RolePermission(db.Model):
    """Role-template to permission-code link."""
    __tablename__ = "role_permissions"
    __table_args__ = (
        db.UniqueConstraint("role_id", "permission_code", name="uq_role_permissions"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    role_id = db.Column(db.Integer, db.ForeignKey("roles.id"), nullable=False, index=True)
    permission_code = db.Column(db.String(64), nullable=False)

    assigned_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    role = db.relationship("Role", backref=db.backref("role_permissions", lazy=True, cascade="all, delete-orphan"))


class SessionToken(db.Model):
    """
    Bearer token resolving a request to its principal.

    Tokens are issued outside this engine (login flow); only the SHA-256
    hash is stored. Validation is read-only.
    """
    __tablename__ = "session_tokens"
    __table_args__ = (
        db.Index("ix_session_tokens_user_active", "user_id", "is_revoked"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Token hash (never store plaintext tokens!)
    token_hash = db.Column(db.String(255), nullable=False, unique=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False, index=True)

    is_revoked = db.Column(db.Boolean, nullable=False, default=False, index=True)
    revoked_at = db.Column(db.DateTime(timezone=True), nullable=True)

    user = db.relationship("User", backref=db.backref("sessions", lazy=True))
