from __future__ import annotations

from ..extensions import db


class Product(db.Model):
    """
    Catalog item with exactly one owning principal.

    OWNERSHIP: owner_user_id is the only link between the catalog and the
    management tree. Ownership never spans principals, so a product is in a
    scope iff its owner is.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_owner_active", "owner_user_id", "is_active"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    owner_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(64), nullable=True, index=True)

    # Authoritative storage in cents (frontend may only format for display)
    price_cents = db.Column(db.Integer, nullable=False, default=0)
    stock = db.Column(db.Integer, nullable=False, default=0)

    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    owner = db.relationship("User", backref=db.backref("products", lazy=True))

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} owner={self.owner_user_id}>"
