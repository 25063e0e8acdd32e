from __future__ import annotations

from ..extensions import db


class Order(db.Model):
    """
    Storefront order.

    MIXED VENDOR: lines may reference products of different owners, so an
    order never has a single owner.

    created_at is the only timestamp used for bucketing. The stored
    *_price_cents totals include tax and shipping and are never used for
    attribution, which is derived from lines.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_status_created", "status", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    buyer_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    status = db.Column(db.String(16), nullable=False, default="pending", index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), index=True)

    # Shipping info
    shipping_address = db.Column(db.String(255), nullable=True)
    shipping_city = db.Column(db.String(128), nullable=True)
    shipping_state = db.Column(db.String(128), nullable=True)
    shipping_country = db.Column(db.String(128), nullable=True)
    shipping_pincode = db.Column(db.String(16), nullable=True)

    # Stored totals (all amounts in cents)
    items_price_cents = db.Column(db.Integer, nullable=False, default=0)
    tax_price_cents = db.Column(db.Integer, nullable=False, default=0)
    shipping_price_cents = db.Column(db.Integer, nullable=False, default=0)
    total_price_cents = db.Column(db.Integer, nullable=False, default=0)

    buyer = db.relationship("User", backref=db.backref("orders", lazy=True))
    lines = db.relationship(
        "OrderLine",
        backref="order",
        lazy="selectin",
        order_by="OrderLine.id",
    )

    def __repr__(self) -> str:
        return f"<Order id={self.id} status={self.status!r}>"


class OrderLine(db.Model):
    """Individual line item on an order, priced at purchase time."""
    __tablename__ = "order_lines"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    # Not a foreign key: lines may reference deleted catalog items
    product_id = db.Column(db.Integer, nullable=False, index=True)

    name = db.Column(db.String(255), nullable=False, default="")
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
