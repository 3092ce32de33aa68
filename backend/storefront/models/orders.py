from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z
from storefront.validation import format_cents


class Order(db.Model):
    """
    Order header. Written in the same transaction as its items, so an order
    row without items is never committed.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.CheckConstraint("total_cents >= 0", name="ck_orders_total_non_negative"),
        db.Index("ix_orders_user_id", "user_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)

    # Recomputed server-side from product prices at order time
    total_cents = db.Column(db.Integer, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    buyer = db.relationship("User", backref=db.backref("orders", lazy=True))
    items = db.relationship(
        "OrderItem",
        backref="order",
        lazy=True,
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.id",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "total": format_cents(self.total_cents),
            "total_cents": self.total_cents,
            "created_at": to_utc_z(self.created_at),
            "items": [item.to_dict() for item in self.items],
        }


class OrderItem(db.Model):
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
        db.Index("ix_order_items_order_id", "order_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)

    # Unit price captured when the order was placed
    unit_price_cents = db.Column(db.Integer, nullable=False)

    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": format_cents(self.unit_price_cents),
            "unit_price_cents": self.unit_price_cents,
            "line_total_cents": self.unit_price_cents * self.quantity,
        }
