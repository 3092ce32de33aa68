from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z
from storefront.validation import format_cents


class Product(db.Model):
    """
    Product listing owned by a seller.

    Prices are stored in cents; the API exposes them as two-place decimal
    strings. Listings with zero stock stay in the table but are hidden from
    the public catalog.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
        db.CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        db.Index("ix_products_seller_id", "seller_id"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)

    # Authoritative storage in cents
    price_cents = db.Column(db.Integer, nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)

    seller_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    seller = db.relationship("User", backref=db.backref("products", lazy=True, passive_deletes=True))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": format_cents(self.price_cents),
            "price_cents": self.price_cents,
            "stock": self.stock,
            "seller_id": self.seller_id,
            "seller_email": self.seller.email if self.seller else None,
            "created_at": to_utc_z(self.created_at),
        }
