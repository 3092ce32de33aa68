# backend/storefront/services/catalog_service.py
"""
Catalog Service

Product listings are owned by the seller who uploaded them. Only sellers may
create or delete listings, and a seller can only delete their own.
"""
from __future__ import annotations

from sqlalchemy.orm import Session, joinedload

from ..errors import AuthorizationError, NotFoundError
from ..models import Product, ROLE_SELLER
from ..validation import (
    MAX_STOCK,
    clean_string,
    coerce_int,
    parse_money_cents,
    require_fields,
)
from .token_service import TokenClaims

PRODUCT_REQUIRED_FIELDS = ["name", "price", "stock"]


def _require_seller(caller: TokenClaims, action: str) -> None:
    if caller.role != ROLE_SELLER:
        raise AuthorizationError(f"Only sellers can {action} products")


def validate_product_payload(payload: dict) -> dict:
    """
    Normalize an upload payload into model fields.

    Fields must be present and non-null; a price or stock of 0 is valid.
    """
    require_fields(payload, PRODUCT_REQUIRED_FIELDS)
    return {
        "name": clean_string(payload["name"], "name", max_length=255),
        "price_cents": parse_money_cents(payload["price"], "price"),
        "stock": coerce_int(payload["stock"], "stock", minimum=0, maximum=MAX_STOCK),
    }


def list_available(session: Session) -> list[dict]:
    """All products with stock on hand, in insertion order."""
    products = (
        session.query(Product)
        .options(joinedload(Product.seller))
        .filter(Product.stock > 0)
        .order_by(Product.id.asc())
        .all()
    )
    return [p.to_dict() for p in products]


def list_all(session: Session) -> list[dict]:
    """Every product, including out-of-stock listings."""
    products = (
        session.query(Product)
        .options(joinedload(Product.seller))
        .order_by(Product.id.asc())
        .all()
    )
    return [p.to_dict() for p in products]


def upload(session: Session, *, payload: dict, caller: TokenClaims) -> dict:
    """
    Create a product owned by the caller.

    Fields are validated before the role check, so an incomplete payload is
    a 400 whoever sends it.

    Raises:
        ValidationError: name/price/stock missing or malformed
        AuthorizationError: caller is not a seller
    """
    fields = validate_product_payload(payload)
    _require_seller(caller, "upload")

    product = Product(seller_id=caller.id, **fields)
    session.add(product)
    session.commit()
    return product.to_dict()


def remove(session: Session, *, product_id: int, caller: TokenClaims) -> None:
    """
    Delete one of the caller's products.

    A missing product and another seller's product look the same to the
    caller: both raise NotFoundError. Order items referencing the product are
    removed by the foreign key cascade.
    """
    _require_seller(caller, "delete")

    deleted = (
        session.query(Product)
        .filter(Product.id == product_id, Product.seller_id == caller.id)
        .delete(synchronize_session=False)
    )
    session.commit()

    if deleted == 0:
        raise NotFoundError("Product not found or not owned by you")
