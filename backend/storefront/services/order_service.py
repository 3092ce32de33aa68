# Overview: Service-layer operations for orders; encapsulates business logic and database work.

"""
Order Service

An order is a header row plus one item row per cart line, written in a single
transaction. The total is recomputed from the current product prices; the
client's figure is only checked against it, never stored.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.orm import Session

from ..errors import ValidationError
from ..models import Order, OrderItem, Product
from ..validation import coerce_int, format_cents, parse_money_cents, require_fields, require_object
from .token_service import TokenClaims

MAX_LINE_QUANTITY = 1_000_000
MAX_ORDER_TOTAL_CENTS = 2_147_483_647


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


def parse_cart(cart_items) -> list[tuple[int, int]]:
    """Validate cart lines into (product_id, quantity) pairs. Quantity defaults to 1."""
    if not isinstance(cart_items, list) or not cart_items:
        raise ValidationError("Order must contain at least one product")

    lines = []
    for index, item in enumerate(cart_items):
        if not isinstance(item, dict):
            raise ValidationError(f"products[{index}] must be an object")
        if item.get("id") is None:
            raise ValidationError(f"products[{index}].id is required")

        product_id = coerce_int(item["id"], f"products[{index}].id", minimum=1)

        quantity = item.get("quantity")
        if quantity is None:
            quantity = 1
        quantity = coerce_int(quantity, f"products[{index}].quantity", minimum=1, maximum=MAX_LINE_QUANTITY)

        lines.append((product_id, quantity))
    return lines


def create(session: Session, *, payload: dict, caller: TokenClaims) -> Order:
    """
    Persist an order for the caller and return it.

    Raises ValidationError for an empty cart, a missing or malformed total,
    unknown products, or a total that does not match current prices. Nothing
    is written unless every row is.
    """
    require_object(payload)
    if not payload.get("products"):
        raise ValidationError("Order must contain at least one product")
    require_fields(payload, ["total"])

    lines = parse_cart(payload["products"])
    client_total_cents = parse_money_cents(payload["total"], "total", maximum=MAX_ORDER_TOTAL_CENTS)
    tolerance = current_app.config.get("ORDER_TOTAL_TOLERANCE_CENTS", 1)

    try:
        product_ids = sorted({product_id for product_id, _ in lines})
        products = {
            p.id: p
            for p in lock_for_update(
                session.query(Product).filter(Product.id.in_(product_ids)).order_by(Product.id)
            ).all()
        }

        missing = [pid for pid in product_ids if pid not in products]
        if missing:
            raise ValidationError(
                "Some products do not exist",
                details={"missing_product_ids": missing},
            )

        total_cents = sum(products[pid].price_cents * qty for pid, qty in lines)
        if total_cents > MAX_ORDER_TOTAL_CENTS:
            raise ValidationError("Order total exceeds maximum allowed value")

        if abs(total_cents - client_total_cents) > tolerance:
            raise ValidationError(
                "Order total does not match current prices",
                details={"expected_total": format_cents(total_cents)},
            )

        order = Order(user_id=caller.id, total_cents=total_cents)
        session.add(order)
        session.flush()  # ensure order.id exists before adding items

        for product_id, quantity in lines:
            session.add(OrderItem(
                order_id=order.id,
                product_id=product_id,
                quantity=quantity,
                unit_price_cents=products[product_id].price_cents,
            ))

        session.commit()
    except Exception:
        session.rollback()
        raise

    return order


def get_order(session: Session, *, order_id: int, caller: TokenClaims) -> Order | None:
    """Return one of the caller's orders, or None."""
    return session.query(Order).filter(Order.id == order_id, Order.user_id == caller.id).first()


def list_orders(session: Session, *, caller: TokenClaims) -> list[dict]:
    orders = (
        session.query(Order)
        .filter(Order.user_id == caller.id)
        .order_by(Order.id.asc())
        .all()
    )
    return [o.to_dict() for o in orders]
