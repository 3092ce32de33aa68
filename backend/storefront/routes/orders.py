# Overview: Flask API routes for orders operations; parses input and returns JSON responses.

# backend/storefront/routes/orders.py
"""Order routes. Any authenticated user can place and read their own orders."""

from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..errors import InternalError, NotFoundError, ServiceError
from ..services import order_service
from ..decorators import require_auth


orders_bp = Blueprint("orders", __name__, url_prefix="/orders")


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Place an order.

    Body: {products: [{id, quantity?, price?}], total}. Quantity defaults to
    1; line prices are ignored and the total must match current prices.
    """
    payload = request.get_json(silent=True) or {}

    try:
        order = order_service.create(db.session, payload=payload, caller=g.current_user)
    except ServiceError as e:
        current_app.logger.warning("Order rejected for user %s: %s", g.current_user.id, e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to create order")
        return jsonify(InternalError("Error creating order").to_dict()), 500

    current_app.logger.info(
        "User %s placed order %s with %d lines", g.current_user.id, order.id, len(order.items)
    )
    return jsonify({
        "message": "Order created successfully",
        "orderId": order.id,
        "order": order.to_dict(),
    }), 201


@orders_bp.get("")
@require_auth
def list_orders_route():
    """List the caller's orders with their items."""
    try:
        orders = order_service.list_orders(db.session, caller=g.current_user)
    except Exception:
        current_app.logger.exception("Failed to list orders")
        return jsonify(InternalError("Error fetching orders").to_dict()), 500

    return jsonify(orders), 200


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    """Fetch one of the caller's orders; other users' orders are 404."""
    try:
        order = order_service.get_order(db.session, order_id=order_id, caller=g.current_user)
    except Exception:
        current_app.logger.exception("Failed to load order")
        return jsonify(InternalError("Error fetching order").to_dict()), 500

    if order is None:
        e = NotFoundError("Order not found")
        return jsonify(e.to_dict()), e.status_code

    return jsonify(order.to_dict()), 200
