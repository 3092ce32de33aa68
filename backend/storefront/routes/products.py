# Overview: Flask API routes for products operations; parses input and returns JSON responses.

# backend/storefront/routes/products.py
"""
Product catalog routes.

Listing is public. Uploading and deleting require a seller token, and a
seller can only delete their own products.
"""
from flask import Blueprint, request, jsonify, g, current_app

from ..extensions import db
from ..errors import InternalError, ServiceError
from ..models import ROLE_SELLER
from ..services import catalog_service
from ..decorators import require_auth, require_role

products_bp = Blueprint("products", __name__)


@products_bp.get("/products")
def list_products():
    """List every product that is in stock."""
    try:
        products = catalog_service.list_available(db.session)
    except Exception:
        current_app.logger.exception("Failed to list products")
        return jsonify(InternalError("Error fetching products").to_dict()), 500

    return jsonify(products), 200


@products_bp.post("/upload-product")
@require_auth
def upload_product_route():
    """
    Create a product owned by the calling seller.

    Body: {name, price, stock}. Price is a decimal amount, stock an integer;
    both may be 0.
    """
    payload = request.get_json(silent=True) or {}

    try:
        product = catalog_service.upload(db.session, payload=payload, caller=g.current_user)
    except ServiceError as e:
        current_app.logger.warning("Product upload rejected for user %s: %s", g.current_user.id, e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to upload product")
        return jsonify(InternalError("Error uploading product").to_dict()), 500

    current_app.logger.info("User %s uploaded product %s", g.current_user.id, product["id"])
    return jsonify({"message": "Product uploaded successfully", "product": product}), 201


@products_bp.delete("/products/<int:product_id>")
@require_auth
@require_role(ROLE_SELLER)
def delete_product_route(product_id: int):
    """Delete one of the caller's products; 404 if missing or owned by someone else."""
    try:
        catalog_service.remove(db.session, product_id=product_id, caller=g.current_user)
    except ServiceError as e:
        current_app.logger.warning("Product %s delete rejected for user %s: %s", product_id, g.current_user.id, e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return jsonify(InternalError("Error deleting product").to_dict()), 500

    current_app.logger.info("User %s deleted product %s", g.current_user.id, product_id)
    return jsonify({"message": "Product deleted successfully"}), 200
