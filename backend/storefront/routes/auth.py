# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

# backend/storefront/routes/auth.py
"""
Registration and login routes.

Tokens returned by /login go back in the Authorization header of protected
requests, as the raw token.
"""

from flask import Blueprint, request, jsonify, current_app

from ..extensions import db
from ..errors import InternalError, ServiceError
from ..services import auth_service
from ..validation import require_fields


auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/register")
def register_route():
    """
    Create a buyer or seller account.

    Body: {email, password, role}
    """
    data = request.get_json(silent=True) or {}

    try:
        require_fields(data, ["email", "password", "role"])
        user = auth_service.register(
            db.session,
            email=data["email"],
            password=data["password"],
            role=data["role"],
        )
    except ServiceError as e:
        current_app.logger.warning("Registration rejected: %s", e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to register user")
        return jsonify(InternalError("Error registering user").to_dict()), 500

    current_app.logger.info("Registered user %s as %s", user["id"], user["role"])
    return jsonify({"message": "User registered successfully", "user": user}), 201


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and issue a session token.

    Returns the token and the role embedded in it. Unknown email and wrong
    password produce the same 401 response.
    """
    data = request.get_json(silent=True) or {}

    try:
        require_fields(data, ["email", "password"])
        result = auth_service.login(db.session, email=data["email"], password=data["password"])
    except ServiceError as e:
        current_app.logger.warning("Login rejected: %s", e.message)
        return jsonify(e.to_dict()), e.status_code
    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify(InternalError("Error logging in").to_dict()), 500

    return jsonify({
        "message": "Login successful",
        "token": result["token"],
        "role": result["role"],
    }), 200
