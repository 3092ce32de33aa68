# Overview: Request decorators for API routes.

from functools import wraps
from flask import request, jsonify, g, current_app

from .errors import AuthError, AuthorizationError
from .services import token_service


def require_auth(f):
    """
    Require a valid session token.

    Sets g.current_user to the TokenClaims embedded in the token.

    SECURITY: Returns 403 when no Authorization header is sent and 401 when
    the token is invalid or expired.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = token_service.extract_token(request.headers.get("Authorization"))

        try:
            g.current_user = token_service.verify_token(token)
        except AuthError as e:
            current_app.logger.warning("Rejected token on %s %s: %s", request.method, request.path, e.message)
            return jsonify(e.to_dict()), e.status_code

        return f(*args, **kwargs)

    return decorated_function


def require_role(role: str):
    """Require the authenticated caller's token to carry a specific role."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            # Ensure @require_auth was called first
            if not hasattr(g, "current_user"):
                e = AuthError("No token provided", status_code=403, code="auth_required")
                return jsonify(e.to_dict()), e.status_code

            if g.current_user.role != role:
                e = AuthorizationError(f"Only {role}s can perform this action")
                current_app.logger.warning(
                    "User %s with role %s denied %s %s",
                    g.current_user.id, g.current_user.role, request.method, request.path,
                )
                return jsonify(e.to_dict()), e.status_code

            return f(*args, **kwargs)

        return decorated_function
    return decorator
