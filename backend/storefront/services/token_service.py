# Overview: Service-layer operations for session tokens; signs and verifies JWTs.

"""
Session Token Service

Tokens are self-contained JWTs signed with the app SECRET_KEY. They carry
the user's id, email and role as they were at login, plus iat/exp. No
database lookup happens during verification, so a token keeps authorizing
the role it was issued with until it expires.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from flask import current_app
from jose import JWTError, jwt

from ..errors import AuthError
from ..models import User, VALID_ROLES
from storefront.time_utils import utcnow


@dataclass(frozen=True)
class TokenClaims:
    """Identity asserted by a verified session token."""
    id: int
    email: str
    role: str

    def to_dict(self) -> dict:
        return {"id": self.id, "email": self.email, "role": self.role}


def issue_token(user: User, *, expires_in: timedelta | None = None) -> str:
    """Sign a token embedding {id, email, role} with a limited lifetime."""
    if expires_in is None:
        expires_in = timedelta(seconds=current_app.config["TOKEN_TTL_SECONDS"])

    now = utcnow()
    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(
        claims,
        current_app.config["SECRET_KEY"],
        algorithm=current_app.config["TOKEN_ALGORITHM"],
    )


def extract_token(header_value: str | None) -> str | None:
    """
    Pull the token out of an Authorization header.

    Clients send the raw token; a "Bearer " prefix is tolerated.
    """
    if header_value is None:
        return None
    value = header_value.strip()
    if value[:7].lower() == "bearer ":
        value = value[7:].strip()
    return value or None


def verify_token(token: str | None) -> TokenClaims:
    """
    Verify signature and expiry and return the embedded claims.

    Raises AuthError with status 403 when no token is given and 401 when the
    token is malformed, tampered with, expired, or missing claims.
    """
    if not token:
        raise AuthError("No token provided", status_code=403, code="auth_required")

    try:
        payload = jwt.decode(
            token,
            current_app.config["SECRET_KEY"],
            algorithms=[current_app.config["TOKEN_ALGORITHM"]],
        )
    except JWTError:
        raise AuthError()

    user_id = payload.get("id")
    email = payload.get("email")
    role = payload.get("role")

    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise AuthError()
    if not isinstance(email, str) or role not in VALID_ROLES:
        raise AuthError()

    return TokenClaims(id=user_id, email=email, role=role)
