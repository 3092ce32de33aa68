# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Registration and credential checks. Passwords are hashed with bcrypt and
verified with bcrypt.checkpw, which compares in constant time.

Registration runs its existence check and insert in one transaction, and the
unique constraint on users.email backs the check up when two requests race.
"""
from __future__ import annotations

import bcrypt
from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import AuthError, ConflictError, ValidationError
from ..models import User, VALID_ROLES
from ..validation import clean_string
from .token_service import issue_token

DEFAULT_BCRYPT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72  # bcrypt ignores anything past 72 bytes

# Checked when the email is unknown so both login failures cost one bcrypt round
_dummy_hashes: dict[int, bytes] = {}


def _bcrypt_rounds() -> int:
    return current_app.config.get("BCRYPT_ROUNDS", DEFAULT_BCRYPT_ROUNDS)


def _dummy_hash() -> bytes:
    rounds = _bcrypt_rounds()
    if rounds not in _dummy_hashes:
        _dummy_hashes[rounds] = bcrypt.hashpw(b"storefront-dummy-password", bcrypt.gensalt(rounds=rounds))
    return _dummy_hashes[rounds]


def normalize_email(email) -> str:
    return clean_string(email, "email", max_length=255).lower()


def hash_password(password: str) -> str:
    """Hash password using bcrypt with a per-password salt."""
    salt = bcrypt.gensalt(rounds=_bcrypt_rounds())
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if password matches the stored bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def _validate_password(password) -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError("password must be a non-empty string")
    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password


def email_taken(session: Session, email: str) -> bool:
    return session.query(User.id).filter(User.email == email).first() is not None


def register(session: Session, *, email, password, role) -> dict:
    """
    Create a user account and return its public fields.

    Raises:
        ValidationError: role not buyer/seller, or email/password unusable
        ConflictError: email already registered
    """
    if role not in VALID_ROLES:
        raise ValidationError("Invalid role")

    email = normalize_email(email)
    password = _validate_password(password)

    if email_taken(session, email):
        raise ConflictError("User already exists")

    user = User(email=email, password_hash=hash_password(password), role=role)
    session.add(user)

    try:
        session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same email
        session.rollback()
        raise ConflictError("User already exists")

    return user.to_dict()


def authenticate(session: Session, *, email, password) -> User:
    """
    Return the user whose email and password match.

    Raises AuthError("Invalid credentials") for an unknown email, a wrong
    password, or unusable input alike.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        raise AuthError("Invalid credentials", code="invalid_credentials")

    if len(password.encode('utf-8')) > MAX_PASSWORD_BYTES:
        raise AuthError("Invalid credentials", code="invalid_credentials")

    user = session.query(User).filter(User.email == email.strip().lower()).first()

    if user is None:
        bcrypt.checkpw(password.encode('utf-8'), _dummy_hash())
        raise AuthError("Invalid credentials", code="invalid_credentials")

    if not verify_password(password, user.password_hash):
        raise AuthError("Invalid credentials", code="invalid_credentials")

    return user


def login(session: Session, *, email, password) -> dict:
    """Authenticate and issue a session token. Returns {token, role, user}."""
    user = authenticate(session, email=email, password=password)
    token = issue_token(user)
    return {"token": token, "role": user.role, "user": user.to_dict()}
