from __future__ import annotations

from ..extensions import db
from storefront.time_utils import to_utc_z

ROLE_BUYER = "buyer"
ROLE_SELLER = "seller"
VALID_ROLES = (ROLE_BUYER, ROLE_SELLER)


class User(db.Model):
    """
    Registered account. Immutable after registration.

    Products reference their seller and orders reference their buyer;
    neither is owned by the user row.
    """
    __tablename__ = "users"
    __table_args__ = (
        db.CheckConstraint("role IN ('buyer', 'seller')", name="ck_users_role"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)

    # Bcrypt hashed password
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.String(16), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "created_at": to_utc_z(self.created_at),
        }
