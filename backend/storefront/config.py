# backend/storefront/config.py
from __future__ import annotations
import os

DEFAULT_SECRET_KEY = "dev-secret-key-change-me"


def _database_uri() -> str:
    # DATABASE_URL wins; otherwise assemble a PostgreSQL URL from PG_* variables
    url = os.environ.get("DATABASE_URL")
    if url:
        return url

    host = os.environ.get("PG_HOST")
    if host:
        port = os.environ.get("PG_PORT", "5432")
        name = os.environ.get("PG_DATABASE", "ecommerce")
        user = os.environ.get("PG_USER", "postgres")
        password = os.environ.get("PG_PASSWORD", "")
        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"

    # SQLite DB stored in backend/instance/storefront.sqlite3
    return "sqlite:///storefront.sqlite3"


class Config:
    # Signs session tokens; the default is for local development only
    SECRET_KEY = os.environ.get("SECRET_KEY", DEFAULT_SECRET_KEY)

    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    TOKEN_ALGORITHM = "HS256"
    TOKEN_TTL_SECONDS = int(os.environ.get("TOKEN_TTL_SECONDS", "3600"))

    # Allowed drift between the client's order total and the recomputed one
    ORDER_TOTAL_TOLERANCE_CENTS = int(os.environ.get("ORDER_TOTAL_TOLERANCE_CENTS", "1"))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000",
        ).split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
