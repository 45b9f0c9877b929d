# backend/optistore/config.py
from __future__ import annotations
import os


class Config:
    # Signs the cookie that carries the store and super admin sessions
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///optistore.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    # Super admin credential pair (the password is hashed at start-up)
    SUPER_ADMIN_USERNAME = os.environ.get("SUPER_ADMIN_USERNAME", "superadmin")
    SUPER_ADMIN_PASSWORD = os.environ.get("SUPER_ADMIN_PASSWORD", "optical@admin2024")
    SUPER_ADMIN_PASSWORD_HASH = os.environ.get("SUPER_ADMIN_PASSWORD_HASH")

    STORE_SESSION_HOURS = int(os.environ.get("STORE_SESSION_HOURS", "24"))
    SUPER_ADMIN_SESSION_HOURS = int(os.environ.get("SUPER_ADMIN_SESSION_HOURS", "2"))

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

    BRAND_NAME = os.environ.get("BRAND_NAME", "Optical Store Manager")
    BRAND_TAGLINE = os.environ.get("BRAND_TAGLINE", "Eye care and eyewear")
    CURRENCY_LABEL = os.environ.get("CURRENCY_LABEL", "Rs.")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Browser origins allowed to call the API with the session cookie
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if origin.strip()
    ]
