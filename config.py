"""Application configuration module."""

import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# Values that must never sign production sessions.
INSECURE_SECRETS = frozenset(
    {
        "change-me",
        "secret",
        "your-secret-key-change-in-production",
    }
)


class Config:
    """Base configuration for the Flask application."""

    # Core
    APP_ENV = os.getenv("APP_ENV", "development").strip().lower()
    IS_PRODUCTION = APP_ENV == "production"
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    EXPOSE_ERROR_DETAIL = _env_flag("EXPOSE_ERROR_DETAIL", not IS_PRODUCTION)

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Credentials
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt:32768:8:1")
    PASSWORD_MIN_LENGTH = 6

    # Sessions (Flask-JWT-Extended). No fallback secret: create_app refuses to
    # start production without one and generates a throwaway key elsewhere.
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
    JWT_ALGORITHM = "HS256"
    SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(7 * 24 * 60 * 60)))
    JWT_TOKEN_LOCATION = ["cookies"]
    JWT_ACCESS_COOKIE_NAME = "auth_token"
    JWT_ACCESS_COOKIE_PATH = "/"
    JWT_COOKIE_SAMESITE = "Lax"
    JWT_COOKIE_SECURE = _env_flag("JWT_COOKIE_SECURE", IS_PRODUCTION)
    # SameSite=Lax is the only cross-site guard; no double-submit token.
    JWT_COOKIE_CSRF_PROTECT = False
    JWT_SESSION_COOKIE = False

    # Verification links
    APP_BASE_URL = os.getenv("APP_BASE_URL") or (
        None if IS_PRODUCTION else "http://localhost:3000"
    )
    VERIFICATION_PATH = os.getenv("VERIFICATION_PATH", "/verify-email")

    # Email (Flask-Mail); without MAIL_SERVER links are logged instead of sent
    MAIL_SERVER = os.getenv("MAIL_SERVER")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_USE_TLS = _env_flag("MAIL_USE_TLS", True)
    MAIL_USE_SSL = _env_flag("MAIL_USE_SSL", False)
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_FROM_EMAIL", "noreply@lostnfound.com")
    MAIL_WORKERS = int(os.getenv("MAIL_WORKERS", "2"))

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]
