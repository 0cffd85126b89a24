"""Application factory."""

import atexit
import json
import logging
import os
import secrets
import uuid
from datetime import timedelta
from http import HTTPStatus

from flask import Flask, jsonify, g, request
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_mail import Mail
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException, Unauthorized

from config import INSECURE_SECRETS, Config
from directory.sql_directory import SQLAlchemyUserDirectory
from models import db
from notifications import BackgroundNotifier, LogNotifier, MailNotifier
from notifications.abstract_notifier import AbstractNotifier
from routes.admin import admin_bp
from routes.auth import auth_bp
from security.passwords import PasswordHasher
from security.session_tokens import SessionTokenSigner
from security.verification_tokens import VerificationTokenGenerator
from services.auth_workflow import AuthWorkflow
from services.errors import AuthError, ErrorKind, ValidationError
from utils.access import WORKFLOW_EXTENSION, load_session_user

migrate = Migrate()
jwt = JWTManager()
mail = Mail()

ERROR_RESPONSES = {
    ErrorKind.VALIDATION: (HTTPStatus.BAD_REQUEST, "Invalid request"),
    ErrorKind.DUPLICATE_USERNAME: (HTTPStatus.BAD_REQUEST, "Username already taken"),
    ErrorKind.DUPLICATE_EMAIL: (HTTPStatus.BAD_REQUEST, "Email already registered"),
    ErrorKind.INVALID_CREDENTIALS: (HTTPStatus.UNAUTHORIZED, "Invalid credentials"),
    ErrorKind.INVALID_TOKEN: (HTTPStatus.BAD_REQUEST, "Invalid verification link"),
    ErrorKind.INVALID_OR_EXPIRED_TOKEN: (HTTPStatus.BAD_REQUEST, "Invalid or expired token"),
    ErrorKind.NOTIFIER_FAILURE: (HTTPStatus.INTERNAL_SERVER_ERROR, "Request failed. Please try again."),
    ErrorKind.STORAGE_FAILURE: (HTTPStatus.INTERNAL_SERVER_ERROR, "Request failed. Please try again."),
}

VALIDATION_MESSAGES = {
    ("credentials", "required"): "Username and password required",
    ("confirmPassword", "mismatch"): "Passwords do not match",
    ("password", "too_short"): "Password must be at least {min_length} characters",
    ("email", "invalid"): "Invalid email address",
}


def create_app(
    config_class: type[Config] = Config,
    notifier: AbstractNotifier | None = None,
) -> Flask:
    """Create and configure the Flask application.

    ``notifier`` replaces the mail transport built from configuration.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    _configure_logging(app)
    _configure_secrets(app)

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    _configure_sessions(app)
    mail.init_app(app)

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    app.extensions[WORKFLOW_EXTENSION] = _build_workflow(app, notifier)

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    # Errors
    _register_error_handlers(app)

    return app


def _configure_logging(app: Flask) -> None:
    level = str(app.config.get("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    app.logger.setLevel(level)


def _configure_secrets(app: Flask) -> None:
    """Refuse to run production without a real signing secret."""

    secret = app.config.get("JWT_SECRET_KEY")
    production = app.config.get("IS_PRODUCTION", False)

    if production:
        if not secret or secret in INSECURE_SECRETS:
            raise RuntimeError(
                "JWT_SECRET_KEY is missing or uses a known default. "
                "Configure it in the environment."
            )
        if not app.config.get("APP_BASE_URL"):
            raise RuntimeError("APP_BASE_URL is not set. Verification links need it.")
    elif not secret:
        app.config["JWT_SECRET_KEY"] = secrets.token_urlsafe(32)
        app.logger.warning(
            "JWT_SECRET_KEY is not set; using a random key. Sessions end on restart."
        )


def _configure_sessions(app: Flask) -> None:
    ttl = timedelta(seconds=int(app.config.get("SESSION_TTL_SECONDS", 7 * 24 * 60 * 60)))
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = ttl
    jwt.init_app(app)

    jwt.user_lookup_loader(load_session_user)
    # Missing, forged, expired or orphaned cookies all read as "not logged in".
    jwt.unauthorized_loader(_session_rejected)
    jwt.invalid_token_loader(_session_rejected)
    jwt.expired_token_loader(_session_rejected)
    jwt.user_lookup_error_loader(_session_rejected)


def _session_rejected(*_args):
    return _http_error_response(Unauthorized("Authentication required."))


def _build_notifier(app: Flask) -> AbstractNotifier:
    path = app.config.get("VERIFICATION_PATH", "/verify-email")
    if app.config.get("MAIL_SERVER"):
        delivery = MailNotifier(app, mail, verification_path=path)
    else:
        delivery = LogNotifier(verification_path=path)
    background = BackgroundNotifier(
        delivery, max_workers=int(app.config.get("MAIL_WORKERS", 2))
    )
    # Queued mail is flushed before the interpreter exits.
    atexit.register(background.shutdown)
    return background


def _build_signer(app: Flask) -> SessionTokenSigner:
    return SessionTokenSigner(ttl=app.config["JWT_ACCESS_TOKEN_EXPIRES"])


def _build_workflow(app: Flask, notifier: AbstractNotifier | None) -> AuthWorkflow:
    return AuthWorkflow(
        directory=SQLAlchemyUserDirectory(),
        hasher=PasswordHasher(app.config["PASSWORD_HASH_METHOD"]),
        signer=_build_signer(app),
        token_generator=VerificationTokenGenerator(),
        notifier=notifier or _build_notifier(app),
        base_url=app.config["APP_BASE_URL"],
        min_password_length=int(app.config.get("PASSWORD_MIN_LENGTH", 6)),
    )


def _auth_error_payload(app: Flask, error: AuthError) -> tuple[dict, int]:
    status, message = ERROR_RESPONSES[error.kind]
    payload = {"error": message, "code": error.kind.value}

    if isinstance(error, ValidationError):
        template = VALIDATION_MESSAGES.get(
            (error.field, error.reason), "All fields are required"
        )
        payload["error"] = template.format(
            min_length=app.config.get("PASSWORD_MIN_LENGTH", 6)
        )
        payload["field"] = error.field
    elif status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        app.logger.error("Request failed with %s: %s", error.kind.value, error.detail)
        if app.config.get("EXPOSE_ERROR_DETAIL"):
            payload["detail"] = error.detail

    return payload, int(status)


def _http_error_response(error: HTTPException):
    request_id = g.get("request_id") or str(uuid.uuid4())
    response = error.get_response()
    payload = {
        "error": getattr(error, "name", "Error"),
        "detail": error.description,
        "request_id": request_id,
    }
    response.data = json.dumps(payload)
    response.content_type = "application/json"
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_request_id_header(response):
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(AuthError)
    def _handle_auth_error(error: AuthError):
        payload, status = _auth_error_payload(app, error)
        payload["request_id"] = g.get("request_id") or str(uuid.uuid4())
        response = jsonify(payload)
        response.status_code = status
        return response

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        return _http_error_response(error)

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        request_id = g.get("request_id") or str(uuid.uuid4())
        app.logger.exception("Unhandled application error", exc_info=error)
        payload = {
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred.",
            "request_id": request_id,
        }
        response = jsonify(payload)
        response.status_code = 500
        response.headers.setdefault("X-Request-ID", request_id)
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)), threaded=True)
