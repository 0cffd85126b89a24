"""Authentication blueprint: signup, email verification, login and sessions."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import (
    current_user,
    jwt_required,
    set_access_cookies,
    unset_access_cookies,
)

from services.auth_workflow import VerificationOutcome
from utils.access import get_workflow
from utils.request_validation import parse_json_request, text_field

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Create an unverified account and send its verification link."""
    payload = parse_json_request(request)

    result = get_workflow().signup(
        username=text_field(payload, "username"),
        email=text_field(payload, "email"),
        password=text_field(payload, "password", strip=False),
        confirm_password=text_field(payload, "confirmPassword", strip=False),
    )

    return (
        jsonify(
            {
                "message": "Signup successful! Check your email to verify your account.",
                "redirect": result.redirect,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify", methods=["GET"])
def verify_email() -> tuple:
    """Consume a verification token from the emailed link."""
    token = (request.args.get("token") or "").strip()

    result = get_workflow().verify(token)
    if result.outcome is VerificationOutcome.ALREADY_VERIFIED:
        return jsonify({"message": "Email already verified"}), HTTPStatus.OK

    return (
        jsonify(
            {
                "message": "Email verified successfully! You can now log in.",
                "username": result.username,
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/verify/resend", methods=["POST"])
def resend_verification() -> tuple:
    """Send the outstanding verification link again without revealing accounts."""
    payload = parse_json_request(request)
    get_workflow().resend_verification(text_field(payload, "email"))
    return (
        jsonify(
            {"message": "If that account is awaiting verification, a new email is on its way."}
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/login", methods=["POST"])
def login():
    """Check credentials and set the signed session cookie."""
    payload = parse_json_request(request)

    result = get_workflow().login(
        username=text_field(payload, "username"),
        password=text_field(payload, "password", strip=False),
    )
    current_app.logger.info("User %s logged in", result.user.username)

    response = jsonify({"message": "Login successful", "user": result.user.to_dict()})
    set_access_cookies(response, result.token, max_age=result.max_age)
    return response, HTTPStatus.OK


@auth_bp.route("/logout", methods=["POST"])
def logout():
    response = jsonify({"message": "Logged out"})
    unset_access_cookies(response)
    return response, HTTPStatus.OK


@auth_bp.route("/session", methods=["GET"])
@jwt_required()
def session() -> tuple:
    """Return the user behind the session cookie."""
    return jsonify({"user": current_user.to_dict()}), HTTPStatus.OK
