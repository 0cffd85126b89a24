"""Session cookie access checks for views."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import current_app
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from werkzeug.exceptions import Forbidden

from services.auth_workflow import AuthWorkflow, PublicUser

WORKFLOW_EXTENSION = "auth_workflow"


def get_workflow() -> AuthWorkflow:
    return current_app.extensions[WORKFLOW_EXTENSION]


def load_session_user(_jwt_header: dict, jwt_data: dict) -> PublicUser | None:
    """Resolve a decoded session cookie to its user for ``current_user``."""

    workflow = get_workflow()
    return workflow.user_for_claims(workflow.signer.claims_from_payload(jwt_data))


def role_required(*roles: str) -> Callable:
    """Only let sessions whose role is in ``roles`` reach the view."""

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") not in roles:
                raise Forbidden("Insufficient privileges.")
            return view(*args, **kwargs)

        return wrapper

    return decorator
