"""Administrator endpoints gated on the session role."""

from __future__ import annotations

from flask import Blueprint, jsonify

from models.user import Role
from utils.access import get_workflow, role_required

admin_bp = Blueprint("admin", __name__)


@admin_bp.route("/users", methods=["GET"])
@role_required(Role.ADMIN.value)
def list_users():
    """Return every account for review by administrators."""

    users = get_workflow().directory.list_users()
    return jsonify([user.to_admin_dict() for user in users])
