# Overview: Flask API routes for user management; parses input and returns JSON responses.

# backend/salesboard/routes/users.py
"""
User management (administrators only).

Passwords are listed in plain text, as the management screen shows them.
"""

from flask import Blueprint, request, jsonify, current_app

from ..decorators import require_auth, require_role
from ..models import Role
from ..services import user_service
from ..validation import ConflictError, ValidationError


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


def _user_row(user) -> dict:
    data = user.to_dict(include_password=True)
    data["access"] = user_service.access_label(user)
    return data


@users_bp.get("")
@require_auth
@require_role(Role.ADMIN)
def list_users_route():
    users = user_service.list_users()
    return jsonify({"users": [_user_row(u) for u in users], "count": len(users)}), 200


@users_bp.post("")
@require_auth
@require_role(Role.ADMIN)
def create_user_route():
    """
    Request body:
    - username: str (required)
    - password: str (required)
    - role: "Admin" | "Customer" (default Customer)
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return jsonify({"error": "username and password required"}), 400

        user = user_service.create_user(username, password, data.get("role", Role.CUSTOMER.value))
        return jsonify({"user": _user_row(user)}), 201

    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to create user")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<int:user_id>/role")
@require_auth
@require_role(Role.ADMIN)
def set_role_route(user_id: int):
    try:
        data = request.get_json(silent=True) or {}
        user = user_service.set_role(user_id, data.get("role"))
        if not user:
            return jsonify({"error": "User not found"}), 404
        current_app.logger.info("User %s role changed to %s", user.username, user.role)
        return jsonify({"user": _user_row(user)}), 200

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to change role")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/<int:user_id>/password")
@require_auth
@require_role(Role.ADMIN)
def set_password_route(user_id: int):
    """An empty password leaves the current one in place."""
    try:
        data = request.get_json(silent=True) or {}
        password = data.get("password")
        if password is not None and not isinstance(password, str):
            return jsonify({"error": "password must be a string"}), 400

        user = user_service.set_password(user_id, password)
        if not user:
            return jsonify({"error": "User not found"}), 404
        return jsonify({"user": _user_row(user)}), 200

    except Exception:
        current_app.logger.exception("Failed to change password")
        return jsonify({"error": "Internal server error"}), 500
