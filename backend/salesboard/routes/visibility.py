# Overview: Flask API routes for field visibility; admin columns and the customer view.

# backend/salesboard/routes/visibility.py
"""
Field visibility routes.

PUT accepts either a full map ({"visibility": {"date": true, ...}}) which
replaces the current one, or {"toggle": "<field>"} which flips one flag.
"""

from flask import Blueprint, request, jsonify, g, current_app

from ..decorators import require_auth, require_role
from ..models import Role
from ..services import record_service, view_service, visibility_service
from ..validation import ValidationError, validate_visibility_field, validate_visibility_map


visibility_bp = Blueprint("visibility", __name__, url_prefix="/api/visibility")


def _response(visibility: dict):
    return jsonify({
        "columns": view_service.derive_columns(record_service.list_records()),
        "visibility": visibility,
        "labels": {f: view_service.format_header(f) for f in visibility},
    }), 200


def _parse_update(data) -> tuple[str | None, dict | None]:
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON payload")
    if "toggle" in data:
        field = data.get("toggle")
        if not isinstance(field, str) or not field.strip():
            raise ValidationError("toggle must be a field name")
        return validate_visibility_field(field), None
    if "visibility" in data:
        return None, validate_visibility_map(data.get("visibility"))
    raise ValidationError("Provide visibility or toggle")


@visibility_bp.get("/admin")
@require_auth
@require_role(Role.ADMIN)
def get_admin_visibility_route():
    return _response(visibility_service.get_admin_visibility(g.session_token))


@visibility_bp.put("/admin")
@require_auth
@require_role(Role.ADMIN)
def update_admin_visibility_route():
    """Column map of this session's admin table."""
    try:
        field, mapping = _parse_update(request.get_json(silent=True))
        if field is not None:
            visibility = visibility_service.toggle_admin_field(g.session_token, field)
        else:
            visibility = visibility_service.set_admin_visibility(g.session_token, mapping)
        return _response(visibility)

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update admin columns")
        return jsonify({"error": "Internal server error"}), 500


@visibility_bp.get("/customer")
@require_auth
@require_role(Role.ADMIN)
def get_customer_visibility_route():
    return _response(visibility_service.get_customer_visibility())


@visibility_bp.put("/customer")
@require_auth
@require_role(Role.ADMIN)
def update_customer_visibility_route():
    """Fields every customer can see on their dashboard."""
    try:
        field, mapping = _parse_update(request.get_json(silent=True))
        if field is not None:
            visibility = visibility_service.toggle_customer_field(field)
        else:
            visibility = visibility_service.set_customer_visibility(mapping)
        current_app.logger.info("Customer view updated by %s", g.current_user.username)
        return _response(visibility)

    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except Exception:
        current_app.logger.exception("Failed to update customer view")
        return jsonify({"error": "Internal server error"}), 500
