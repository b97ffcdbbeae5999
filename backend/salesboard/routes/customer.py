# Overview: Flask API routes for the customer dashboard; read-only, field-filtered records.

from flask import Blueprint, jsonify, g

from ..decorators import require_auth, require_role
from ..models import Role
from ..services import record_service, view_service, visibility_service


customer_bp = Blueprint("customer", __name__, url_prefix="/api/customer")


@customer_bp.get("/records")
@require_auth
@require_role(Role.CUSTOMER)
def my_records_route():
    """
    Records whose customer name maps to the caller's username, with only
    the fields administrators made visible to customers. No ids.
    """
    visibility = visibility_service.get_customer_visibility()
    records = view_service.records_for_customer(record_service.list_records(), g.current_user.username)

    return jsonify({
        "headers": [
            {"field": f, "label": view_service.format_header(f)}
            for f in view_service.visible_headers(visibility)
        ],
        "records": view_service.project_all(records, visibility),
        "count": len(records),
    }), 200
